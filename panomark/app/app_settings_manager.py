from __future__ import annotations
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Callable, Dict
from PySide6.QtCore import QSettings
import logging

logger = logging.getLogger(__name__)


class RunMode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    VERBOSE = "verbose"

    def __str__(self):
        return self.value
    def __repr__(self):
        return self.value


# ----------------------
# Defaults
# ----------------------
DEFAULTS: Dict[str, Any] = {
    "general": {
        "run_mode": RunMode.PRODUCTION.value,
        "logging_level": "INFO",  # "DEBUG", "INFO", "WARNING", "ERROR"
    },
    "view": {
        "rotation_step_deg": 5.0,
        "zoom_step": 0.25,
        "max_zoom": 5.0,
        "drag_sensitivity": 1.0,
    },
    "marker": {
        "hide_when_not_visible": True,
        "default_size": 32,
    },
}

SECTIONS = tuple(DEFAULTS)

# ---------------------
# Data model
# ---------------------
@dataclass
class GeneralConfig:
    run_mode: RunMode = RunMode.PRODUCTION
    logging_level: str = "INFO"

@dataclass
class ViewConfig:
    rotation_step_deg: float = 5.0
    zoom_step: float = 0.25
    max_zoom: float = 5.0
    drag_sensitivity: float = 1.0

@dataclass
class MarkerConfig:
    hide_when_not_visible: bool = True
    default_size: int = 32

@dataclass
class AppSettingsData:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    marker: MarkerConfig = field(default_factory=MarkerConfig)

# ----------------------
# Utility
# ----------------------
def _truthy(s: str) -> bool:
    return s.strip().lower() in ("1", "true", "yes", "on")


def _validate_run_mode(v: Any) -> RunMode:
    if isinstance(v, RunMode):
        return v
    mode = str(v).strip().lower()
    try:
        return RunMode(mode)
    except ValueError:
        return RunMode(DEFAULTS["general"]["run_mode"])

def _validate_logging_level(v: str) -> str:
    v = str(v).upper()
    return v if v in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

def _bounded_float(default: float, upper: float) -> Callable[[Any], float]:
    """Validator accepting floats in (0, upper], otherwise default."""
    def validate(v: Any) -> float:
        try:
            f = float(v)
        except (TypeError, ValueError):
            return default
        return f if (0 < f <= upper) else default
    return validate

_validate_rotation_step = _bounded_float(DEFAULTS["view"]["rotation_step_deg"], 90.0)
_validate_zoom_step = _bounded_float(DEFAULTS["view"]["zoom_step"], 2.0)
_validate_max_zoom = _bounded_float(DEFAULTS["view"]["max_zoom"], 10.0)
_validate_drag_sensitivity = _bounded_float(DEFAULTS["view"]["drag_sensitivity"], 10.0)

def _validate_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return _truthy(str(v))

def _validate_marker_size(v: Any) -> int:
    try:
        i = int(v)
    except (TypeError, ValueError):
        return DEFAULTS["marker"]["default_size"]
    return i if 1 <= i <= 512 else DEFAULTS["marker"]["default_size"]


# key -> validator, per section
_VALIDATORS: Dict[str, Dict[str, Callable[[Any], Any]]] = {
    "general": {
        "run_mode": lambda v: _validate_run_mode(v).value,
        "logging_level": _validate_logging_level,
    },
    "view": {
        "rotation_step_deg": _validate_rotation_step,
        "zoom_step": _validate_zoom_step,
        "max_zoom": _validate_max_zoom,
        "drag_sensitivity": _validate_drag_sensitivity,
    },
    "marker": {
        "hide_when_not_visible": _validate_bool,
        "default_size": _validate_marker_size,
    },
}


# ---------------------
# AppSettingManager
# ---------------------
class AppSettingsManager:
    """
    Application settings backed by QSettings.

    DEFAULTS in code are the base, stored QSettings values override them.
    Every value is validated on load, out-of-range values fall back to the
    default. set_* methods persist to QSettings immediately.
    """
    def __init__(self, org_domain: str = "PanoMark.org", app_name: str = "PanoMark"):
        self._settings = QSettings(org_domain, app_name)
        self._data = self._load_effective()

    # Read
    @property
    def data(self) -> AppSettingsData:
        return self._data

    @property
    def run_mode(self) -> RunMode:
        return self._data.general.run_mode

    @property
    def dev_mode(self) -> bool:
        return self.run_mode is RunMode.DEVELOPMENT

    @property
    def logging_level(self) -> str:
        return self._data.general.logging_level

    @property
    def rotation_step_deg(self) -> float:
        return self._data.view.rotation_step_deg

    @property
    def zoom_step(self) -> float:
        return self._data.view.zoom_step

    @property
    def max_zoom(self) -> float:
        return self._data.view.max_zoom

    @property
    def drag_sensitivity(self) -> float:
        return self._data.view.drag_sensitivity

    @property
    def hide_when_not_visible(self) -> bool:
        return self._data.marker.hide_when_not_visible

    @property
    def default_marker_size(self) -> int:
        return self._data.marker.default_size

    # Write
    def set_run_mode(self, v: str | RunMode) -> None:
        mode = _validate_run_mode(v)
        self._settings.setValue("general/run_mode", mode.value)
        self._data.general.run_mode = mode

    def set_logging_level(self, v: str) -> None:
        level = _validate_logging_level(v)
        self._settings.setValue("general/logging_level", level)
        self._data.general.logging_level = level

    def set_rotation_step_deg(self, v: float):
        rot = _validate_rotation_step(v)
        self._settings.setValue("view/rotation_step_deg", rot)
        self._data.view.rotation_step_deg = rot

    def set_zoom_step(self, v: float) -> None:
        step = _validate_zoom_step(v)
        self._settings.setValue("view/zoom_step", step)
        self._data.view.zoom_step = step

    def set_max_zoom(self, v: float) -> None:
        z = _validate_max_zoom(v)
        self._settings.setValue("view/max_zoom", z)
        self._data.view.max_zoom = z

    def set_drag_sensitivity(self, v: float) -> None:
        s = _validate_drag_sensitivity(v)
        self._settings.setValue("view/drag_sensitivity", s)
        self._data.view.drag_sensitivity = s

    def set_hide_when_not_visible(self, v: bool) -> None:
        hide = _validate_bool(v)
        self._settings.setValue("marker/hide_when_not_visible", hide)
        self._data.marker.hide_when_not_visible = hide

    def set_default_marker_size(self, v: int) -> None:
        size = _validate_marker_size(v)
        self._settings.setValue("marker/default_size", size)
        self._data.marker.default_size = size

    # Reset
    def reset_all_to_default(self) -> None:
        """Remove all user settings."""
        for section in SECTIONS:
            self._settings.remove(section)
        self._data = self._load_effective()

    def reset_section(self, section: str) -> None:
        """Reset a single section to its defaults."""
        if section not in SECTIONS:
            raise ValueError(f"Invalid section: {section}")
        self._settings.remove(section)
        self._data = self._load_effective()

    def to_dict(self) -> dict[str, Any]:
        data = {
            "general": asdict(self._data.general),
            "view": asdict(self._data.view),
            "marker": asdict(self._data.marker),
        }
        data["general"]["run_mode"] = self._data.general.run_mode.value
        return data

    # ---------- internals ---------------
    def _load_effective(self) -> AppSettingsData:
        """Apply QSettings overrides on top of DEFAULTS, validate and build the model."""
        merged = self._apply_qsettings_overrides(DEFAULTS)
        return self._make_model_from(merged)

    def _apply_qsettings_overrides(self, base: dict[str, Any]) -> dict[str, Any]:
        """
        Read the dict based settings and apply QSettings overrides.
        :param base:
        :return: apply QSettings overrides
        """
        merged: dict[str, Any] = {}
        for section, validators in _VALIDATORS.items():
            values = dict(base.get(section, {}))
            for key, validate in validators.items():
                v = self._settings.value(f"{section}/{key}", None)
                if v is not None:
                    values[key] = validate(v)
            merged[section] = values
        return merged

    def _make_model_from(self, merged: dict[str, Any]) -> AppSettingsData:
        """
        making model from merged dict and returning merged AppSettingsData
        :param merged:
        :return: merged AppSettingsData
        """
        def get(section: str, key: str) -> Any:
            value = merged.get(section, {}).get(key, DEFAULTS[section][key])
            return _VALIDATORS[section][key](value)

        return AppSettingsData(
            general=GeneralConfig(
                run_mode=_validate_run_mode(get("general", "run_mode")),
                logging_level=get("general", "logging_level"),
            ),
            view=ViewConfig(
                rotation_step_deg=get("view", "rotation_step_deg"),
                zoom_step=get("view", "zoom_step"),
                max_zoom=get("view", "max_zoom"),
                drag_sensitivity=get("view", "drag_sensitivity"),
            ),
            marker=MarkerConfig(
                hide_when_not_visible=get("marker", "hide_when_not_visible"),
                default_size=get("marker", "default_size"),
            ),
        )
