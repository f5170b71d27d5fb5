import os

# Must be set before the QApplication is created.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from pathlib import Path

import pytest
from PySide6.QtCore import QSettings


@pytest.fixture
def tmp_settings(tmp_path: Path):
    """Point QSettings at a temporary folder so tests don't share settings."""
    for fmt in (QSettings.NativeFormat, QSettings.IniFormat):
        QSettings.setPath(fmt, QSettings.UserScope, str(tmp_path / "settings"))
    s = QSettings("PanoMark.org", "PanoMark")
    s.clear()
    s.sync()
    yield s
    s.clear()


@pytest.fixture
def settings_manager(tmp_settings):
    from panomark.app.app_settings_manager import AppSettingsManager
    return AppSettingsManager()
