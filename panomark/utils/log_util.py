import logging, time, functools
from typing import Any, Callable


logger = logging.getLogger('panomark')

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _safe_repr(x, maxlen=120):
    try:
        r = repr(x)
    except Exception:
        r = '<repr error>'
    if len(r) > maxlen:
        r = r[:maxlen] + '...'
    return r


def log_io(level: int = logging.DEBUG, mask: tuple[str, ...] = ()):
    """
    Log arguments, result and elapsed time of the decorated function.
    Arguments named in mask are logged as ***.
    :param level: log level.
    :param mask: argument names whose values are hidden.
    """
    def deco(func: Callable):
        qualname = f"{func.__module__}.{func.__qualname__}"
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if logger.isEnabledFor(level):
                arg_repr = []
                names = func.__code__.co_varnames[:func.__code__.co_argcount]
                for i, a in enumerate(args[:len(names)]):
                    name = names[i]
                    if name in ("self", "cls"):
                        continue
                    val = "***" if name in mask else _safe_repr(a)
                    arg_repr.append(f"{name}={val}")
                for k, v in kwargs.items():
                    val = "***" if k in mask else _safe_repr(v)
                    arg_repr.append(f"{k}={val}")

                logger.log(level, "-> %s(%s)", qualname, ", ".join(arg_repr))

            t0 = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.exception("Exception in %s", qualname)
                raise
            dt = (time.perf_counter() - t0) * 1000.0
            if logger.isEnabledFor(level):
                logger.log(level, "<- %s [%0.1f ms] = %s", qualname, dt, _safe_repr(result))
            return result
        return wrapper
    return deco


def level_from_name(value: Any, default: int = logging.INFO) -> int:
    """
    Normalize value to a logging level.
    Invalid or unknown values fall back to default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)
        name = s.upper()
        if name in _VALID_LEVELS:
            return getattr(logging, name)
    return default
