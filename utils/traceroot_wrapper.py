"""
Logging and tracing entry point shared by every module.

When ``TRACEROOT_ENABLED`` is set, loggers and spans come from the traceroot
SDK. Otherwise plain ``logging`` loggers are returned and ``trace()`` leaves
the decorated function untouched.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

_project_root = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=_project_root / ".env")

_TRUTHY = {"1", "true", "yes", "on"}
_initialized = False


def is_enabled() -> bool:
    return os.getenv("TRACEROOT_ENABLED", "").strip().lower() in _TRUTHY


def _init_traceroot() -> None:
    global _initialized
    if _initialized:
        return
    import traceroot

    traceroot.init()
    _initialized = True


def _init_logging() -> None:
    global _initialized
    if _initialized:
        return
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    if is_enabled():
        _init_traceroot()
        import traceroot

        return traceroot.get_logger(name)
    _init_logging()
    return logging.getLogger(name)


def trace(*args, **kwargs):
    """Decorator factory: a traceroot span when enabled, otherwise a no-op."""
    if is_enabled():
        _init_traceroot()
        import traceroot

        return traceroot.trace(*args, **kwargs)

    def decorator(func):
        return func

    return decorator
