import os
from pathlib import Path
from typing import Any, overload

from dotenv import load_dotenv

from utils import traceroot_wrapper as traceroot

traceroot_logger = traceroot.get_logger("env")


def base_path() -> Path:
    return Path(__file__).parent.parent.parent


def to_path(path: str) -> Path:
    return base_path() / path


# Process environment wins over the project .env file
default_env_path = to_path(".env")
load_dotenv(dotenv_path=default_env_path)


@overload
def env(key: str) -> str | None: ...


@overload
def env(key: str, default: str) -> str: ...


@overload
def env(key: str, default: Any) -> Any: ...


def env(key: str, default=None):
    """
    Get environment variable.
    Empty values are treated as unset and fall back to the default.
    """
    value = os.getenv(key)
    if value is None or value.strip() == "":
        traceroot_logger.debug("Environment variable not set, using default", extra={"key": key, "has_default": default is not None})
        return default
    traceroot_logger.debug("Environment variable retrieved", extra={"key": key})
    return value


def env_int(key: str, default: int) -> int:
    value = env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        traceroot_logger.warning(f"[ENVIRONMENT] invalid integer for key {key}: {value!r}, using {default}")
        return default


def env_float(key: str, default: float | None = None) -> float | None:
    """Float setting; unset or invalid values return ``default``."""
    value = env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        traceroot_logger.warning(f"[ENVIRONMENT] invalid number for key {key}: {value!r}, using {default}")
        return default
