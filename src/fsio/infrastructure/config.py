"""Configuration constants, .env parsing, and I/O settings."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

ENV_PREFIX = "FSIO_"

ONE_KB: int = 1024
ONE_MB: int = ONE_KB * ONE_KB
ONE_GB: int = ONE_KB * ONE_MB
MAX_INT32: int = 2**31 - 1


def read_env_file(keys: list[str]) -> dict[str, str]:
    """Parse .env file and return values for requested keys.

    Does NOT load into os.environ; callers decide what to do with values.
    """
    env_file = Path.cwd() / ".env"
    try:
        content = env_file.read_text()
    except OSError:
        return {}

    result: dict[str, str] = {}
    wanted = set(keys)

    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        eq_idx = trimmed.find("=")
        if eq_idx == -1:
            continue
        key = trimmed[:eq_idx].strip()
        if key not in wanted:
            continue
        value = trimmed[eq_idx + 1 :].strip()
        if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
            value = value[1:-1]
        if value:
            result[key] = value

    return result


class IOSettings(BaseModel):
    """Tunables shared by the stream and file helpers."""

    buffer_size: int = Field(default=8192, gt=0)
    skip_buffer_size: int = Field(default=2048, gt=0)
    default_encoding: str = "utf-8"
    log_level: str = "INFO"


_SETTING_KEYS = {
    "buffer_size": f"{ENV_PREFIX}BUFFER_SIZE",
    "skip_buffer_size": f"{ENV_PREFIX}SKIP_BUFFER_SIZE",
    "default_encoding": f"{ENV_PREFIX}DEFAULT_ENCODING",
    "log_level": f"{ENV_PREFIX}LOG_LEVEL",
}


def load_settings() -> IOSettings:
    """Build settings from os.environ, falling back to .env, then defaults."""
    env_config = read_env_file(list(_SETTING_KEYS.values()))
    values: dict[str, str] = {}
    for field, key in _SETTING_KEYS.items():
        value = os.environ.get(key) or env_config.get(key)
        if value:
            values[field] = value
    return IOSettings(**values)


SETTINGS: IOSettings = load_settings()

DEFAULT_BUFFER_SIZE: int = SETTINGS.buffer_size
SKIP_BUFFER_SIZE: int = SETTINGS.skip_buffer_size
