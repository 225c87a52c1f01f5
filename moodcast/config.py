"""
Moodcast — runtime configuration

Values come from the environment (a local .env is loaded first).
Nothing here is read by the pure analysis/forecast code directly; callers
pass timezone, horizon and seed in explicitly.
"""

import os
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def getenv_default(key: str, default: str) -> str:
    return os.environ.get(key, default)


def getenv_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer, got {raw!r}")


def resolve_timezone(name: str) -> tzinfo:
    """'UTC' / 'Europe/Berlin' → tzinfo. Unknown names are a startup error."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise RuntimeError(f"MOODCAST_TIMEZONE: unknown timezone {name!r}")


TIMEZONE_NAME:     str           = getenv_default("MOODCAST_TIMEZONE", "UTC")
TIMEZONE:          tzinfo        = resolve_timezone(TIMEZONE_NAME)
HOURS_AHEAD:       int           = getenv_int("MOODCAST_HOURS_AHEAD", 12)
MAX_HOURS_AHEAD:   int           = getenv_int("MOODCAST_MAX_HOURS_AHEAD", 168)
NOISE_SEED:        Optional[int] = getenv_int("MOODCAST_NOISE_SEED", None)
LOG_FILE:          Optional[str] = os.environ.get("MOODCAST_LOG_FILE") or None
LOG_LEVEL:         str           = getenv_default("MOODCAST_LOG_LEVEL", "INFO").upper()
