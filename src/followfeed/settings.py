from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

_DURATION_RE = re.compile(r"^(\d+)\s*(w|d|h|m|s)?$")
_DURATION_UNITS = {
    "w": timedelta(weeks=1),
    "d": timedelta(days=1),
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
}


@lru_cache(maxsize=1)
def load_dotenv_once() -> None:
    try:
        from dotenv import find_dotenv, load_dotenv

        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(env_path, override=False)
    except Exception:
        return


@dataclass(frozen=True)
class FetchSettings:
    timeout: float = 30.0
    max_attempts: int = 3
    user_agent: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )


@dataclass(frozen=True)
class CacheSettings:
    root: Path
    ttl: timedelta = timedelta(days=1)
    enabled: bool = True


def parse_bool(value: str | None, *, default: bool) -> bool:
    cleaned = (value or "").strip().lower()
    if not cleaned:
        return default
    return cleaned not in {"0", "false", "no", "off"}


def parse_duration(raw: str) -> timedelta:
    if not raw or raw == "0":
        return timedelta(0)
    cleaned = raw.strip().lower()
    match = _DURATION_RE.match(cleaned)
    if not match:
        raise ValueError(f"Invalid duration format: {raw!r}")
    return int(match.group(1)) * _DURATION_UNITS[match.group(2) or "s"]


def _read_float_env(name: str, default: float, *, minimum: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        return default


def _read_int_env(name: str, default: int, *, minimum: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


def fetch_settings_from_env() -> FetchSettings:
    load_dotenv_once()
    defaults = FetchSettings()
    return FetchSettings(
        timeout=_read_float_env("FOLLOWFEED_API_TIMEOUT", defaults.timeout, minimum=1.0),
        max_attempts=_read_int_env(
            "FOLLOWFEED_API_MAX_ATTEMPTS", defaults.max_attempts, minimum=1
        ),
        user_agent=(os.environ.get("FOLLOWFEED_USER_AGENT") or "").strip()
        or defaults.user_agent,
    )


def cache_settings_from_env() -> CacheSettings:
    load_dotenv_once()
    root = Path(
        os.environ.get(
            "FOLLOWFEED_CACHE",
            os.path.expanduser("~/.local/share/followfeed/cache/v1"),
        )
    )
    ttl = CacheSettings.ttl
    raw_ttl = (os.environ.get("FOLLOWFEED_CACHE_TTL") or "").strip()
    if raw_ttl:
        try:
            ttl = parse_duration(raw_ttl)
        except ValueError:
            pass
    enabled = not parse_bool(os.environ.get("FOLLOWFEED_DISABLE_CACHE"), default=False)
    return CacheSettings(root=root, ttl=ttl, enabled=enabled)
