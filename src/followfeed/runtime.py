from __future__ import annotations

from contextvars import ContextVar, Token
import os

_VERBOSE_LOGGING: ContextVar[bool | None] = ContextVar(
    "followfeed_verbose_logging", default=None
)

_DEFAULT_ITEM_JOBS = 4
_MAX_ITEM_JOBS = 64


def _read_positive_int_env(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return min(value, _MAX_ITEM_JOBS)


def get_verbose_logging() -> bool:
    value = _VERBOSE_LOGGING.get()
    if value is not None:
        return value
    raw = (os.environ.get("FOLLOWFEED_VERBOSE") or "").strip().lower()
    return raw in {"1", "true", "yes", "on"}


def set_verbose_logging(enabled: bool) -> Token[bool | None]:
    return _VERBOSE_LOGGING.set(bool(enabled))


def reset_verbose_logging(token: Token[bool | None]) -> None:
    _VERBOSE_LOGGING.reset(token)


def get_item_jobs() -> int:
    return _read_positive_int_env("FOLLOWFEED_ITEM_JOBS", _DEFAULT_ITEM_JOBS)
