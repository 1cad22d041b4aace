from __future__ import annotations

import os
from typing import Mapping, Protocol, runtime_checkable

from ..settings import load_dotenv_once

COOKIE_ENV_PREFIX = "BILIBILI_COOKIE_"


@runtime_checkable
class CredentialStore(Protocol):
    def lookup(self, account_id: str) -> str | None: ...


class EnvCredentialStore:
    """Cookies from ``BILIBILI_COOKIE_<uid>`` variables (``.env`` included)."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        if environ is None:
            load_dotenv_once()
            environ = os.environ
        self._environ = environ

    def lookup(self, account_id: str) -> str | None:
        raw = self._environ.get(f"{COOKIE_ENV_PREFIX}{account_id}")
        if raw is None:
            return None
        cookie = raw.strip()
        return cookie or None


class MappingCredentialStore:
    def __init__(self, cookies: Mapping[str, str]) -> None:
        self._cookies = dict(cookies)

    def lookup(self, account_id: str) -> str | None:
        return self._cookies.get(str(account_id)) or None
