from __future__ import annotations

import random
import sys
import time
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..settings import FetchSettings, fetch_settings_from_env

_TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(message, file=sys.stderr, flush=True)


@dataclass(frozen=True)
class FetchResponse:
    status_code: int
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@runtime_checkable
class Fetcher(Protocol):
    def get(self, url: str, headers: dict[str, str]) -> FetchResponse: ...


def _retry_delay_seconds(attempt: int) -> float:
    base = min(20.0, 1.0 * (2 ** max(0, attempt - 1)))
    return base + random.uniform(0.0, 0.35)


def _retry_after_seconds(resp: object, attempt: int) -> float:
    headers = getattr(resp, "headers", None) or {}
    retry_after_raw = headers.get("Retry-After")
    if retry_after_raw:
        try:
            return max(0.0, float(retry_after_raw))
        except ValueError:
            pass
    return _retry_delay_seconds(attempt)


class RequestsFetcher:
    def __init__(self, settings: FetchSettings | None = None) -> None:
        self.settings = settings or fetch_settings_from_env()

    def get(self, url: str, headers: dict[str, str]) -> FetchResponse:
        import requests

        merged = {"User-Agent": self.settings.user_agent, **headers}
        max_attempts = self.settings.max_attempts

        last_exc: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                response = requests.get(
                    url, headers=merged, timeout=self.settings.timeout
                )
            except requests.RequestException as exc:
                last_exc = exc
                if attempt >= max_attempts:
                    break
                wait = _retry_delay_seconds(attempt)
                _log(
                    f"  bilibili request failed ({type(exc).__name__}); retrying in {wait:.1f}s "
                    f"(attempt {attempt}/{max_attempts})"
                )
                time.sleep(wait)
                continue

            if response.status_code in _TRANSIENT_STATUSES and attempt < max_attempts:
                wait = _retry_after_seconds(response, attempt)
                _log(
                    f"  bilibili returned {response.status_code}; retrying in {wait:.1f}s "
                    f"(attempt {attempt}/{max_attempts})"
                )
                time.sleep(wait)
                continue

            response.raise_for_status()
            return FetchResponse(status_code=response.status_code, body=response.content)

        if last_exc is not None:
            raise last_exc
        raise RuntimeError(f"bilibili request failed unexpectedly: {url}")
