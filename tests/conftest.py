from __future__ import annotations

import json
import threading
import time
from typing import Any

import pytest

from followfeed.settings import CacheSettings
from followfeed.upstream.fetcher import FetchResponse
from followfeed.upstream.metadata import ArticleData


class FakeFetcher:
    def __init__(self, payload: Any, *, status_code: int = 200) -> None:
        if isinstance(payload, (bytes, str)):
            body = payload.encode("utf-8") if isinstance(payload, str) else payload
        else:
            body = json.dumps(payload).encode("utf-8")
        self.body = body
        self.status_code = status_code
        self.calls: list[tuple[str, dict[str, str]]] = []

    def get(self, url: str, headers: dict[str, str]) -> FetchResponse:
        self.calls.append((url, dict(headers)))
        return FetchResponse(status_code=self.status_code, body=self.body)


class FakeMetadata:
    def __init__(
        self,
        *,
        name: str = "Tester",
        articles: dict[Any, str] | None = None,
        delays: dict[Any, float] | None = None,
    ) -> None:
        self.name = name
        self.articles = articles or {}
        self.delays = delays or {}
        self.completed: list[Any] = []
        self._lock = threading.Lock()

    def resolve_display_name(self, account_id: str) -> str:
        return self.name

    def expand_article(self, article_id: Any, account_id: str) -> ArticleData:
        time.sleep(self.delays.get(article_id, 0.0))
        with self._lock:
            self.completed.append(article_id)
        return ArticleData(description=self.articles.get(article_id, ""))


def make_entry(
    card: dict[str, Any] | str,
    *,
    dynamic_id: int = 1,
    timestamp: int | None = 1_600_000_000,
    uname: str = "Poster",
    emoji: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "card": card if isinstance(card, str) else json.dumps(card, ensure_ascii=False),
        "desc": {
            "dynamic_id": dynamic_id,
            "user_profile": {"info": {"uname": uname}},
        },
    }
    if timestamp is not None:
        entry["desc"]["timestamp"] = timestamp
    if emoji is not None:
        entry["display"] = {"emoji_info": {"emoji_details": emoji}}
    return entry


def make_envelope(entries: list[dict[str, Any]], *, code: int = 0) -> dict[str, Any]:
    return {"code": code, "message": "0", "data": {"cards": entries}}


@pytest.fixture
def fake_metadata() -> FakeMetadata:
    return FakeMetadata()


@pytest.fixture
def cache_settings(tmp_path) -> CacheSettings:
    return CacheSettings(root=tmp_path / "cache")
