from __future__ import annotations

import json
import re
import sys
from dataclasses import asdict, dataclass
from typing import Any, Protocol, runtime_checkable

from ..cache.metadata import JsonFileCache
from .fetcher import Fetcher, RequestsFetcher

CARD_API = "https://api.bilibili.com/x/web-interface/card?mid={uid}"
ARTICLE_URL = "https://www.bilibili.com/read/cv{cvid}/"

_INITIAL_STATE_RE = re.compile(
    r"window\.__INITIAL_STATE__\s*=\s*(\{.*?\})\s*;\s*\(function", flags=re.S
)


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(message, file=sys.stderr, flush=True)


@dataclass(frozen=True)
class ArticleData:
    description: str
    title: str = ""
    author: str = ""


@runtime_checkable
class MetadataCache(Protocol):
    def resolve_display_name(self, account_id: str) -> str: ...

    def expand_article(self, article_id: Any, account_id: str) -> ArticleData: ...


def _space_referer(account_id: str) -> dict[str, str]:
    return {"Referer": f"https://space.bilibili.com/{account_id}/"}


def _absolutize(url: str) -> str:
    if url.startswith("//"):
        return f"https:{url}"
    return url


def parse_article_html(html: str) -> ArticleData:
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(html, "html.parser")

    title = ""
    heading = soup.select_one("h1.title") or soup.select_one("meta[property='og:title']")
    if heading is not None:
        title = (heading.get("content") or heading.get_text() or "").strip()

    author = ""
    author_meta = soup.select_one("meta[name='author']")
    if author_meta is not None:
        author = (author_meta.get("content") or "").strip()

    holder = soup.select_one("#read-article-holder")
    if holder is not None:
        for img in holder.find_all("img"):
            lazy = img.get("data-src")
            if lazy:
                img["src"] = _absolutize(lazy)
                del img["data-src"]
            elif img.get("src"):
                img["src"] = _absolutize(img["src"])
        description = holder.decode_contents().strip()
        return ArticleData(description=description, title=title, author=author)

    match = _INITIAL_STATE_RE.search(html)
    if match:
        try:
            state = json.loads(match.group(1))
        except json.JSONDecodeError:
            state = None
        read_info = state.get("readInfo") if isinstance(state, dict) else None
        if isinstance(read_info, dict):
            content = read_info.get("content")
            if not title and isinstance(read_info.get("title"), str):
                title = read_info["title"]
            if isinstance(content, str):
                return ArticleData(description=content, title=title, author=author)

    return ArticleData(description="", title=title, author=author)


class HttpMetadataCache:
    def __init__(
        self,
        fetcher: Fetcher | None = None,
        cache: JsonFileCache | None = None,
    ) -> None:
        self.fetcher = fetcher or RequestsFetcher()
        self.cache = cache or JsonFileCache()

    def resolve_display_name(self, account_id: str) -> str:
        identity = f"bilibili-username:{account_id}"
        cached = self.cache.get(identity)
        if isinstance(cached, str) and cached:
            _log(f"  display name cache hit: {account_id}")
            return cached

        response = self.fetcher.get(
            CARD_API.format(uid=account_id), _space_referer(account_id)
        )
        try:
            payload = json.loads(response.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = None
        name = ""
        if isinstance(payload, dict):
            data = payload.get("data")
            card = data.get("card") if isinstance(data, dict) else None
            if isinstance(card, dict) and isinstance(card.get("name"), str):
                name = card["name"].strip()
        if not name:
            _log(f"  could not resolve display name for {account_id}; using uid")
            return str(account_id)
        self.cache.store(identity, name)
        return name

    def expand_article(self, article_id: Any, account_id: str) -> ArticleData:
        identity = f"bilibili-article:{article_id}"
        cached = self.cache.get(identity)
        if isinstance(cached, dict):
            try:
                return ArticleData(**cached)
            except TypeError:
                pass

        response = self.fetcher.get(
            ARTICLE_URL.format(cvid=article_id), _space_referer(account_id)
        )
        article = parse_article_html(response.text)
        if article.description:
            self.cache.store(identity, asdict(article))
        return article
