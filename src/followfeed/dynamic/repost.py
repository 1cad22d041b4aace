from __future__ import annotations

from .decode import RawCard
from .fields import (
    REPOST_LABEL,
    resolve_author,
    resolve_description,
    season_annotation,
)


def origin_body(origin: RawCard) -> RawCard:
    return origin.body()


def quoted_block(origin: RawCard | None) -> str:
    if origin is None:
        return ""
    name = resolve_author(origin)
    if not name:
        return ""
    body = origin_body(origin)
    title = body.text("title")
    title_part = f"{title}<br>" if title else ""
    return f"{REPOST_LABEL} @{name}: {title_part}{resolve_description(body)}"


def repost_block(origin: RawCard | None) -> str:
    if origin is None:
        return ""
    quoted = quoted_block(origin)
    if quoted:
        return f"<br><br>{quoted}"
    return season_annotation(origin)
