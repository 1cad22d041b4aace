from __future__ import annotations

from typing import Iterable

from .decode import RawCard

REPOST_LABEL = "Reposted from:"

FieldPath = tuple[str, ...]

TITLE_CHAIN: tuple[FieldPath, ...] = (
    ("title",),
    ("description",),
    ("content",),
    ("vest", "content"),
)
DESCRIPTION_HEAD_CHAIN: tuple[FieldPath, ...] = (
    ("dynamic",),
    ("desc",),
    ("description",),
    ("content",),
    ("summary",),
)
AUTHOR_CHAIN: tuple[FieldPath, ...] = (
    ("uname",),
    ("author", "name"),
    ("upper", "name"),
    ("user", "uname"),
    ("user", "name"),
    ("owner", "name"),
)


def first_text(card: RawCard | None, chain: Iterable[FieldPath]) -> str:
    if card is None:
        return ""
    for path in chain:
        value = card.text(*path)
        if value:
            return value
    return ""


def resolve_title(card: RawCard | None) -> str:
    return first_text(card, TITLE_CHAIN)


def _vest_and_sketch(card: RawCard) -> str:
    text = card.text("vest", "content")
    sketch = card.get("sketch")
    if isinstance(sketch, dict):
        text += f"<br>{card.text('sketch', 'title')}<br>{card.text('sketch', 'desc_text')}"
    return text


def resolve_description(card: RawCard | None) -> str:
    if card is None:
        return ""
    head = first_text(card, DESCRIPTION_HEAD_CHAIN)
    if head:
        return head
    return _vest_and_sketch(card) or card.text("intro")


def resolve_author(card: RawCard | None) -> str:
    return first_text(card, AUTHOR_CHAIN)


def season_annotation(origin: RawCard | None) -> str:
    if origin is None or not origin.is_season:
        return ""
    season_title = origin.text("apiSeasonInfo", "title")
    if not season_title:
        return ""
    annotation = f"{REPOST_LABEL} {season_title}"
    index_title = origin.text("index_title")
    if index_title:
        annotation += f"<br>{index_title}"
    return annotation


def image_urls(card: RawCard | None) -> list[str]:
    if card is None:
        return []
    urls: list[str] = []
    # dynamic pictures
    pictures = card.get("pictures")
    if isinstance(pictures, list):
        for picture in pictures:
            src = picture.get("img_src") if isinstance(picture, dict) else None
            if isinstance(src, str) and src:
                urls.append(src)
    # article covers
    covers = card.get("image_urls")
    if isinstance(covers, list):
        urls.extend(url for url in covers if isinstance(url, str) and url)
    # video cover
    pic = card.text("pic")
    if pic:
        urls.append(pic)
    # audio, bangumi, live room and mini video covers
    unclipped = card.text("cover", "unclipped")
    cover = card.text("cover")
    if unclipped:
        urls.append(unclipped)
    elif cover:
        urls.append(cover)
    # topic page cover
    sketch_cover = card.text("sketch", "cover_url")
    if sketch_cover:
        urls.append(sketch_cover)
    return urls
