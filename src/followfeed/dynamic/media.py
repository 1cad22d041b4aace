from __future__ import annotations

from typing import Any
from urllib.parse import unquote

from .decode import RawCard
from .fields import image_urls

PLAYER_URL = "https://player.bilibili.com/player.html?aid={aid}&high_quality=1&autoplay=0"


def player_iframe(aid: Any) -> str:
    src = PLAYER_URL.format(aid=aid)
    return (
        f'<iframe width="650" height="477" src="{src}" frameborder="0" '
        'allowfullscreen scrolling="no" referrerpolicy="no-referrer"></iframe>'
    )


def iframe_block(card: RawCard | None, *, disable_embed: bool) -> str:
    if disable_embed or card is None:
        return ""
    aid = card.get("aid")
    if aid is None or aid == "" or aid == 0 or isinstance(aid, bool):
        return ""
    return f"<br><br>{player_iframe(aid)}<br>"


def image_fragments(*cards: RawCard | None) -> str:
    return "".join(f'<img src="{url}">' for card in cards for url in image_urls(card))


def secure_url(url: str) -> str:
    if url.startswith("http:"):
        return "https:" + url[len("http:"):]
    return url


def video_fragment(card: RawCard | None, *, disable_embed: bool) -> str:
    # Some readers refuse insecure media and the short-video CDN sometimes
    # times out over https, so both sources are offered.
    if disable_embed or card is None or not card.is_mini_video:
        return ""
    card = card.body()
    playurl = card.text("video_playurl")
    if not playurl:
        return ""
    original = unquote(playurl)
    width = card.get("width")
    height = card.get("height")
    size = ""
    if width is not None:
        size += f' width="{width}"'
    if height is not None:
        size += f' height="{height}"'
    return (
        f"<video{size} controls>"
        f'<source src="{secure_url(original)}">'
        f'<source src="{original}">'
        "</video>"
    )
