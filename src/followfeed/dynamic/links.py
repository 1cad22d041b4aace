from __future__ import annotations

from typing import Any

from .decode import RawCard, dig

DYNAMIC_URL = "https://t.bilibili.com/{dynamic_id}"
VIDEO_BVID_URL = "https://www.bilibili.com/video/{bvid}"
VIDEO_AID_URL = "https://www.bilibili.com/video/av{aid}"

# bvids were introduced on 2020-05-20T16:00:00Z; earlier ones are unreliable.
BVID_CUTOVER_EPOCH = 1_589_990_400


def _present(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    return value != ""


def dynamic_link(card: RawCard, desc: dict[str, Any]) -> str:
    for candidate in (card.get("dynamic_id"), dig(desc, "dynamic_id")):
        if _present(candidate):
            return DYNAMIC_URL.format(dynamic_id=candidate)
    return ""


def _epoch(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def video_link(card: RawCard) -> str:
    published = _epoch(card.get("pubdate"))
    bvid = card.text("bvid")
    if published is not None and published >= BVID_CUTOVER_EPOCH and bvid:
        return VIDEO_BVID_URL.format(bvid=bvid)
    aid = card.get("aid")
    if isinstance(aid, bool) or not isinstance(aid, (int, str)):
        return ""
    if isinstance(aid, str):
        aid = aid.strip()
        if not aid:
            return ""
    return VIDEO_AID_URL.format(aid=aid)
