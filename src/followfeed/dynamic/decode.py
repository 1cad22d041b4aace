from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any

from ..errors import DecodeFailure

CARD_KINDS = (
    "repost",
    "bangumi",
    "article",
    "video",
    "mini_video",
    "picture",
    "text",
    "live",
    "audio",
    "topic",
    "unknown",
)
# Kinds whose content sits under a nested ``item`` mapping.
NESTED_ITEM_KINDS = frozenset({"repost", "mini_video", "picture", "text", "unknown"})


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(message, file=sys.stderr, flush=True)


def decode_json(raw: str | bytes | bytearray) -> Any:
    # json keeps integers as arbitrary precision ints; ids above 2**53 survive.
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    return json.loads(raw, parse_int=int)


def dig(value: Any, *path: str | int) -> Any:
    current = value
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
            continue
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def _detect_kind(fields: dict[str, Any]) -> str:
    if "origin" in fields:
        return "repost"
    if isinstance(fields.get("apiSeasonInfo"), dict) or "season_id" in fields:
        return "bangumi"
    if isinstance(fields.get("image_urls"), list):
        return "article"
    if "aid" in fields and ("pic" in fields or "bvid" in fields):
        return "video"
    item = fields.get("item")
    if isinstance(item, dict):
        if "video_playurl" in item:
            return "mini_video"
        if isinstance(item.get("pictures"), list):
            return "picture"
        if "content" in item:
            return "text"
    if "video_playurl" in fields:
        return "mini_video"
    if "roomid" in fields or isinstance(fields.get("live_play_info"), dict):
        return "live"
    if "upId" in fields or "typeInfo" in fields:
        return "audio"
    if isinstance(fields.get("sketch"), dict):
        return "topic"
    return "unknown"


@dataclass(frozen=True)
class RawCard:
    kind: str
    fields: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in CARD_KINDS:
            raise ValueError(f"Unknown card kind: {self.kind!r}")

    @classmethod
    def from_mapping(cls, fields: dict[str, Any]) -> RawCard:
        return cls(kind=_detect_kind(fields), fields=fields)

    @classmethod
    def empty(cls) -> RawCard:
        return cls(kind="unknown", fields={})

    def get(self, *path: str | int) -> Any:
        return dig(self.fields, *path)

    def text(self, *path: str | int) -> str:
        value = self.get(*path)
        if isinstance(value, str):
            return value
        return ""

    def child(self, key: str) -> RawCard | None:
        value = self.fields.get(key)
        if isinstance(value, dict):
            return RawCard.from_mapping(value)
        return None

    @property
    def is_repost(self) -> bool:
        return self.kind == "repost"

    @property
    def is_season(self) -> bool:
        return self.kind == "bangumi"

    @property
    def is_mini_video(self) -> bool:
        return self.kind == "mini_video"

    def body(self) -> RawCard:
        """The card carrying this card's content.

        Picture, text, mini-video and repost cards keep their content under
        ``item``; flat kinds (video, article, bangumi, live, audio, topic)
        are their own body even when an ``item`` key is present.
        """
        if self.kind not in NESTED_ITEM_KINDS:
            return self
        item = self.child("item")
        if item is not None and item.fields:
            return item
        return self

    def __bool__(self) -> bool:
        return bool(self.fields)


@dataclass(frozen=True)
class RawEntry:
    index: int
    card: RawCard
    effective: RawCard
    origin: RawCard | None
    desc: dict[str, Any] = field(default_factory=dict)
    display: dict[str, Any] = field(default_factory=dict)

    @property
    def is_repost(self) -> bool:
        return self.origin is not None

    @property
    def timestamp(self) -> Any:
        return self.desc.get("timestamp")

    @property
    def author(self) -> str:
        name = dig(self.desc, "user_profile", "info", "uname")
        return name if isinstance(name, str) else ""


def decode_envelope(body: str | bytes | bytearray) -> dict[str, Any]:
    try:
        envelope = decode_json(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeFailure(f"Could not decode bilibili feed payload: {exc}") from exc
    if not isinstance(envelope, dict):
        raise DecodeFailure("bilibili feed payload is not a JSON object")
    return envelope


def envelope_cards(envelope: dict[str, Any]) -> list[dict[str, Any]]:
    data = envelope.get("data")
    if data is None:
        raise DecodeFailure("bilibili feed payload has no data field")
    if not isinstance(data, dict):
        raise DecodeFailure("bilibili feed data is not a JSON object")
    cards = data.get("cards")
    if cards is None:
        return []
    if not isinstance(cards, list):
        raise DecodeFailure("bilibili feed cards is not a list")
    return [card if isinstance(card, dict) else {} for card in cards]


def decode_card(raw: Any, *, label: str = "card") -> RawCard | None:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return RawCard.from_mapping(raw)
    if not isinstance(raw, (str, bytes, bytearray)):
        _log(f"  {label} has unexpected type {type(raw).__name__}; ignoring")
        return None
    try:
        decoded = decode_json(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        _log(f"  {label} could not be decoded ({exc}); ignoring")
        return None
    if not isinstance(decoded, dict):
        _log(f"  {label} is not a JSON object; ignoring")
        return None
    return RawCard.from_mapping(decoded)


def select_effective_card(card: RawCard) -> RawCard:
    from .fields import resolve_title

    season = card.get("apiSeasonInfo")
    if isinstance(season, dict):
        return RawCard(kind="bangumi", fields=season)
    item = card.child("item")
    if item is not None and resolve_title(item):
        return item
    return card


def decode_entry(index: int, raw_entry: dict[str, Any]) -> RawEntry:
    card = decode_card(raw_entry.get("card"), label=f"entry {index} card")
    if card is None:
        card = RawCard.empty()
    origin = None
    if card.is_repost:
        origin = decode_card(card.fields.get("origin"), label=f"entry {index} origin")
    desc = raw_entry.get("desc")
    display = raw_entry.get("display")
    return RawEntry(
        index=index,
        card=card,
        effective=select_effective_card(card),
        origin=origin,
        desc=desc if isinstance(desc, dict) else {},
        display=display if isinstance(display, dict) else {},
    )


def emoji_catalog(entry: RawEntry) -> dict[str, str]:
    details = dig(entry.display, "emoji_info", "emoji_details")
    catalog: dict[str, str] = {}
    if not isinstance(details, list):
        return catalog
    for detail in details:
        if not isinstance(detail, dict):
            continue
        token = detail.get("text")
        url = detail.get("url")
        if isinstance(token, str) and token and isinstance(url, str) and url:
            catalog.setdefault(token, url)
    return catalog
