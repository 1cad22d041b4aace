from __future__ import annotations

import json

import pytest

from followfeed.dynamic.decode import (
    RawCard,
    decode_card,
    decode_entry,
    decode_envelope,
    emoji_catalog,
    envelope_cards,
)
from followfeed.errors import DecodeFailure

from conftest import make_entry

BIG_ID = 9007199254740993  # 2**53 + 1


def test_decode_keeps_64_bit_ids_exact() -> None:
    body = '{"code":0,"data":{"cards":[{"card":"{\\"dynamic_id\\":%d}","desc":{"dynamic_id":%d}}]}}' % (
        BIG_ID,
        BIG_ID,
    )
    envelope = decode_envelope(body.encode("utf-8"))
    raw = envelope_cards(envelope)[0]
    assert raw["desc"]["dynamic_id"] == BIG_ID
    entry = decode_entry(0, raw)
    assert entry.card.get("dynamic_id") == BIG_ID
    assert isinstance(entry.card.get("dynamic_id"), int)


def test_envelope_decode_failure_is_fatal() -> None:
    with pytest.raises(DecodeFailure):
        decode_envelope(b"<html>oops</html>")
    with pytest.raises(DecodeFailure):
        decode_envelope("[1, 2]")
    with pytest.raises(DecodeFailure):
        envelope_cards({"code": 0})


def test_envelope_without_cards_is_empty() -> None:
    assert envelope_cards({"data": {"cards": None}}) == []
    assert envelope_cards({"data": {}}) == []


def test_malformed_card_degrades_to_empty_unknown() -> None:
    entry = decode_entry(0, {"card": "{not json", "desc": {}})
    assert entry.card == RawCard.empty()
    assert entry.origin is None


def test_malformed_origin_is_not_a_repost() -> None:
    entry = decode_entry(0, make_entry({"item": {"content": "hi"}, "origin": "{bad"}))
    assert not entry.is_repost


def test_origin_is_decoded_as_nested_card() -> None:
    origin = {"aid": 5, "pic": "p.jpg", "title": "Orig", "owner": {"name": "Alice"}}
    card = {"item": {"content": "forwarding"}, "origin": json.dumps(origin)}
    entry = decode_entry(0, make_entry(card))
    assert entry.is_repost
    assert entry.card.kind == "repost"
    assert entry.origin.kind == "video"
    assert entry.origin.get("owner", "name") == "Alice"


def test_effective_card_prefers_season_then_titled_item() -> None:
    season = decode_entry(0, make_entry({"apiSeasonInfo": {"title": "S"}, "item": {"content": "x"}}))
    assert season.effective.kind == "bangumi"
    assert season.effective.get("title") == "S"

    item = decode_entry(0, make_entry({"item": {"content": "text post"}, "user": {"uname": "u"}}))
    assert item.effective.get("content") == "text post"

    top = decode_entry(0, make_entry({"item": {"rp_id": 1}, "title": "top"}))
    assert top.effective.get("title") == "top"


def test_card_kinds() -> None:
    assert decode_card({"aid": 1, "pic": "p"}).kind == "video"
    assert decode_card({"image_urls": [], "id": 1}).kind == "article"
    assert decode_card({"item": {"pictures": []}}).kind == "picture"
    assert decode_card({"item": {"video_playurl": "v"}}).kind == "mini_video"
    assert decode_card({"roomid": 1}).kind == "live"
    assert decode_card({"upId": 1, "intro": "i"}).kind == "audio"
    assert decode_card({"sketch": {}}).kind == "topic"
    assert decode_card({"zzz": 1}).kind == "unknown"
    assert decode_card(None) is None


def test_emoji_catalog_from_display() -> None:
    entry = decode_entry(
        0,
        make_entry(
            {"item": {"content": "x"}},
            emoji=[{"text": "[doge]", "url": "u"}, {"text": "", "url": "v"}, "junk"],
        ),
    )
    assert emoji_catalog(entry) == {"[doge]": "u"}


def test_body_follows_card_kind() -> None:
    picture = RawCard.from_mapping({"item": {"description": "d", "pictures": []}, "user": {}})
    assert picture.kind == "picture"
    assert picture.body().get("description") == "d"

    video = RawCard.from_mapping({"aid": 1, "pic": "p", "item": {"content": "nested"}})
    assert video.kind == "video"
    assert video.body() is video

    unknown = RawCard.from_mapping({"item": {"rp_id": 5}})
    assert unknown.kind == "unknown"
    assert unknown.body().get("rp_id") == 5

    hollow = RawCard.from_mapping({"item": {}, "video_playurl": "v"})
    assert hollow.kind == "mini_video"
    assert hollow.body() is hollow


def test_kind_predicates() -> None:
    assert decode_card({"origin": "{}"}).is_repost
    assert decode_card({"apiSeasonInfo": {"title": "S"}}).is_season
    assert decode_card({"season_id": 3}).is_season
    assert decode_card({"video_playurl": "v"}).is_mini_video
    assert not decode_card({"aid": 1, "pic": "p"}).is_mini_video


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ValueError, match="bogus"):
        RawCard(kind="bogus")
    assert RawCard.empty().kind == "unknown"


def test_non_repost_entry_has_no_origin() -> None:
    entry = decode_entry(0, make_entry({"aid": 1, "pic": "p", "title": "t"}))
    assert entry.card.kind == "video"
    assert entry.origin is None
    assert not entry.is_repost
