from __future__ import annotations

import pytest

from followfeed.dynamic.decode import RawCard
from followfeed.dynamic.fields import (
    image_urls,
    resolve_author,
    resolve_description,
    resolve_title,
    season_annotation,
)
from followfeed.dynamic.media import image_fragments


@pytest.mark.parametrize(
    "fields",
    [
        {},
        {"vest": None},
        {"author": "not-a-mapping", "user": [], "owner": 3},
        {"sketch": "broken", "cover": {"clipped": "x"}},
        {"title": None, "desc": 0, "pictures": [None, {"img_src": None}]},
    ],
)
def test_chains_yield_empty_string_when_fields_are_missing(fields) -> None:
    card = RawCard.from_mapping(fields)
    assert resolve_title(card) == ""
    assert resolve_author(card) == ""
    assert resolve_description(card) == ""
    assert image_urls(card) == []
    assert season_annotation(card) == ""


def test_none_card_resolves_to_empty_strings() -> None:
    assert resolve_title(None) == ""
    assert resolve_description(None) == ""
    assert resolve_author(None) == ""
    assert image_urls(None) == []


def test_title_chain_order() -> None:
    assert resolve_title(RawCard.from_mapping({"title": "T", "content": "C"})) == "T"
    assert resolve_title(RawCard.from_mapping({"description": "D", "content": "C"})) == "D"
    assert resolve_title(RawCard.from_mapping({"title": "", "content": "C"})) == "C"
    assert resolve_title(RawCard.from_mapping({"vest": {"content": "V"}})) == "V"


def test_description_prefers_dynamic_text() -> None:
    card = RawCard.from_mapping({"dynamic": "dyn", "desc": "video desc", "summary": "s"})
    assert resolve_description(card) == "dyn"


def test_description_combines_vest_and_sketch() -> None:
    card = RawCard.from_mapping(
        {
            "vest": {"content": "shared a topic"},
            "sketch": {"title": "Topic", "desc_text": "details"},
            "intro": "ignored",
        }
    )
    assert resolve_description(card) == "shared a topic<br>Topic<br>details"


def test_description_falls_back_to_intro() -> None:
    card = RawCard.from_mapping({"intro": "audio intro", "upper": "someone"})
    assert resolve_description(card) == "audio intro"


def test_author_chain_order() -> None:
    assert resolve_author(RawCard.from_mapping({"owner": {"name": "O"}, "user": {"name": "U"}})) == "U"
    assert resolve_author(RawCard.from_mapping({"user": {"uname": "UU", "name": "U"}})) == "UU"
    assert resolve_author(RawCard.from_mapping({"upper": {"name": "Up"}, "owner": {"name": "O"}})) == "Up"
    assert resolve_author(RawCard.from_mapping({"author": {"name": "A"}, "uname": "N"})) == "N"


def test_season_annotation_with_index_title() -> None:
    origin = RawCard.from_mapping(
        {"apiSeasonInfo": {"title": "Show"}, "index_title": "Episode 3"}
    )
    assert season_annotation(origin) == "Reposted from: Show<br>Episode 3"


def test_season_annotation_without_index_title() -> None:
    origin = RawCard.from_mapping({"apiSeasonInfo": {"title": "Show"}})
    assert season_annotation(origin) == "Reposted from: Show"


def test_image_fragments_keep_priority_order() -> None:
    card = RawCard.from_mapping(
        {"pictures": [{"img_src": "a.jpg"}, {"img_src": "b.jpg"}], "cover": "c.jpg"}
    )
    html = image_fragments(card)
    assert html == '<img src="a.jpg"><img src="b.jpg"><img src="c.jpg">'
    assert html.index('<img src="b.jpg">') < html.index('<img src="c.jpg">')


def test_image_sources_are_appended_not_replaced() -> None:
    card = RawCard.from_mapping(
        {
            "pictures": [{"img_src": "p.jpg"}],
            "image_urls": ["article.jpg"],
            "pic": "video.jpg",
            "cover": {"unclipped": "full.jpg"},
            "sketch": {"cover_url": "topic.jpg"},
        }
    )
    assert image_urls(card) == ["p.jpg", "article.jpg", "video.jpg", "full.jpg", "topic.jpg"]


def test_season_annotation_only_for_season_cards() -> None:
    repost = RawCard.from_mapping({"origin": "{}", "apiSeasonInfo": {"title": "Show"}})
    assert repost.kind == "repost"
    assert season_annotation(repost) == ""
    assert season_annotation(None) == ""
