from .assemble import assemble_items, build_dynamic_item, build_video_item, format_pub_date
from .decode import (
    RawCard,
    RawEntry,
    decode_card,
    decode_entry,
    decode_envelope,
    emoji_catalog,
    envelope_cards,
)
from .emoji import expand_emoji
from .fields import (
    image_urls,
    resolve_author,
    resolve_description,
    resolve_title,
    season_annotation,
)
from .links import BVID_CUTOVER_EPOCH, dynamic_link, video_link
from .media import iframe_block, image_fragments, video_fragment
from .repost import quoted_block, repost_block

__all__ = [
    "BVID_CUTOVER_EPOCH",
    "RawCard",
    "RawEntry",
    "assemble_items",
    "build_dynamic_item",
    "build_video_item",
    "decode_card",
    "decode_entry",
    "decode_envelope",
    "dynamic_link",
    "emoji_catalog",
    "envelope_cards",
    "expand_emoji",
    "format_pub_date",
    "iframe_block",
    "image_fragments",
    "image_urls",
    "quoted_block",
    "repost_block",
    "resolve_author",
    "resolve_description",
    "resolve_title",
    "season_annotation",
    "video_fragment",
    "video_link",
]
