from __future__ import annotations

import sys
from email.utils import formatdate
from functools import partial
from typing import Any, Callable

from ..concurrency import run_indexed_tasks_fail_fast, run_indexed_tasks_isolated
from ..models import FeedOptions, NormalizedItem
from ..upstream.metadata import MetadataCache
from .decode import RawCard, decode_card, decode_entry, dig, emoji_catalog
from .emoji import expand_emoji
from .fields import resolve_description, resolve_title
from .links import dynamic_link, video_link
from .media import iframe_block, image_fragments, player_iframe, video_fragment
from .repost import origin_body, repost_block

ItemBuilder = Callable[[int, dict[str, Any]], NormalizedItem]


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(message, file=sys.stderr, flush=True)


def format_pub_date(epoch: Any) -> str:
    if isinstance(epoch, bool):
        return ""
    if isinstance(epoch, str):
        try:
            epoch = int(epoch.strip())
        except ValueError:
            return ""
    if not isinstance(epoch, (int, float)):
        return ""
    try:
        return formatdate(epoch, usegmt=True)
    except (OverflowError, OSError, ValueError):
        return ""


def _primary_text(
    card: RawCard,
    effective: RawCard,
    catalog: dict[str, str],
    *,
    account_id: str,
    options: FeedOptions,
    metadata: MetadataCache | None,
) -> str:
    text = resolve_description(effective)
    if options.show_emoji and catalog:
        text = expand_emoji(text, catalog)
    if options.display_article and metadata is not None and effective.get("image_urls"):
        article_id = effective.get("id")
        if article_id is not None:
            text = metadata.expand_article(article_id, account_id).description
    return card.text("new_desc") or text or resolve_description(effective)


def build_dynamic_item(
    index: int,
    raw_entry: dict[str, Any],
    *,
    account_id: str,
    options: FeedOptions,
    metadata: MetadataCache | None = None,
) -> NormalizedItem:
    entry = decode_entry(index, raw_entry)
    effective = entry.effective
    origin = entry.origin
    disable_embed = options.disable_embed

    text = _primary_text(
        entry.card,
        effective,
        emoji_catalog(entry),
        account_id=account_id,
        options=options,
        metadata=metadata,
    )
    images = image_fragments(effective, origin_body(origin) if entry.is_repost else None)
    video = video_fragment(effective, disable_embed=disable_embed)

    description = "".join(
        [
            text,
            repost_block(origin),
            iframe_block(effective, disable_embed=disable_embed),
            iframe_block(origin, disable_embed=disable_embed),
            f"<br>{images}" if images else "",
            f"<br>{video}" if video else "",
        ]
    )
    return NormalizedItem(
        title=resolve_title(effective),
        author=entry.author,
        description=description,
        pub_date=format_pub_date(entry.timestamp),
        link=dynamic_link(effective, entry.desc),
    )


def build_video_item(
    index: int,
    raw_entry: dict[str, Any],
    *,
    options: FeedOptions,
) -> NormalizedItem:
    card = decode_card(raw_entry.get("card"), label=f"entry {index} card") or RawCard.empty()
    description = card.text("desc")
    aid = card.get("aid")
    if not options.disable_embed and aid is not None:
        description += f"<br><br>{player_iframe(aid)}"
    pic = card.text("pic")
    if pic:
        description += f'<br><img src="{pic}">'
    author = dig(raw_entry, "desc", "user_profile", "info", "uname")
    return NormalizedItem(
        title=card.text("title"),
        author=author if isinstance(author, str) else "",
        description=description,
        pub_date=format_pub_date(card.get("pubdate")),
        link=video_link(card),
    )


def assemble_items(
    raw_entries: list[dict[str, Any]],
    builder: ItemBuilder,
    *,
    max_workers: int,
    skip_failed: bool = False,
) -> tuple[list[NormalizedItem], int]:
    """Build one item per entry, concurrently, in upstream order.

    Returns the items and the number of entries that were skipped. With
    ``skip_failed`` unset the first failing entry aborts the batch.
    """
    tasks = [
        (index, partial(builder, index, raw_entry))
        for index, raw_entry in enumerate(raw_entries)
    ]
    if not skip_failed:
        results = run_indexed_tasks_fail_fast(tasks, max_workers=max_workers)
        return [item for _index, item in results], 0

    results, failures = run_indexed_tasks_isolated(tasks, max_workers=max_workers)
    for index, exc in failures:
        _log(f"  skipping entry {index}: {type(exc).__name__}: {exc}")
    return [item for _index, item in results], len(failures)
