from __future__ import annotations

import sys
from functools import partial

import requests

from .dynamic.assemble import assemble_items, build_dynamic_item, build_video_item
from .dynamic.decode import decode_envelope, envelope_cards
from .errors import UpstreamRequestFailed
from .models import Feed, FeedOptions
from .runtime import get_item_jobs
from .upstream.auth import ensure_authorized, require_credential
from .upstream.credentials import CredentialStore, EnvCredentialStore
from .upstream.fetcher import Fetcher, RequestsFetcher
from .upstream.metadata import HttpMetadataCache, MetadataCache

DYNAMIC_API = (
    "https://api.vc.bilibili.com/dynamic_svr/v1/dynamic_svr/dynamic_new"
    "?uid={uid}&type_list=268435455"
)
VIDEO_API = (
    "https://api.vc.bilibili.com/dynamic_svr/v1/dynamic_svr/dynamic_new"
    "?uid={uid}&type=8"
)
DYNAMIC_FEED_LINK = "https://t.bilibili.com"
VIDEO_FEED_LINK = "https://t.bilibili.com/?tab=8"


def _log(message: str) -> None:
    from .runtime import get_verbose_logging

    if get_verbose_logging():
        print(message, file=sys.stderr, flush=True)


def _fetch_cards(
    url: str,
    account_id: str,
    *,
    credentials: CredentialStore,
    fetcher: Fetcher,
) -> list[dict]:
    cookie = require_credential(credentials, account_id)
    try:
        response = fetcher.get(
            url,
            {
                "Referer": f"https://space.bilibili.com/{account_id}/",
                "Cookie": cookie,
            },
        )
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "error"
        raise UpstreamRequestFailed(
            f"bilibili returned HTTP {status}", account_id=account_id
        ) from exc
    except requests.RequestException as exc:
        raise UpstreamRequestFailed(
            f"bilibili request failed ({type(exc).__name__})", account_id=account_id
        ) from exc
    envelope = decode_envelope(response.body)
    ensure_authorized(envelope, account_id)
    cards = envelope_cards(envelope)
    _log(f"  fetched {len(cards)} entries for uid {account_id}")
    return cards


def followings_dynamic(
    account_id: str | int,
    options: FeedOptions | None = None,
    *,
    credentials: CredentialStore | None = None,
    fetcher: Fetcher | None = None,
    metadata: MetadataCache | None = None,
    max_workers: int | None = None,
) -> Feed:
    uid = str(account_id)
    options = options or FeedOptions()
    credentials = credentials or EnvCredentialStore()
    fetcher = fetcher or RequestsFetcher()
    metadata = metadata or HttpMetadataCache(fetcher=fetcher)

    cards = _fetch_cards(
        DYNAMIC_API.format(uid=uid), uid, credentials=credentials, fetcher=fetcher
    )
    name = metadata.resolve_display_name(uid)
    builder = partial(
        build_dynamic_item, account_id=uid, options=options, metadata=metadata
    )
    items, skipped = assemble_items(
        cards,
        builder,
        max_workers=max_workers or get_item_jobs(),
        skip_failed=options.skip_failed,
    )
    title = f"{name}'s followings dynamics"
    return Feed(
        title=title,
        link=DYNAMIC_FEED_LINK,
        description=title,
        items=items,
        skipped=skipped,
    )


def followings_video(
    account_id: str | int,
    options: FeedOptions | None = None,
    *,
    credentials: CredentialStore | None = None,
    fetcher: Fetcher | None = None,
    metadata: MetadataCache | None = None,
    max_workers: int | None = None,
) -> Feed:
    uid = str(account_id)
    options = options or FeedOptions()
    credentials = credentials or EnvCredentialStore()
    fetcher = fetcher or RequestsFetcher()
    metadata = metadata or HttpMetadataCache(fetcher=fetcher)

    cards = _fetch_cards(
        VIDEO_API.format(uid=uid), uid, credentials=credentials, fetcher=fetcher
    )
    name = metadata.resolve_display_name(uid)
    items, skipped = assemble_items(
        cards,
        partial(build_video_item, options=options),
        max_workers=max_workers or get_item_jobs(),
        skip_failed=options.skip_failed,
    )
    title = f"{name}'s followings videos"
    return Feed(
        title=title,
        link=VIDEO_FEED_LINK,
        description=title,
        items=items,
        skipped=skipped,
    )
