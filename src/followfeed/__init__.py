from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import Feed


def dynamic(
    uid: str | int,
    *,
    show_emoji: bool = False,
    disable_embed: bool = False,
    display_article: bool = False,
    skip_failed: bool = False,
    **collaborators: Any,
) -> Feed:
    from .feeds import followings_dynamic
    from .models import FeedOptions

    options = FeedOptions(
        show_emoji=show_emoji,
        disable_embed=disable_embed,
        display_article=display_article,
        skip_failed=skip_failed,
    )
    return followings_dynamic(uid, options, **collaborators)


def video(
    uid: str | int,
    *,
    disable_embed: bool = False,
    skip_failed: bool = False,
    **collaborators: Any,
) -> Feed:
    from .feeds import followings_video
    from .models import FeedOptions

    options = FeedOptions(disable_embed=disable_embed, skip_failed=skip_failed)
    return followings_video(uid, options, **collaborators)


__all__ = [
    "dynamic",
    "video",
]
