from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any
from urllib.parse import parse_qs

from .settings import parse_bool


@dataclass(frozen=True)
class NormalizedItem:
    title: str
    author: str
    description: str
    pub_date: str
    link: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Feed:
    title: str
    link: str
    description: str
    items: list[NormalizedItem] = field(default_factory=list)
    skipped: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "items": [item.to_dict() for item in self.items],
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class FeedOptions:
    show_emoji: bool = False
    disable_embed: bool = False
    display_article: bool = False
    skip_failed: bool = False

    @classmethod
    def from_route_params(cls, raw: str | None) -> FeedOptions:
        """Parse a ``showEmoji=1&disableEmbed=0`` style route parameter."""
        params = parse_qs(raw or "", keep_blank_values=True)

        def _flag(name: str) -> bool:
            values = params.get(name)
            if not values:
                return False
            return parse_bool(values[-1], default=False)

        return cls(
            show_emoji=_flag("showEmoji"),
            disable_embed=_flag("disableEmbed"),
            display_article=_flag("displayArticle"),
            skip_failed=_flag("skipFailed"),
        )
