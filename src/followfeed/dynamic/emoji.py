from __future__ import annotations

import re
from html import escape
from typing import Mapping

EMOJI_STYLE = (
    "margin: -1px 1px 0px; display: inline-block; width: 20px; height: 20px; "
    "vertical-align: text-bottom;"
)


def emoji_img(token: str, url: str) -> str:
    return (
        f'<img alt="{escape(token, quote=True)}" src="{escape(url, quote=True)}" '
        f'style="{EMOJI_STYLE}" title="" referrerpolicy="no-referrer">'
    )


def expand_emoji(text: str, catalog: Mapping[str, str]) -> str:
    """Replace each catalog token in ``text`` with its inline image.

    Tokens such as ``[doge]`` are matched literally. All tokens are
    substituted in a single pass so a replacement's markup is never
    rescanned for other tokens.
    """
    if not text or not catalog:
        return text
    tokens = sorted((token for token in catalog if token), key=len, reverse=True)
    if not tokens:
        return text
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    return pattern.sub(lambda match: emoji_img(match.group(0), catalog[match.group(0)]), text)
