from __future__ import annotations

import re
from typing import Any, Iterable

from .raw_schema import MediaEntity, UrlEntity, coerce_model


def expand_urls(
    text: str,
    url_entities: Iterable[Any] = (),
    media_entities: Iterable[Any] = (),
) -> str:
    """
    Replace shortened link placeholders with their expanded targets and drop media
    placeholders (with the whitespace around them), then trim the result.

    Replacement is by literal substring, so a repeated placeholder is replaced
    everywhere. Text without any usable entity is returned untouched.
    """
    expansions: dict[str, str] = {}
    for raw in url_entities or ():
        entity = coerce_model(UrlEntity, raw)
        if entity.url and entity.expanded_url:
            expansions[entity.url] = entity.expanded_url

    media_urls: dict[str, None] = {}
    for raw in media_entities or ():
        entity = coerce_model(MediaEntity, raw)
        if entity.url:
            media_urls[entity.url] = None

    if not expansions and not media_urls:
        return text

    expanded = text
    for short_url, target in expansions.items():
        expanded = expanded.replace(short_url, target)

    for short_url in media_urls:
        expanded = re.sub(rf"\s*{re.escape(short_url)}\s*", "", expanded)

    return expanded.strip()
