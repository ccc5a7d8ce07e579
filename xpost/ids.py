from __future__ import annotations

import re
from urllib.parse import urlsplit

from .errors import InvalidPostIdError

_POST_ID_RE = re.compile(r"^\d+$")
_PARTIAL_PATH_RE = re.compile(r"(?:status|article)/(\d+)")
_POST_HOSTS = frozenset(
    {"twitter.com", "x.com", "www.twitter.com", "www.x.com", "mobile.twitter.com", "mobile.x.com"}
)


def is_valid_post_id(value: str) -> bool:
    return bool(_POST_ID_RE.fullmatch(value or ""))


def is_valid_post_url(value: str) -> bool:
    parts = urlsplit((value or "").strip())
    if parts.scheme not in ("http", "https"):
        return False
    if (parts.hostname or "").casefold() not in _POST_HOSTS:
        return False
    return "/status/" in parts.path or "/article/" in parts.path


def _id_after(segments: list[str], marker: str) -> str | None:
    try:
        idx = segments.index(marker)
    except ValueError:
        return None
    if idx + 1 < len(segments) and segments[idx + 1]:
        return segments[idx + 1]
    return None


def extract_post_id(id_or_url: str) -> str:
    """
    Extract a numeric post ID from a plain ID, a status/article URL, or a
    partial path such as ``status/123``.

    Raises InvalidPostIdError when no numeric ID can be found.
    """
    raw = (id_or_url or "").strip()

    if is_valid_post_id(raw):
        return raw

    parts = urlsplit(raw)
    if parts.scheme and parts.netloc:
        segments = parts.path.split("/")
        candidate = _id_after(segments, "status") or _id_after(segments, "article")
        if candidate and is_valid_post_id(candidate):
            return candidate
        raise InvalidPostIdError(id_or_url)

    match = _PARTIAL_PATH_RE.search(raw)
    if match:
        return match.group(1)

    raise InvalidPostIdError(id_or_url)
