from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from .errors import UpstreamError
from .raw_schema import RawPost, is_absent_result, parse_post_result, parse_raw_post


def raw_post_from_json(data: Any) -> RawPost | None:
    """Accept either a bare raw post or a full GraphQL response envelope."""
    if isinstance(data, Mapping) and "data" in data and "rest_id" not in data:
        return parse_post_result(data)
    if is_absent_result(data):
        return None
    return parse_raw_post(data)


def load_raw_post(path: str | Path) -> RawPost | None:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise UpstreamError(f"Failed to read raw post file {p}: {e}") from e
    return raw_post_from_json(data)


class DirectoryPostFetcher:
    """
    Network-free post source backed by ``<directory>/<post_id>.json`` files.

    Files may hold a bare raw post or a GraphQL envelope. A missing file means the
    post does not exist.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def fetch_post(self, post_id: str) -> RawPost | None:
        path = self.directory / f"{post_id}.json"
        if not path.exists():
            return None
        return load_raw_post(path)
