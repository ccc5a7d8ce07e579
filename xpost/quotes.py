from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Protocol

from .normalize import normalize_post
from .post import PostData
from .run_log import RunLogger

FetchByIdFn = Callable[[str], Any]


class DiagnosticLogger(Protocol):
    def exception(self, event: str, *, exc: BaseException, **data: Any) -> None: ...


def _deepen(
    quoted: PostData,
    remaining: int,
    level: int,
    fetch_by_id: FetchByIdFn,
    logger: DiagnosticLogger,
) -> PostData:
    if remaining <= 0:
        return quoted

    # The embedded quote is shallow; refetching it yields its own quoted post.
    try:
        raw = fetch_by_id(quoted.id)
        refreshed = normalize_post(raw) if raw is not None else None
    except Exception as exc:
        logger.exception(
            "quote_fetch_failed",
            exc=exc,
            level=level,
            post_id=quoted.id,
            message=f"Failed to fetch nested quote at level {level}",
        )
        return quoted

    if refreshed is None:
        return quoted
    if refreshed.quoted_post is None:
        return refreshed

    deeper = _deepen(refreshed.quoted_post, remaining - 1, level + 1, fetch_by_id, logger)
    return replace(refreshed, quoted_post=deeper)


def resolve_quotes_deep(
    post: PostData,
    max_depth: int,
    fetch_by_id: FetchByIdFn,
    *,
    logger: DiagnosticLogger | None = None,
) -> PostData:
    """
    Return ``post`` with its quote chain deepened to at most ``max_depth`` levels.

    Each quoted post is refetched by its own ID and renormalized, one level at a time.
    ``max_depth <= 1`` keeps only the embedded quote. A failing fetch or normalization
    is logged as ``quote_fetch_failed`` and stops deepening at that level; the levels
    resolved so far are kept. The input tree is never modified.
    """
    if max_depth <= 1 or post.quoted_post is None:
        return post

    log = logger if logger is not None else RunLogger.stderr()
    deepened = _deepen(post.quoted_post, max_depth - 1, 1, fetch_by_id, log)
    return replace(post, quoted_post=deepened)
