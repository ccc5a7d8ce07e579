from __future__ import annotations

from typing import Protocol

from .client import XGuestClient
from .config import RuntimeSecrets, resolve_runtime_secrets
from .config_schema import AppConfig
from .ids import extract_post_id
from .normalize import normalize_post
from .post import PostData
from .quotes import DiagnosticLogger, resolve_quotes_deep
from .raw_schema import RawPost
from .retry import OnRetryFn, RetryConfig


class PostFetcher(Protocol):
    def fetch_post(self, post_id: str) -> RawPost | None: ...


def build_client(
    config: AppConfig,
    secrets: RuntimeSecrets,
    *,
    on_retry: OnRetryFn | None = None,
) -> XGuestClient:
    return XGuestClient(
        secrets.bearer_token,
        config=config.client,
        retry=RetryConfig.from_settings(config.retry),
        on_retry=on_retry,
    )


def get_raw_post(id_or_url: str, *, fetcher: PostFetcher) -> RawPost | None:
    """
    Fetch the raw post for an ID or URL.

    Raises InvalidPostIdError before any request when the input cannot be parsed.
    """
    return fetcher.fetch_post(extract_post_id(id_or_url))


def get_normalized_post(
    id_or_url: str,
    *,
    fetcher: PostFetcher | None = None,
    max_quote_depth: int | None = None,
    config: AppConfig | None = None,
    logger: DiagnosticLogger | None = None,
) -> PostData | None:
    """
    Fetch, normalize and deepen the quote chain of one post.

    Without a fetcher, a guest client is built from ``config`` and the bearer token in
    the environment. ``max_quote_depth`` defaults to ``config.quotes.max_depth`` (5).
    Returns None when the post does not exist. Invalid input, upstream and payload
    errors propagate; failures while deepening quotes are only logged.
    """
    cfg = config or AppConfig()
    post_id = extract_post_id(id_or_url)

    if fetcher is None:
        with build_client(cfg, resolve_runtime_secrets(cfg)) as client:
            return get_normalized_post(
                post_id,
                fetcher=client,
                max_quote_depth=max_quote_depth,
                config=cfg,
                logger=logger,
            )

    raw = fetcher.fetch_post(post_id)
    if raw is None:
        return None

    post = normalize_post(raw)
    depth = cfg.quotes.max_depth if max_quote_depth is None else max_quote_depth
    return resolve_quotes_deep(post, depth, fetcher.fetch_post, logger=logger)
