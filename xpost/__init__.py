from __future__ import annotations

from .errors import (
    AuthenticationError,
    ConfigError,
    InvalidPostIdError,
    MalformedPayloadError,
    PostNotFoundError,
    UpstreamError,
    XPostError,
)
from .ids import extract_post_id, is_valid_post_id, is_valid_post_url
from .normalize import normalize_post
from .pipeline import get_normalized_post, get_raw_post
from .post import ArticleContent, PostAuthor, PostData, PostMedia, PostStats
from .quotes import resolve_quotes_deep

__all__ = [
    "ArticleContent",
    "AuthenticationError",
    "ConfigError",
    "InvalidPostIdError",
    "MalformedPayloadError",
    "PostAuthor",
    "PostData",
    "PostMedia",
    "PostNotFoundError",
    "PostStats",
    "UpstreamError",
    "XPostError",
    "extract_post_id",
    "get_normalized_post",
    "get_raw_post",
    "is_valid_post_id",
    "is_valid_post_url",
    "normalize_post",
    "resolve_quotes_deep",
]
