from __future__ import annotations


class XPostError(RuntimeError):
    """Base class for errors raised by xpost."""


class ConfigError(XPostError):
    """Raised when configuration is missing or invalid."""


class InvalidPostIdError(XPostError, ValueError):
    """Raised when a post ID or URL cannot be parsed."""

    def __init__(self, value: str, message: str | None = None) -> None:
        super().__init__(message or f"Invalid post ID or URL: {value}")
        self.input = value


class UpstreamError(XPostError):
    """Raised when the upstream API cannot be reached or answers with an error."""


class AuthenticationError(UpstreamError):
    """Raised when guest activation against the API fails."""


class PostNotFoundError(UpstreamError):
    """Raised when the post lookup returns a non-success status."""

    def __init__(self, post_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Post with ID {post_id} not found")
        self.post_id = post_id


class MalformedPayloadError(XPostError):
    """Raised when a raw post payload does not match the expected schema."""
