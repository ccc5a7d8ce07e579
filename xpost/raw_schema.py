from __future__ import annotations

from typing import Any, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import MalformedPayloadError

M = TypeVar("M", bound=BaseModel)

# Result typenames that stand for "no post" rather than a malformed payload.
_ABSENT_TYPENAMES = frozenset({"TweetTombstone", "TweetUnavailable"})


class _RawModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class VideoVariant(_RawModel):
    content_type: str | None = None
    url: str | None = None
    bitrate: int | None = None


class VideoInfo(_RawModel):
    variants: list[VideoVariant] = Field(default_factory=list)


class MediaEntity(_RawModel):
    """Attachment descriptor: kind is one of photo, video, animated_gif."""

    type: str | None = None
    id_str: str | None = None
    media_key: str | None = None
    url: str | None = None
    media_url_https: str | None = None
    video_info: VideoInfo | None = None


class UrlEntity(_RawModel):
    url: str | None = None
    expanded_url: str | None = None
    display_url: str | None = None


class Entities(_RawModel):
    urls: list[UrlEntity] = Field(default_factory=list)
    media: list[MediaEntity] = Field(default_factory=list)


class ExtendedEntities(_RawModel):
    media: list[MediaEntity] = Field(default_factory=list)


class LegacyPost(_RawModel):
    full_text: str
    created_at: str | None = None
    favorite_count: int | None = None
    retweet_count: int | None = None
    reply_count: int | None = None
    quote_count: int | None = None
    bookmark_count: int | None = None
    entities: Entities = Field(default_factory=Entities)
    extended_entities: ExtendedEntities | None = None


class UserNames(_RawModel):
    name: str | None = None
    screen_name: str | None = None


class UserResult(_RawModel):
    rest_id: str | None = None
    core: UserNames | None = None
    legacy: UserNames | None = None


class UserResults(_RawModel):
    result: UserResult


class PostCore(_RawModel):
    user_results: UserResults


class Views(_RawModel):
    count: str | None = None


class NoteTweetResult(_RawModel):
    text: str = ""
    entity_set: Entities = Field(default_factory=Entities)


class NoteTweetResults(_RawModel):
    result: NoteTweetResult | None = None


class NoteTweet(_RawModel):
    note_tweet_results: NoteTweetResults | None = None


class InlineStyleRange(_RawModel):
    offset: int
    length: int
    style: str


class EntityRange(_RawModel):
    offset: int
    length: int
    key: str


class DraftEntity(_RawModel):
    type: str
    mutability: str | None = None
    data: dict[str, Any] | None = None


class DraftEntityMapItem(_RawModel):
    key: str
    value: DraftEntity


class DraftBlock(_RawModel):
    key: str
    text: str = ""
    type: str = "unstyled"
    depth: int = 0
    inlineStyleRanges: list[InlineStyleRange] = Field(default_factory=list)
    entityRanges: list[EntityRange] = Field(default_factory=list)
    data: dict[str, Any] | None = None


EntityMapWire = Union[list[DraftEntityMapItem], dict[str, DraftEntity]]


class DraftContentState(_RawModel):
    blocks: list[DraftBlock] = Field(default_factory=list)
    entityMap: EntityMapWire = Field(default_factory=list)


class ArticleMediaInfo(_RawModel):
    original_img_url: str | None = None


class ArticleMediaEntity(_RawModel):
    media_id: str | None = None
    media_key: str | None = None
    media_info: ArticleMediaInfo | None = None


class ArticleResult(_RawModel):
    rest_id: str | None = None
    title: str | None = None
    preview_text: str | None = None
    cover_media: ArticleMediaEntity | None = None
    content_state: DraftContentState | None = None
    media_entities: list[ArticleMediaEntity] = Field(default_factory=list)


class ArticleResults(_RawModel):
    result: ArticleResult | None = None


class ArticleEnvelope(_RawModel):
    article_results: ArticleResults | None = None


class QuotedResult(_RawModel):
    result: RawPost | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_absent(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            result = data.get("result")
            if isinstance(result, Mapping) and result.get("__typename") in _ABSENT_TYPENAMES:
                return {**data, "result": None}
        return data


class RawPost(_RawModel):
    """A single post as returned by the TweetResultByRestId GraphQL query."""

    typename: str | None = Field(None, alias="__typename")
    rest_id: str
    core: PostCore
    legacy: LegacyPost
    views: Views | None = None
    note_tweet: NoteTweet | None = None
    article: ArticleEnvelope | None = None
    quoted_status_result: QuotedResult | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_visibility(cls, data: Any) -> Any:
        # TweetWithVisibilityResults nests the actual post under "tweet".
        if isinstance(data, Mapping) and isinstance(data.get("tweet"), Mapping):
            return data["tweet"]
        return data

    @property
    def article_result(self) -> ArticleResult | None:
        if self.article is None or self.article.article_results is None:
            return None
        return self.article.article_results.result

    @property
    def quoted_post(self) -> RawPost | None:
        if self.quoted_status_result is None:
            return None
        return self.quoted_status_result.result


QuotedResult.model_rebuild()
RawPost.model_rebuild()


def coerce_model(model: type[M], value: Any) -> M:
    """Return value as a model instance, validating plain mappings."""
    if isinstance(value, model):
        return value
    return model.model_validate(value)


def is_absent_result(data: Any) -> bool:
    if data is None:
        return True
    if isinstance(data, Mapping):
        return not data or data.get("__typename") in _ABSENT_TYPENAMES
    return False


def parse_raw_post(data: Any) -> RawPost:
    """
    Validate a raw post mapping.

    Raises MalformedPayloadError when required post, author or text fields are missing.
    """
    if isinstance(data, RawPost):
        return data
    if not isinstance(data, Mapping):
        raise MalformedPayloadError(f"Raw post must be a mapping, got {type(data).__name__}")

    try:
        return RawPost.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(_format_validation_error(e)) from e


def parse_post_result(envelope: Any) -> RawPost | None:
    """
    Extract the post from a full GraphQL response envelope.

    Returns None when the lookup produced no post.
    """
    if not isinstance(envelope, Mapping):
        raise MalformedPayloadError("Post result envelope must be a mapping")

    data = envelope.get("data")
    if not isinstance(data, Mapping):
        raise MalformedPayloadError("Post result envelope is missing 'data'")

    tweet_result = data.get("tweetResult")
    if tweet_result is None:
        return None
    if not isinstance(tweet_result, Mapping):
        raise MalformedPayloadError("'data.tweetResult' must be a mapping")

    result = tweet_result.get("result")
    if is_absent_result(result):
        return None
    return parse_raw_post(result)


def _format_validation_error(err: ValidationError) -> str:
    lines: list[str] = ["Malformed post payload:"]
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", [])) or "<root>"
        msg = item.get("msg", "invalid value")
        lines.append(f"- {loc}: {msg}")
    return "\n".join(lines)
