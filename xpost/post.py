from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from .entities import EntityTable

PostKind = Literal["standard", "article"]


@dataclass(frozen=True)
class PostAuthor:
    id: str
    name: str
    screen_name: str


@dataclass(frozen=True)
class PostStats:
    """Engagement counters; None means the payload did not report the value."""

    likes: int | None = None
    reposts: int | None = None
    replies: int | None = None
    quotes: int | None = None
    bookmarks: int | None = None
    views: int | None = None


@dataclass(frozen=True)
class PostMedia:
    images: tuple[str, ...] = ()
    videos: tuple[str, ...] = ()


@dataclass(frozen=True)
class TextBlock:
    key: str
    text: str
    style: str | None = None


@dataclass(frozen=True)
class ImageBlock:
    key: str
    url: str = ""
    media_id: str | None = None


@dataclass(frozen=True)
class VideoBlock:
    key: str
    url: str = ""
    media_id: str | None = None


@dataclass(frozen=True)
class EmbeddedPostBlock:
    key: str
    post_id: str = ""


@dataclass(frozen=True)
class DividerBlock:
    key: str


@dataclass(frozen=True)
class UnknownBlock:
    key: str


ArticleBlock = Union[TextBlock, ImageBlock, VideoBlock, EmbeddedPostBlock, DividerBlock, UnknownBlock]


@dataclass(frozen=True)
class ArticleContent:
    title: str = ""
    blocks: tuple[ArticleBlock, ...] = ()
    cover_image: str | None = None
    # Kept for block resolution only; not part of the exported value.
    entities: EntityTable | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class PostData:
    """A normalized post, the same shape for standard and article posts."""

    id: str
    text: str
    author: PostAuthor
    stats: PostStats = field(default_factory=PostStats)
    media: PostMedia = field(default_factory=PostMedia)
    kind: PostKind = "standard"
    created_at: str | None = None
    article: ArticleContent | None = None
    quoted_post: PostData | None = None

    def __post_init__(self) -> None:
        if self.kind not in ("standard", "article"):
            raise ValueError(f"unknown post kind: {self.kind!r}")
        if (self.kind == "article") != (self.article is not None):
            raise ValueError("article content is present exactly when kind is 'article'")

    @property
    def url(self) -> str:
        return f"https://x.com/{self.author.screen_name}/status/{self.id}"

    def quote_chain(self) -> list[PostData]:
        """The quoted posts, nearest first."""
        chain: list[PostData] = []
        current = self.quoted_post
        while current is not None:
            chain.append(current)
            current = current.quoted_post
        return chain
