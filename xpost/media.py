from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from .post import ArticleBlock, ArticleContent, ImageBlock, PostMedia
from .raw_schema import ArticleMediaEntity, MediaEntity, VideoVariant, coerce_model

# Segmented streaming playlists are never a playable file URL.
PLAYLIST_CONTENT_TYPES = frozenset({"application/x-mpegurl", "application/vnd.apple.mpegurl"})


def _is_playlist(variant: VideoVariant) -> bool:
    return (variant.content_type or "").strip().casefold() in PLAYLIST_CONTENT_TYPES


def select_best_variant(variants: Iterable[Any]) -> str | None:
    """
    Pick the URL of the highest-bitrate variant, skipping playlists.

    Ties keep the first variant seen. When no eligible variant declares a bitrate
    (animated GIFs), the first eligible variant is used. Returns None when nothing
    is eligible.
    """
    eligible = [
        v
        for v in (coerce_model(VideoVariant, raw) for raw in variants or ())
        if v.url and not _is_playlist(v)
    ]

    best: VideoVariant | None = None
    for variant in eligible:
        if variant.bitrate is None:
            continue
        if best is None or variant.bitrate > (best.bitrate or 0):
            best = variant

    if best is None and eligible:
        best = eligible[0]

    return best.url if best is not None else None


def extract_media_urls(media_entities: Iterable[Any]) -> PostMedia:
    """Split attachment descriptors into image URLs and best-quality video URLs."""
    images: list[str] = []
    videos: list[str] = []

    for raw in media_entities or ():
        entity = coerce_model(MediaEntity, raw)
        if entity.type == "photo":
            if entity.media_url_https:
                images.append(entity.media_url_https)
        elif entity.type in ("video", "animated_gif"):
            variants = entity.video_info.variants if entity.video_info else []
            url = select_best_variant(variants)
            if url:
                videos.append(url)

    return PostMedia(images=tuple(images), videos=tuple(videos))


def _article_media_url(entity: ArticleMediaEntity) -> str | None:
    info = entity.media_info
    return info.original_img_url if info is not None else None


def media_url_map(media_entities: Iterable[Any]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for raw in media_entities or ():
        entity = coerce_model(ArticleMediaEntity, raw)
        url = _article_media_url(entity)
        if entity.media_id and url:
            mapping.setdefault(entity.media_id, url)
    return mapping


def resolve_article_media(article: ArticleContent, media_entities: Iterable[Any]) -> ArticleContent:
    """
    Return a copy of ``article`` whose image blocks carry URLs resolved from the
    article's media entities. Unmatched and non-image blocks pass through unchanged.
    """
    mapping = media_url_map(media_entities)

    blocks: list[ArticleBlock] = []
    for block in article.blocks:
        if isinstance(block, ImageBlock) and block.media_id and block.media_id in mapping:
            block = replace(block, url=mapping[block.media_id])
        blocks.append(block)

    return replace(article, blocks=tuple(blocks))
