from __future__ import annotations

from typing import Any

from .entities import EntityTable
from .inline_markdown import render_inline_markdown
from .post import (
    ArticleBlock,
    ArticleContent,
    DividerBlock,
    EmbeddedPostBlock,
    ImageBlock,
    TextBlock,
    UnknownBlock,
    VideoBlock,
)
from .raw_schema import ArticleResult, DraftBlock, DraftContentState, DraftEntity, coerce_model

ATOMIC_BLOCK_TYPE = "atomic"
UNSTYLED_BLOCK_TYPE = "unstyled"

IMAGE_MEDIA_CATEGORIES = frozenset({"DraftTweetImage"})
VIDEO_MEDIA_CATEGORIES = frozenset({"DraftTweetGif", "DraftTweetVideo"})


def _text_block(block: DraftBlock, entities: EntityTable) -> TextBlock:
    return TextBlock(
        key=block.key,
        text=render_inline_markdown(
            block.text,
            block.inlineStyleRanges,
            block.entityRanges,
            entities,
        ),
        style=None if block.type == UNSTYLED_BLOCK_TYPE else block.type,
    )


def _media_block(key: str, data: dict[str, Any]) -> ArticleBlock | None:
    items = data.get("mediaItems")
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        return None

    item = items[0]
    media_id = item.get("mediaId")
    media_id = str(media_id) if media_id is not None else None
    category = item.get("mediaCategory")

    if category in IMAGE_MEDIA_CATEGORIES:
        return ImageBlock(key=key, media_id=media_id)
    if category in VIDEO_MEDIA_CATEGORIES:
        return VideoBlock(key=key, media_id=media_id)
    return None


def _atomic_entity_block(key: str, entity: DraftEntity) -> ArticleBlock:
    data = entity.data or {}

    if entity.type == "MEDIA":
        block = _media_block(key, data)
        if block is not None:
            return block

    if entity.type == "TWEMOJI" and data.get("url"):
        return ImageBlock(key=key, url=str(data["url"]))

    if entity.type == "DIVIDER":
        return DividerBlock(key=key)

    if entity.type == "TWEET":
        post_id = data.get("tweetId")
        return EmbeddedPostBlock(key=key, post_id=str(post_id) if post_id is not None else "")

    return UnknownBlock(key=key)


def _atomic_block(block: DraftBlock, entities: EntityTable) -> ArticleBlock | None:
    if not block.entityRanges:
        return None

    entity = entities.lookup(block.entityRanges[0].key)
    if entity is None:
        return None

    return _atomic_entity_block(block.key, entity)


def decompose_document(document: Any) -> tuple[tuple[ArticleBlock, ...], EntityTable]:
    """
    Turn a rich-text document into typed article blocks.

    Atomic blocks resolve through their first entity reference and are dropped when
    that reference is missing or unknown. Every other block becomes a text block
    rendered to Markdown. Output order follows the document.
    """
    if document is None:
        return (), EntityTable.from_wire(None)

    state = coerce_model(DraftContentState, document)
    entities = EntityTable.from_wire(state.entityMap)

    blocks: list[ArticleBlock] = []
    for block in state.blocks:
        if block.type == ATOMIC_BLOCK_TYPE:
            parsed = _atomic_block(block, entities)
            if parsed is not None:
                blocks.append(parsed)
        else:
            blocks.append(_text_block(block, entities))

    return tuple(blocks), entities


def parse_article(article: Any) -> ArticleContent:
    """Decompose an article result into ArticleContent; a missing document gives no blocks."""
    result = coerce_model(ArticleResult, article)

    cover = None
    if result.cover_media is not None and result.cover_media.media_info is not None:
        cover = result.cover_media.media_info.original_img_url

    blocks, entities = decompose_document(result.content_state)

    return ArticleContent(
        title=result.title or "",
        blocks=blocks,
        cover_image=cover,
        entities=entities if result.content_state is not None else None,
    )
