from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .markdown import post_to_markdown
from .post import (
    ArticleBlock,
    ArticleContent,
    DividerBlock,
    EmbeddedPostBlock,
    ImageBlock,
    PostData,
    TextBlock,
    UnknownBlock,
    VideoBlock,
)


@dataclass(frozen=True)
class ExportPaths:
    json_path: Path
    markdown_path: Path


def block_to_dict(block: ArticleBlock) -> dict[str, Any]:
    if isinstance(block, TextBlock):
        return {"type": "text", "key": block.key, "text": block.text, "style": block.style}
    if isinstance(block, ImageBlock):
        return {"type": "image", "key": block.key, "url": block.url, "media_id": block.media_id}
    if isinstance(block, VideoBlock):
        return {"type": "video", "key": block.key, "url": block.url, "media_id": block.media_id}
    if isinstance(block, EmbeddedPostBlock):
        return {"type": "embedded_post", "key": block.key, "post_id": block.post_id}
    if isinstance(block, DividerBlock):
        return {"type": "divider", "key": block.key}
    if isinstance(block, UnknownBlock):
        return {"type": "unknown", "key": block.key}
    raise TypeError(f"unsupported article block: {type(block).__name__}")


def _article_to_dict(article: ArticleContent) -> dict[str, Any]:
    return {
        "title": article.title,
        "cover_image": article.cover_image,
        "blocks": [block_to_dict(b) for b in article.blocks],
    }


def post_to_dict(post: PostData) -> dict[str, Any]:
    """JSON-ready view of a post tree; the article entity table is left out."""
    return {
        "id": post.id,
        "url": post.url,
        "kind": post.kind,
        "text": post.text,
        "created_at": post.created_at,
        "author": {
            "id": post.author.id,
            "name": post.author.name,
            "screen_name": post.author.screen_name,
        },
        "stats": {
            "likes": post.stats.likes,
            "reposts": post.stats.reposts,
            "replies": post.stats.replies,
            "quotes": post.stats.quotes,
            "bookmarks": post.stats.bookmarks,
            "views": post.stats.views,
        },
        "media": {
            "images": list(post.media.images),
            "videos": list(post.media.videos),
        },
        "article": _article_to_dict(post.article) if post.article is not None else None,
        "quoted_post": post_to_dict(post.quoted_post) if post.quoted_post is not None else None,
    }


def post_to_json(post: PostData) -> str:
    return json.dumps(post_to_dict(post), indent=2, ensure_ascii=False)


def write_post_files(post: PostData, out_dir: str | Path) -> ExportPaths:
    """Write ``<out>/<id>/<id>.json`` and ``<out>/<id>/<id>.md``."""
    target = Path(out_dir) / post.id
    target.mkdir(parents=True, exist_ok=True)

    json_path = target / f"{post.id}.json"
    md_path = target / f"{post.id}.md"

    json_path.write_text(post_to_json(post) + "\n", encoding="utf-8")
    md_path.write_text(post_to_markdown(post) + "\n", encoding="utf-8")

    return ExportPaths(json_path=json_path, markdown_path=md_path)
