from __future__ import annotations

import html
from typing import Any

from .article import parse_article
from .errors import MalformedPayloadError
from .links import expand_urls
from .markdown import article_to_markdown
from .media import extract_media_urls, resolve_article_media
from .post import PostAuthor, PostData, PostStats
from .raw_schema import Entities, MediaEntity, RawPost, parse_raw_post


def _coerce_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        s = value.strip()
        return int(s) if s.isdigit() else None
    return None


def _author(post: RawPost) -> PostAuthor:
    user = post.core.user_results.result
    names = [n for n in (user.core, user.legacy) if n is not None]

    screen_name = next((n.screen_name for n in names if n.screen_name), None)
    if not screen_name:
        raise MalformedPayloadError(f"Post {post.rest_id} has no author screen name")

    name = next((n.name for n in names if n.name), None) or screen_name
    return PostAuthor(id=user.rest_id or "", name=name, screen_name=screen_name)


def _stats(post: RawPost) -> PostStats:
    legacy = post.legacy
    return PostStats(
        likes=_coerce_count(legacy.favorite_count),
        reposts=_coerce_count(legacy.retweet_count),
        replies=_coerce_count(legacy.reply_count),
        quotes=_coerce_count(legacy.quote_count),
        bookmarks=_coerce_count(legacy.bookmark_count),
        views=_coerce_count(post.views.count) if post.views else None,
    )


def _attachments(post: RawPost) -> list[MediaEntity]:
    extended = post.legacy.extended_entities
    if extended is not None and extended.media:
        return list(extended.media)
    return list(post.legacy.entities.media)


def _media_placeholders(post: RawPost) -> list[MediaEntity]:
    media = list(post.legacy.entities.media)
    if post.legacy.extended_entities is not None:
        media.extend(post.legacy.extended_entities.media)
    return media


def _standard_text(post: RawPost) -> str:
    text = post.legacy.full_text
    entities: Entities = post.legacy.entities

    note = post.note_tweet.note_tweet_results if post.note_tweet else None
    if note is not None and note.result is not None and note.result.text:
        text = note.result.text
        entities = note.result.entity_set

    # Expansion targets are inserted verbatim, after the wire text is unescaped.
    return expand_urls(html.unescape(text), entities.urls, _media_placeholders(post))


def normalize_post(raw: Any) -> PostData:
    """
    Normalize one raw post into PostData.

    Article posts are decomposed into blocks with their media resolved; their text is
    the article rendered as Markdown. Standard posts get their links expanded. One
    embedded quoted post is normalized the same way and attached.

    Raises MalformedPayloadError when the payload lacks required fields.
    """
    post = parse_raw_post(raw)
    author = _author(post)

    article_result = post.article_result
    if article_result is not None:
        article = parse_article(article_result)
        article = resolve_article_media(article, article_result.media_entities)
        kind = "article"
        text = article_to_markdown(article)
    else:
        article = None
        kind = "standard"
        text = _standard_text(post)

    quoted = post.quoted_post
    return PostData(
        id=post.rest_id,
        text=text,
        author=author,
        stats=_stats(post),
        media=extract_media_urls(_attachments(post)),
        kind=kind,
        created_at=post.legacy.created_at,
        article=article,
        quoted_post=normalize_post(quoted) if quoted is not None else None,
    )
