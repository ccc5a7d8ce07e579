from __future__ import annotations

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

_BLOCK_PREFIXES = {
    "header-one": "# ",
    "header-two": "## ",
    "header-three": "### ",
    "blockquote": "> ",
    "unordered-list-item": "- ",
    # Numbering is left to the Markdown renderer.
    "ordered-list-item": "1. ",
}


def apply_block_style(text: str, style: str | None) -> str:
    if not style or style == "unstyled":
        return text
    if style == "code-block":
        return f"```\n{text}\n```"
    prefix = _BLOCK_PREFIXES.get(style)
    return f"{prefix}{text}" if prefix else text


def block_to_markdown(block: ArticleBlock) -> str | None:
    if isinstance(block, TextBlock):
        return apply_block_style(block.text, block.style)
    if isinstance(block, ImageBlock):
        return f"![]({block.url})" if block.url else None
    if isinstance(block, VideoBlock):
        return f"[video]({block.url})" if block.url else "[video]"
    if isinstance(block, EmbeddedPostBlock):
        return f"https://x.com/i/status/{block.post_id}" if block.post_id else None
    if isinstance(block, DividerBlock):
        return "---"
    if isinstance(block, UnknownBlock):
        return None
    raise TypeError(f"unsupported article block: {type(block).__name__}")


def article_to_markdown(article: ArticleContent) -> str:
    parts: list[str] = []
    if article.title:
        parts.append(f"# {article.title}")
    for block in article.blocks:
        rendered = block_to_markdown(block)
        if rendered is not None:
            parts.append(rendered)
    return "\n\n".join(parts)


def _quote_lines(text: str, depth: int) -> str:
    prefix = "> " * depth
    return "\n".join(f"{prefix}{line}".rstrip() for line in text.split("\n"))


def post_to_markdown(post: PostData) -> str:
    """Post text followed by its quote chain, one blockquote level per quote."""
    parts = [post.text]
    for depth, quoted in enumerate(post.quote_chain(), start=1):
        header = f"Quoted post from @{quoted.author.screen_name}:"
        parts.append(_quote_lines(f"{header}\n{quoted.text}", depth))
    return "\n\n".join(parts)
