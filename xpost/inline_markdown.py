from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .entities import EntityTable
from .raw_schema import EntityRange, InlineStyleRange, coerce_model

BOLD = "BOLD"
ITALIC = "ITALIC"
LINK_ENTITY_TYPE = "LINK"


@dataclass(frozen=True)
class _ActiveLink:
    key: str
    url: str


def _code_unit_offsets(text: str) -> list[int]:
    """UTF-16 offset of each code point; range offsets on the wire count UTF-16 units."""
    offsets: list[int] = []
    unit = 0
    for ch in text:
        offsets.append(unit)
        unit += 2 if ord(ch) > 0xFFFF else 1
    return offsets


def _clamped(offset: int, length: int, size: int) -> range:
    return range(max(0, offset), min(size, offset + length))


def render_inline_markdown(
    text: str,
    style_ranges: Iterable[Any] = (),
    link_ranges: Iterable[Any] = (),
    entities: Any = None,
) -> str:
    """
    Render ``text`` with BOLD/ITALIC style ranges and LINK entity ranges as Markdown.

    Every position carries its own set of styles and at most one link: the first
    link range covering it whose entity is of LINK type. Markers are emitted only
    where that state changes. At each position a link change is written before
    style changes, and style closes (bold, italic) come before opens (italic, bold).
    Positions outside the text are ignored; other styles and entity types are
    tracked but produce no markup.
    """
    if not text:
        return ""

    offsets = _code_unit_offsets(text)
    size = offsets[-1] + (2 if ord(text[-1]) > 0xFFFF else 1)

    styles: list[set[str]] = [set() for _ in range(size)]
    for raw in style_ranges or ():
        rng = coerce_model(InlineStyleRange, raw)
        for i in _clamped(rng.offset, rng.length, size):
            styles[i].add(rng.style)

    links: list[_ActiveLink | None] = [None] * size
    table = EntityTable.from_wire(entities)
    for raw in link_ranges or ():
        rng = coerce_model(EntityRange, raw)
        entity = table.lookup(rng.key)
        if entity is None or entity.type != LINK_ENTITY_TYPE:
            continue
        link = _ActiveLink(key=str(rng.key), url=str((entity.data or {}).get("url") or ""))
        for i in _clamped(rng.offset, rng.length, size):
            if links[i] is None:
                links[i] = link

    out: list[str] = []
    current: _ActiveLink | None = None
    was_bold = was_italic = False

    for ch, unit in zip(text, offsets):
        link = links[unit]
        if (link.key if link else None) != (current.key if current else None):
            if current is not None:
                out.append(f"]({current.url})")
            if link is not None:
                out.append("[")
            current = link

        is_bold = BOLD in styles[unit]
        is_italic = ITALIC in styles[unit]

        if was_bold and not is_bold:
            out.append("**")
        if was_italic and not is_italic:
            out.append("*")
        if is_italic and not was_italic:
            out.append("*")
        if is_bold and not was_bold:
            out.append("**")

        was_bold, was_italic = is_bold, is_italic
        out.append(ch)

    if was_bold:
        out.append("**")
    if was_italic:
        out.append("*")
    if current is not None:
        out.append(f"]({current.url})")

    return "".join(out)
