from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence


class TextType(str, Enum):
    """Document-wide classification driving the root container padding."""

    TEXT = "text"
    CODE = "code"


@dataclass(frozen=True)
class Block:
    """Base class for block-level nodes."""


@dataclass(frozen=True)
class ParseResult:
    tokens: List[Block]
    text_type: TextType = TextType.TEXT


@dataclass(frozen=True)
class Heading(Block):
    level: int
    inline: List["InlineElement"]


@dataclass(frozen=True)
class Paragraph(Block):
    inline: List["InlineElement"]


@dataclass(frozen=True)
class ListItem(Block):
    blocks: List[Block]
    ordered: bool = False
    index: int | None = None
    depth: int = 0


@dataclass(frozen=True)
class ListBlock(Block):
    items: List[ListItem]
    ordered: bool
    start: int | None = None
    depth: int = 0


@dataclass(frozen=True)
class CodeBlock(Block):
    language: str | None
    lines: List[str]


@dataclass(frozen=True)
class BlockQuote(Block):
    blocks: List[Block]


@dataclass(frozen=True)
class ImageBlock(Block):
    src: str
    alt: str = ""


@dataclass(frozen=True)
class HorizontalRule(Block):
    """Horizontal rule / thematic break."""


@dataclass(frozen=True)
class TableBlock(Block):
    header: Sequence[List["InlineElement"]]
    rows: Sequence[Sequence[List["InlineElement"]]]
    alignments: Sequence[str | None] = field(default_factory=list)


@dataclass(frozen=True)
class HtmlBlock(Block):
    """Raw HTML block. Has no dedicated layout and is shown as text."""

    raw: str


@dataclass(frozen=True)
class InlineElement:
    """Base class for inline nodes."""


@dataclass(frozen=True)
class InlineText(InlineElement):
    text: str


@dataclass(frozen=True)
class InlineCode(InlineElement):
    text: str


@dataclass(frozen=True)
class Bold(InlineElement):
    children: List[InlineElement]


@dataclass(frozen=True)
class Italic(InlineElement):
    children: List[InlineElement]


@dataclass(frozen=True)
class Strikethrough(InlineElement):
    children: List[InlineElement]


@dataclass(frozen=True)
class InlineLink(InlineElement):
    url: str
    children: List[InlineElement]


def inline_plain_text(inline: Sequence[InlineElement]) -> str:
    """Concatenate the visible text of an inline run, dropping all styling."""
    parts: list[str] = []
    for element in inline:
        if isinstance(element, (InlineText, InlineCode)):
            parts.append(element.text)
        elif isinstance(element, (Bold, Italic, Strikethrough, InlineLink)):
            parts.append(inline_plain_text(element.children))
    return "".join(parts)


def block_plain_text(block: Block) -> str:
    """Best-effort raw text of any block, used when no layout exists for it."""
    raw = getattr(block, "raw", None)
    if isinstance(raw, str):
        return raw
    if isinstance(block, (Heading, Paragraph)):
        return inline_plain_text(block.inline)
    if isinstance(block, CodeBlock):
        return "\n".join(block.lines)
    if isinstance(block, (ListItem, BlockQuote)):
        return "\n".join(text for text in (block_plain_text(b) for b in block.blocks) if text)
    if isinstance(block, ListBlock):
        return "\n".join(text for text in (block_plain_text(item) for item in block.items) if text)
    if isinstance(block, ImageBlock):
        return block.alt or block.src
    if isinstance(block, TableBlock):
        rows = [list(block.header), *[list(row) for row in block.rows]]
        return "\n".join(" | ".join(inline_plain_text(cell) for cell in row) for row in rows if row)
    return ""
