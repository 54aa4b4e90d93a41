from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from markdown_it import MarkdownIt

from .model import (
    Block,
    BlockQuote,
    Bold,
    CodeBlock,
    Heading,
    HorizontalRule,
    HtmlBlock,
    ImageBlock,
    InlineCode,
    InlineElement,
    InlineLink,
    InlineText,
    Italic,
    ListBlock,
    ListItem,
    Paragraph,
    ParseResult,
    Strikethrough,
    TableBlock,
    TextType,
)

logger = logging.getLogger(__name__)

_SPAN_OPEN = {"strong_open", "em_open", "s_open", "link_open"}
_SPAN_CLOSE = {"strong_close", "em_close", "s_close", "link_close"}


@dataclass(frozen=True)
class _InlineImage:
    src: str
    alt: str


class MarkdownParser:
    """Tokenize Markdown into block tokens with nested inline runs.

    markdown-it does the lexing; this class folds its flat token stream into
    the :mod:`model` tree and classifies the document. The configured
    markdown-it instance is only read while parsing, so one parser can serve
    concurrent callers.
    """

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark").enable(["table", "strikethrough"])

    def parse(self, text: str) -> ParseResult:
        tokens = self._md.parse(text or "")
        blocks, _ = _parse_blocks(tokens, 0, stop_types=set(), depth=0)
        text_type = classify(blocks)
        logger.debug("Parsed %d block tokens, text type %s", len(blocks), text_type.value)
        return ParseResult(tokens=blocks, text_type=text_type)


_DEFAULT_PARSER = MarkdownParser()


def parse_markdown(text: str) -> ParseResult:
    return _DEFAULT_PARSER.parse(text)


def classify(blocks: Sequence[Block]) -> TextType:
    """A document is code only when it is nothing but a single code block."""
    if len(blocks) == 1 and isinstance(blocks[0], CodeBlock):
        return TextType.CODE
    return TextType.TEXT


def _parse_blocks(tokens, index: int, stop_types: set[str], depth: int) -> tuple[list[Block], int]:
    blocks: List[Block] = []
    i = index
    while i < len(tokens):
        tok = tokens[i]
        if tok.type in stop_types:
            break
        if tok.type == "heading_open":
            level = int(tok.tag[1])
            children = _inline_children(tokens, i + 1)
            blocks.append(Heading(level=level, inline=_parse_inline(children)))
            i += 3
        elif tok.type == "paragraph_open":
            blocks.extend(_paragraph_blocks(_inline_children(tokens, i + 1)))
            i += 3
        elif tok.type in ("bullet_list_open", "ordered_list_open"):
            list_block, i = _parse_list(tokens, i, depth)
            blocks.append(list_block)
        elif tok.type in ("fence", "code_block"):
            info = (tok.info or "").strip() if tok.type == "fence" else ""
            language = info.split()[0] if info else None
            blocks.append(CodeBlock(language=language, lines=_code_lines(tok.content)))
            i += 1
        elif tok.type == "blockquote_open":
            inner, i = _parse_blocks(tokens, i + 1, stop_types={"blockquote_close"}, depth=depth)
            blocks.append(BlockQuote(blocks=inner))
            i += 1  # skip blockquote_close
        elif tok.type == "hr":
            blocks.append(HorizontalRule())
            i += 1
        elif tok.type == "table_open":
            table_block, i = _parse_table(tokens, i)
            blocks.append(table_block)
        elif tok.type == "html_block":
            raw = tok.content.rstrip("\n")
            if raw.strip():
                blocks.append(HtmlBlock(raw=raw))
            i += 1
        else:
            i += 1
    return blocks, i


def _parse_list(tokens, index: int, depth: int) -> tuple[ListBlock, int]:
    tok = tokens[index]
    ordered = tok.type == "ordered_list_open"
    close_type = "ordered_list_close" if ordered else "bullet_list_close"
    start: int | None = None
    if ordered:
        # markdown-it only sets "start" when it differs from 1; it may be 0
        start_attr = tok.attrGet("start")
        start = int(start_attr) if start_attr is not None else 1
    items: list[ListItem] = []
    i = index + 1
    while i < len(tokens) and tokens[i].type != close_type:
        if tokens[i].type == "list_item_open":
            item_blocks, i = _parse_blocks(tokens, i + 1, stop_types={"list_item_close"}, depth=depth + 1)
            position = start + len(items) if start is not None else None
            items.append(ListItem(blocks=item_blocks, ordered=ordered, index=position, depth=depth))
            i += 1  # skip list_item_close
        else:
            i += 1
    return ListBlock(items=items, ordered=ordered, start=start, depth=depth), i + 1


def _parse_table(tokens, index: int) -> tuple[TableBlock, int]:
    header: list[list[InlineElement]] = []
    alignments: list[str | None] = []
    rows: list[list[list[InlineElement]]] = []
    row: list[list[InlineElement]] | None = None
    in_header = False
    i = index + 1
    while i < len(tokens):
        tok = tokens[i]
        if tok.type == "table_close":
            break
        if tok.type == "thead_open":
            in_header = True
        elif tok.type == "thead_close":
            in_header = False
        elif tok.type == "tr_open":
            row = []
        elif tok.type == "tr_close":
            if row is not None and not in_header:
                rows.append(row)
            row = None
        elif tok.type in ("th_open", "td_open"):
            cell = _parse_inline(_inline_children(tokens, i + 1))
            if in_header:
                header.append(cell)
                alignments.append(_cell_alignment(tok.attrGet("style")))
            elif row is not None:
                row.append(cell)
        i += 1
    return TableBlock(header=header, rows=rows, alignments=alignments), i + 1


def _cell_alignment(style) -> str | None:
    if not style:
        return None
    _, _, value = str(style).partition("text-align:")
    return value.strip() or None


def _inline_children(tokens, index: int) -> list:
    if index < len(tokens) and tokens[index].type == "inline":
        return list(tokens[index].children or [])
    return []


def _paragraph_blocks(children: Iterable) -> list[Block]:
    """Build the paragraph, promoting standalone images to image blocks.

    Text before and after an image becomes its own paragraph so the source
    order is kept.
    """
    elements = _parse_inline(children, keep_images=True)
    if not any(isinstance(element, _InlineImage) for element in elements):
        return [Paragraph(inline=elements)] if elements else []

    blocks: list[Block] = []
    pending: list[InlineElement] = []
    for element in elements:
        if isinstance(element, _InlineImage):
            _flush_paragraph(pending, blocks)
            blocks.append(ImageBlock(src=element.src, alt=element.alt))
            pending = []
        else:
            pending.append(element)
    _flush_paragraph(pending, blocks)
    return blocks


def _flush_paragraph(pending: list[InlineElement], blocks: list[Block]) -> None:
    if all(isinstance(element, InlineText) and not element.text.strip() for element in pending):
        return
    inline = list(pending)
    if isinstance(inline[0], InlineText):
        inline[0] = InlineText(inline[0].text.lstrip())
    if isinstance(inline[-1], InlineText):
        inline[-1] = InlineText(inline[-1].text.rstrip())
    blocks.append(Paragraph(inline=[element for element in inline if not _is_empty_text(element)]))


def _is_empty_text(element: InlineElement) -> bool:
    return isinstance(element, InlineText) and not element.text


def _parse_inline(children: Iterable, keep_images: bool = False) -> List:
    """Fold markdown-it's flat inline tokens into nested inline elements.

    Images are kept as markers only at the top level of a paragraph (so the
    caller can promote them); anywhere else they collapse to their alt text.
    """
    current: list = []
    stack: list[tuple[str, list, str]] = []
    for tok in children:
        if tok.type == "text":
            _append_text(current, tok.content)
        elif tok.type in ("softbreak", "hardbreak"):
            _append_text(current, "\n")
        elif tok.type == "code_inline":
            current.append(InlineCode(tok.content))
        elif tok.type == "html_inline":
            _append_text(current, tok.content)
        elif tok.type in _SPAN_OPEN:
            href = str(tok.attrGet("href") or "") if tok.type == "link_open" else ""
            stack.append((tok.type, current, href))
            current = []
        elif tok.type in _SPAN_CLOSE:
            if not stack:
                continue
            kind, parent, href = stack.pop()
            parent.append(_wrap_span(kind, current, href))
            current = parent
        elif tok.type == "image":
            src = str(tok.attrGet("src") or "")
            alt = tok.content or ""
            if keep_images and not stack:
                current.append(_InlineImage(src=src, alt=alt))
            else:
                _append_text(current, alt)
    while stack:
        kind, parent, href = stack.pop()
        parent.append(_wrap_span(kind, current, href))
        current = parent
    return current


def _wrap_span(kind: str, children: list[InlineElement], href: str) -> InlineElement:
    if kind == "strong_open":
        return Bold(children=children)
    if kind == "em_open":
        return Italic(children=children)
    if kind == "s_open":
        return Strikethrough(children=children)
    return InlineLink(url=href, children=children)


def _append_text(current: list, text: str) -> None:
    if not text:
        return
    if current and isinstance(current[-1], InlineText):
        current[-1] = InlineText(current[-1].text + text)
    else:
        current.append(InlineText(text))


def _code_lines(content: str) -> list[str]:
    if not content:
        return []
    if content.endswith("\n"):
        content = content[:-1]
    return content.split("\n")
