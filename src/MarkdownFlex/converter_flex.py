from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Protocol, Sequence

from .flex_model import FlexBox, FlexComponent, FlexImage, FlexSeparator, FlexSpan, FlexText, URIAction
from .flex_style import DEFAULT_STYLE, FlexStyle
from .model import (
    Block,
    BlockQuote,
    Bold,
    CodeBlock,
    Heading,
    HorizontalRule,
    ImageBlock,
    InlineCode,
    InlineElement,
    InlineLink,
    InlineText,
    Italic,
    ListBlock,
    ListItem,
    Paragraph,
    Strikethrough,
    TableBlock,
    block_plain_text,
    inline_plain_text,
)

logger = logging.getLogger(__name__)

TABLE_ALIGN = {"left": "start", "center": "center", "right": "end"}


class FlexConverter(Protocol):
    def convert(self, block: Block) -> List[FlexComponent]:
        ...


@dataclass(frozen=True)
class _SpanState:
    weight: str | None = None
    color: str | None = None
    style: str | None = None
    decoration: str | None = None
    uri: str | None = None


class InlineConverter:
    """Render inline runs as a text component with flat styled spans.

    The schema has no nested spans, so styles accumulate from the outermost
    element inwards and every text leaf becomes one span. Links keep their URI
    on the span and the first one also becomes the text's action.
    """

    def __init__(self, style: FlexStyle) -> None:
        self.style = style

    def to_text(
        self,
        inline: Sequence[InlineElement],
        *,
        size: str | None = None,
        weight: str | None = None,
        color: str | None = None,
        align: str | None = None,
        flex: int | None = None,
    ) -> FlexText:
        base = _SpanState(weight=weight, color=color)
        spans: list[FlexSpan] = []
        self._collect(inline, base, spans)
        text = "".join(span.text for span in spans)
        styled = any(_state_of(span) != base for span in spans)
        uri = next((span.uri for span in spans if span.uri), None)
        return FlexText(
            text=text,
            contents=spans if styled else [],
            size=size,
            weight=weight,
            color=color,
            align=align,
            wrap=True,
            flex=flex,
            action=URIAction(uri=uri) if uri else None,
        )

    def _collect(self, inline: Iterable[InlineElement], state: _SpanState, out: list[FlexSpan]) -> None:
        for element in inline:
            if isinstance(element, InlineText):
                _add_span(out, element.text, state)
            elif isinstance(element, InlineCode):
                _add_span(out, element.text, replace(state, color=self.style.code_color))
            elif isinstance(element, Bold):
                self._collect(element.children, replace(state, weight="bold"), out)
            elif isinstance(element, Italic):
                self._collect(element.children, replace(state, style="italic"), out)
            elif isinstance(element, Strikethrough):
                self._collect(element.children, replace(state, decoration="line-through"), out)
            elif isinstance(element, InlineLink):
                link_state = replace(
                    state,
                    color=self.style.link_color,
                    decoration=state.decoration or "underline",
                    uri=element.url or None,
                )
                if inline_plain_text(element.children):
                    self._collect(element.children, link_state, out)
                else:
                    _add_span(out, element.url, link_state)


def _add_span(out: list[FlexSpan], text: str, state: _SpanState) -> None:
    if not text:
        return
    out.append(
        FlexSpan(
            text=text,
            weight=state.weight,
            color=state.color,
            style=state.style,
            decoration=state.decoration,
            uri=state.uri,
        )
    )


def _state_of(span: FlexSpan) -> _SpanState:
    return _SpanState(weight=span.weight, color=span.color, style=span.style, decoration=span.decoration, uri=span.uri)


class HeadingConverter:
    def __init__(self, style: FlexStyle, inline: InlineConverter) -> None:
        self.style = style
        self.inline = inline

    def convert(self, block: Heading) -> List[FlexComponent]:
        size = self.style.heading_size(block.level)
        return [self.inline.to_text(block.inline, size=size, weight="bold")]


class ParagraphConverter:
    def __init__(self, inline: InlineConverter) -> None:
        self.inline = inline

    def convert(self, block: Paragraph) -> List[FlexComponent]:
        text = self.inline.to_text(block.inline)
        if not text.text:
            return []
        return [text]


class ListItemConverter:
    """One horizontal row: the marker column, then the item's own blocks."""

    def __init__(self, style: FlexStyle, main: "MainConverter") -> None:
        self.style = style
        self.main = main

    def convert(self, block: ListItem) -> List[FlexComponent]:
        if block.ordered:
            marker = f"{block.index if block.index is not None else 1}."
        else:
            marker = self.style.bullet
        body: list[FlexComponent] = []
        for child in block.blocks:
            body.extend(self.main.convert(child))
        if not body:
            body.append(FlexText(text="", wrap=True))
        return [
            FlexBox(
                layout="horizontal",
                spacing=self.style.list_item_spacing,
                contents=[
                    FlexText(text=marker, flex=0),
                    FlexBox(layout="vertical", spacing=self.style.list_spacing, contents=body, flex=1),
                ],
            )
        ]


class ListConverter:
    def __init__(self, style: FlexStyle, items: ListItemConverter) -> None:
        self.style = style
        self.items = items

    def convert(self, block: ListBlock) -> List[FlexComponent]:
        contents: list[FlexComponent] = []
        for item in block.items:
            contents.extend(self.items.convert(item))
        return [
            FlexBox(
                layout="vertical",
                spacing=self.style.list_spacing,
                padding_start=self.style.list_indent if block.depth > 0 else None,
                contents=contents,
            )
        ]


class CodeBlockConverter:
    """Code is never inline-parsed; blank lines stay as empty texts."""

    def __init__(self, style: FlexStyle) -> None:
        self.style = style

    def convert(self, block: CodeBlock) -> List[FlexComponent]:
        lines = [FlexText(text=line, size=self.style.code_size, wrap=True) for line in block.lines]
        return [
            FlexBox(
                layout="vertical",
                contents=lines,
                background_color=self.style.code_background,
                padding_all=self.style.code_padding,
                corner_radius=self.style.code_corner_radius,
            )
        ]


class BlockQuoteConverter:
    def __init__(self, style: FlexStyle, main: "MainConverter") -> None:
        self.style = style
        self.main = main

    def convert(self, block: BlockQuote) -> List[FlexComponent]:
        children: list[FlexComponent] = []
        for child in block.blocks:
            children.extend(self.main.convert(child))
        bar = FlexBox(
            layout="vertical",
            width=self.style.quote_bar_width,
            background_color=self.style.quote_bar_color,
            flex=0,
        )
        body = FlexBox(layout="vertical", spacing=self.style.quote_spacing, contents=children, flex=1)
        return [FlexBox(layout="horizontal", spacing=self.style.quote_spacing, contents=[bar, body])]


class TableConverter:
    def __init__(self, style: FlexStyle, inline: InlineConverter) -> None:
        self.style = style
        self.inline = inline

    def convert(self, block: TableBlock) -> List[FlexComponent]:
        columns = max([len(block.header), *(len(row) for row in block.rows)])
        rows: list[FlexComponent] = []
        if block.header:
            rows.append(self._row(block.header, columns, block.alignments, header=True))
            if block.rows:
                rows.append(FlexSeparator())
        for row in block.rows:
            rows.append(self._row(row, columns, block.alignments, header=False))
        return [FlexBox(layout="vertical", spacing=self.style.table_spacing, contents=rows)]

    def _row(self, cells, columns: int, alignments, header: bool) -> FlexBox:
        padded = list(cells) + [[] for _ in range(columns - len(cells))]
        texts: list[FlexComponent] = []
        for idx, cell in enumerate(padded):
            align = alignments[idx] if idx < len(alignments) else None
            texts.append(
                self.inline.to_text(
                    cell,
                    size=self.style.body_size,
                    weight="bold" if header else None,
                    color=self.style.table_header_color if header else None,
                    align=TABLE_ALIGN.get(align or ""),
                    flex=1,
                )
            )
        return FlexBox(layout="horizontal", spacing=self.style.table_spacing, contents=texts)


class ImageConverter:
    def __init__(self, style: FlexStyle) -> None:
        self.style = style

    def convert(self, block: ImageBlock) -> List[FlexComponent]:
        return [
            FlexImage(
                url=block.src,
                size="full",
                aspect_ratio=self.style.image_aspect_ratio,
                aspect_mode="cover",
                alt=block.alt or None,
            )
        ]


class HorizontalRuleConverter:
    def __init__(self, style: FlexStyle) -> None:
        self.style = style

    def convert(self, block: HorizontalRule) -> List[FlexComponent]:
        return [FlexSeparator(margin=self.style.separator_margin)]


class RawTextConverter:
    """Fallback for blocks without a dedicated layout: show their raw text."""

    def convert(self, block: Block) -> List[FlexComponent]:
        text = block_plain_text(block)
        logger.debug("No converter for %s, rendering %d chars as text", type(block).__name__, len(text))
        if not text.strip():
            return []
        return [FlexText(text=text, wrap=True)]


class MainConverter:
    """Convert block tokens into Flex components by token type.

    Nested blocks (list items, quotes) are converted through this same
    dispatcher, so each call returns a freshly built subtree.
    """

    def __init__(self, style: FlexStyle = DEFAULT_STYLE) -> None:
        self.style = style
        inline = InlineConverter(style)
        items = ListItemConverter(style, self)
        self._converters: dict[type, FlexConverter] = {
            Heading: HeadingConverter(style, inline),
            Paragraph: ParagraphConverter(inline),
            ListBlock: ListConverter(style, items),
            ListItem: items,
            CodeBlock: CodeBlockConverter(style),
            BlockQuote: BlockQuoteConverter(style, self),
            TableBlock: TableConverter(style, inline),
            ImageBlock: ImageConverter(style),
            HorizontalRule: HorizontalRuleConverter(style),
        }
        self._fallback = RawTextConverter()

    def convert(self, block: Block) -> List[FlexComponent]:
        converter = self._converters.get(type(block), self._fallback)
        return converter.convert(block)

    def convert_all(self, blocks: Iterable[Block]) -> List[FlexComponent]:
        components: list[FlexComponent] = []
        for block in blocks:
            components.extend(self.convert(block))
        return components
