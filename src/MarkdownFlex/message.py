from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from . import flex_style
from .converter_flex import MainConverter
from .flex_model import to_flex_dict
from .flex_style import DEFAULT_STYLE, FlexStyle
from .markdown_parser import MarkdownParser
from .model import TextType

logger = logging.getLogger(__name__)

BUBBLE_SIZES = ("nano", "micro", "kilo", "mega", "giga")
DEFAULT_BUBBLE_SIZE = "giga"
ALT_TEXT_LENGTH = 100
TEXT_PADDING = "xl"
CODE_PADDING = "none"


@dataclass(frozen=True)
class ConvertOptions:
    alt_text: str | None = None
    size: str | None = None


class MarkdownFlexMessage:
    """Convert Markdown into LINE Flex box, bubble and message dictionaries.

    The conversion is CPU bound and never awaits anything; the coroutine
    interface only mirrors how messaging SDK callers are usually written.
    Every call builds new dictionaries, so results can be mutated freely.
    """

    def __init__(self, style: FlexStyle = DEFAULT_STYLE) -> None:
        self.parser = MarkdownParser()
        self.converter = MainConverter(style)

    async def convert_to_flex_message(
        self, markdown: str, options: ConvertOptions | None = None
    ) -> tuple[dict[str, Any], TextType]:
        """Build a ``flex`` message; ``alt_text`` defaults to the first 100 characters."""
        options = options or ConvertOptions()
        bubble, text_type = await self.convert_to_flex_bubble(markdown, options)
        alt_text = options.alt_text or markdown[:ALT_TEXT_LENGTH]
        message = {"type": "flex", "altText": alt_text, "contents": bubble}
        return message, text_type

    async def convert_to_flex_bubble(
        self, markdown: str, options: ConvertOptions | None = None
    ) -> tuple[dict[str, Any], TextType]:
        options = options or ConvertOptions()
        size = root_size(options.size)
        box, text_type = self._convert(markdown)
        box["paddingAll"] = CODE_PADDING if text_type is TextType.CODE else TEXT_PADDING
        bubble: dict[str, Any] = {"type": "bubble"}
        if size is not None:
            bubble["size"] = size
        bubble["styles"] = {"body": {"separator": True}}
        bubble["body"] = box
        return bubble, text_type

    async def convert_to_flex_box(self, markdown: str) -> tuple[dict[str, Any], TextType]:
        box, text_type = self._convert(markdown)
        box["paddingAll"] = CODE_PADDING
        return box, text_type

    def _convert(self, markdown: str) -> tuple[dict[str, Any], TextType]:
        result = self.parser.parse(markdown)
        contents = [to_flex_dict(component) for component in self.converter.convert_all(result.tokens)]
        logger.debug("Converted %d tokens into %d components", len(result.tokens), len(contents))
        box = {
            "type": "box",
            "layout": "vertical",
            "spacing": flex_style.ROOT_SPACING,
            "contents": contents,
        }
        return box, result.text_type


def root_size(size: str | None) -> str | None:
    """Map the size option onto the bubble size; ``mega`` means the platform default."""
    if size is None or size == "":
        return DEFAULT_BUBBLE_SIZE
    if size not in BUBBLE_SIZES:
        raise ValueError(f"Unsupported bubble size: {size!r}")
    if size == "mega":
        return None
    return size
