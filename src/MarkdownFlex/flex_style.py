from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

HEADING_SIZES = ("xxl", "xl", "lg", "md", "sm")
BODY_SIZE = "md"
CODE_SIZE = "sm"

ROOT_SPACING = "md"
LIST_SPACING = "sm"
LIST_ITEM_SPACING = "sm"
LIST_INDENT = "lg"
BULLET = "•"

LINK_COLOR = "#1E6FD9"
CODE_COLOR = "#C7254E"
CODE_BACKGROUND = "#F5F5F5"
CODE_PADDING = "md"
CODE_CORNER_RADIUS = "md"

QUOTE_BAR_WIDTH = "4px"
QUOTE_BAR_COLOR = "#CCCCCC"
QUOTE_SPACING = "md"

TABLE_SPACING = "sm"
TABLE_HEADER_COLOR = "#333333"

SEPARATOR_MARGIN = "md"
IMAGE_ASPECT_RATIO = "20:13"


@dataclass(frozen=True)
class FlexStyle:
    """Layout tokens used by the converters. Defaults follow the module constants."""

    heading_sizes: tuple[str, ...] = HEADING_SIZES
    body_size: str = BODY_SIZE
    code_size: str = CODE_SIZE
    list_spacing: str = LIST_SPACING
    list_item_spacing: str = LIST_ITEM_SPACING
    list_indent: str = LIST_INDENT
    bullet: str = BULLET
    link_color: str = LINK_COLOR
    code_color: str = CODE_COLOR
    code_background: str = CODE_BACKGROUND
    code_padding: str = CODE_PADDING
    code_corner_radius: str = CODE_CORNER_RADIUS
    quote_bar_width: str = QUOTE_BAR_WIDTH
    quote_bar_color: str = QUOTE_BAR_COLOR
    quote_spacing: str = QUOTE_SPACING
    table_spacing: str = TABLE_SPACING
    table_header_color: str | None = TABLE_HEADER_COLOR
    separator_margin: str = SEPARATOR_MARGIN
    image_aspect_ratio: str = IMAGE_ASPECT_RATIO

    def heading_size(self, level: int) -> str:
        """Size tier for a heading level; deeper levels reuse the smallest tier."""
        tiers = self.heading_sizes or HEADING_SIZES
        return tiers[min(max(level, 1), len(tiers)) - 1]


DEFAULT_STYLE = FlexStyle()


def style_from_mapping(data: dict[str, Any], base: FlexStyle = DEFAULT_STYLE) -> FlexStyle:
    known = {f.name for f in fields(FlexStyle)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown style keys: {', '.join(unknown)}")
    values = {key: tuple(value) if isinstance(value, list) else value for key, value in data.items()}
    if isinstance(values.get("heading_sizes"), str):
        values["heading_sizes"] = (values["heading_sizes"],)
    if "heading_sizes" in values and not values["heading_sizes"]:
        raise ValueError("heading_sizes must list at least one size tier.")
    return replace(base, **values)


def load_style(path: str | Path) -> FlexStyle:
    """Load style overrides from a YAML mapping."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("Style YAML root must be a mapping of style keys.")
    return style_from_mapping(data)
