from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Union


@dataclass(frozen=True)
class URIAction:
    uri: str
    label: str | None = None


@dataclass(frozen=True)
class FlexSpan:
    text: str
    size: str | None = None
    weight: str | None = None
    color: str | None = None
    style: str | None = None
    decoration: str | None = None
    # Spans cannot carry actions in the schema; kept for callers, never projected.
    uri: str | None = None


@dataclass(frozen=True)
class FlexText:
    text: str
    contents: List[FlexSpan] = field(default_factory=list)
    size: str | None = None
    weight: str | None = None
    color: str | None = None
    style: str | None = None
    decoration: str | None = None
    align: str | None = None
    wrap: bool | None = None
    flex: int | None = None
    margin: str | None = None
    action: URIAction | None = None


@dataclass(frozen=True)
class FlexImage:
    url: str
    size: str | None = "full"
    aspect_ratio: str | None = None
    aspect_mode: str | None = None
    margin: str | None = None
    # Not part of the schema's image component; dropped by to_flex_dict.
    alt: str | None = None


@dataclass(frozen=True)
class FlexSeparator:
    margin: str | None = None
    color: str | None = None


@dataclass(frozen=True)
class FlexBox:
    layout: str
    contents: List["FlexComponent"] = field(default_factory=list)
    spacing: str | None = None
    margin: str | None = None
    padding_all: str | None = None
    padding_start: str | None = None
    background_color: str | None = None
    corner_radius: str | None = None
    width: str | None = None
    flex: int | None = None


FlexComponent = Union[FlexBox, FlexText, FlexImage, FlexSeparator]

_CAMEL_KEYS = {
    "padding_all": "paddingAll",
    "padding_start": "paddingStart",
    "background_color": "backgroundColor",
    "corner_radius": "cornerRadius",
    "aspect_ratio": "aspectRatio",
    "aspect_mode": "aspectMode",
}


def to_flex_dict(component: FlexComponent) -> dict[str, Any]:
    """Project a component tree onto the public Flex schema dictionaries.

    ``None`` attributes and internal-only fields are left out, and a fresh
    dictionary tree is built on every call.
    """
    if isinstance(component, FlexBox):
        data: dict[str, Any] = {"type": "box", "layout": component.layout}
        data["contents"] = [to_flex_dict(child) for child in component.contents]
        _copy_attrs(
            data,
            component,
            ("spacing", "margin", "padding_all", "padding_start", "background_color", "corner_radius", "width", "flex"),
        )
        return data
    if isinstance(component, FlexText):
        data = {"type": "text", "text": component.text or " "}
        if component.contents:
            data["contents"] = [_span_dict(span) for span in component.contents]
        _copy_attrs(
            data,
            component,
            ("size", "weight", "color", "style", "decoration", "align", "wrap", "flex", "margin"),
        )
        if component.action is not None:
            data["action"] = _action_dict(component.action)
        return data
    if isinstance(component, FlexImage):
        data = {"type": "image", "url": component.url}
        _copy_attrs(data, component, ("size", "aspect_ratio", "aspect_mode", "margin"))
        return data
    if isinstance(component, FlexSeparator):
        data = {"type": "separator"}
        _copy_attrs(data, component, ("margin", "color"))
        return data
    raise TypeError(f"Unsupported flex component: {type(component).__name__}")


def _span_dict(span: FlexSpan) -> dict[str, Any]:
    data: dict[str, Any] = {"type": "span", "text": span.text}
    _copy_attrs(data, span, ("size", "weight", "color", "style", "decoration"))
    return data


def _action_dict(action: URIAction) -> dict[str, Any]:
    data: dict[str, Any] = {"type": "uri", "uri": action.uri}
    if action.label:
        data["label"] = action.label[:20]
    return data


def _copy_attrs(data: dict[str, Any], component: object, names: tuple[str, ...]) -> None:
    for name in names:
        value = getattr(component, name)
        if value is not None:
            data[_CAMEL_KEYS.get(name, name)] = value
