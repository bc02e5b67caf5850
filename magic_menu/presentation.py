"""Color and typography classes/styles, following the navigation menu's
``has-*`` class conventions."""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping, Optional

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_SPACING_SIDES = ("top", "right", "bottom", "left")


def css_property(name: str) -> str:
    """``fontWeight`` -> ``font-weight``."""
    return _CAMEL_BOUNDARY.sub("-", name).lower()


def join_styles(declarations: Iterable[str]) -> str:
    return " ".join(f"{declaration};" for declaration in declarations if declaration)


def color_classes(
    text_color: Optional[str] = None,
    background_color: Optional[str] = None,
    custom_text_color: Optional[str] = None,
    custom_background_color: Optional[str] = None,
) -> List[str]:
    classes = []
    if text_color or custom_text_color:
        classes.append("has-text-color")
    if text_color:
        classes.append(f"has-{text_color}-color")
    if background_color or custom_background_color:
        classes.append("has-background")
    if background_color:
        classes.append(f"has-{background_color}-background-color")
    return classes


def color_styles(
    custom_text_color: Optional[str] = None,
    custom_background_color: Optional[str] = None,
) -> List[str]:
    styles = []
    if custom_text_color:
        styles.append(f"color: {custom_text_color}")
    if custom_background_color:
        styles.append(f"background-color: {custom_background_color}")
    return styles


def font_size_classes(font_size: Optional[str], custom_font_size: Optional[str] = None) -> List[str]:
    if font_size:
        return [f"has-{font_size}-font-size"]
    if custom_font_size:
        return ["has-custom-font-size"]
    return []


def typography_styles(style: Mapping[str, Any], custom_font_size: Optional[str] = None) -> List[str]:
    typography = style.get("typography") if isinstance(style, Mapping) else None
    typography = dict(typography) if isinstance(typography, Mapping) else {}
    if custom_font_size:
        typography["fontSize"] = custom_font_size
    return [
        f"{css_property(key)}: {value}"
        for key, value in typography.items()
        if isinstance(value, (str, int, float)) and value != ""
    ]


def spacing_styles(style: Mapping[str, Any]) -> List[str]:
    spacing = style.get("spacing") if isinstance(style, Mapping) else None
    if not isinstance(spacing, Mapping):
        return []
    styles = []
    for box in ("padding", "margin"):
        value = spacing.get(box)
        if isinstance(value, str) and value:
            styles.append(f"{box}: {value}")
        elif isinstance(value, Mapping):
            styles.extend(
                f"{box}-{side}: {value[side]}"
                for side in _SPACING_SIDES
                if isinstance(value.get(side), str) and value[side]
            )
    return styles
