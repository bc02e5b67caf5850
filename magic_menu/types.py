"""Value types passed between the menu pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from django.utils.html import format_html_join

# Taxonomy value meaning "no taxonomy selected".
NO_TAXONOMY = "none"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class TermRecord:
    """A term as returned by the term repository."""

    id: int
    name: str


@dataclass(frozen=True)
class TermSummary:
    """A term plus the number of upcoming events tagged with it."""

    term_id: int
    name: str
    count: int

    def as_dict(self) -> Dict[str, Any]:
        return {"term_id": self.term_id, "name": self.name, "count": self.count}

    @classmethod
    def from_dict(cls, data: Any) -> Optional["TermSummary"]:
        """Rebuild a summary from its cached form; ``None`` if malformed."""
        if not isinstance(data, Mapping):
            return None
        term_id = data.get("term_id")
        name = data.get("name")
        count = data.get("count")
        if not _is_int(term_id) or not isinstance(name, str):
            return None
        if not _is_int(count) or count < 0:
            return None
        return cls(term_id=term_id, name=name, count=count)


@dataclass(frozen=True)
class NavigationContext:
    """Presentation state inherited from the enclosing navigation menu.

    Captured once per render call and never mutated.
    """

    text_color: Optional[str] = None
    custom_text_color: Optional[str] = None
    background_color: Optional[str] = None
    custom_background_color: Optional[str] = None
    overlay_text_color: Optional[str] = None
    custom_overlay_text_color: Optional[str] = None
    overlay_background_color: Optional[str] = None
    custom_overlay_background_color: Optional[str] = None
    font_size: Optional[str] = None
    custom_font_size: Optional[str] = None
    show_submenu_icon: bool = True
    open_submenus_on_click: bool = False
    style: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class NodeAttributes:
    label: str
    url: str
    kind: str
    type: str
    font_size: Optional[str] = None
    custom_font_size: Optional[str] = None
    text_color: Optional[str] = None
    custom_text_color: Optional[str] = None
    background_color: Optional[str] = None
    custom_background_color: Optional[str] = None
    style: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LinkNode:
    name: ClassVar[str] = "navigation-link"

    attributes: NodeAttributes


@dataclass
class SubmenuNode:
    name: ClassVar[str] = "navigation-submenu"

    attributes: NodeAttributes
    # Only set (to False) when the menu hides submenu icons.
    show_submenu_icon: Optional[bool] = None
    children: List[LinkNode] = field(default_factory=list)


MenuNode = Union[LinkNode, SubmenuNode]


@dataclass(frozen=True)
class WrapperAttributes:
    """Class list and inline style to merge onto a rendered element."""

    classes: Tuple[str, ...] = ()
    style: str = ""

    def __bool__(self):
        return bool(self.classes or self.style)

    def as_fragment(self) -> str:
        pairs = []
        if self.classes:
            pairs.append(("class", " ".join(self.classes)))
        if self.style:
            pairs.append(("style", self.style))
        return format_html_join(" ", '{}="{}"', pairs)


@dataclass(frozen=True)
class MenuItemAttributes:
    """The editable attributes of the menu item, with safe defaults."""

    label: str = ""
    taxonomy: str = ""
    show_event_count: bool = False
    show_term_event_count: bool = False

    @classmethod
    def from_mapping(cls, attributes: Any) -> "MenuItemAttributes":
        if not isinstance(attributes, Mapping):
            attributes = {}

        label = attributes.get("label")
        if not isinstance(label, str) or not label.strip():
            label = ""

        taxonomy = attributes.get("taxonomy")
        if not isinstance(taxonomy, str) or taxonomy in ("", NO_TAXONOMY):
            taxonomy = ""

        return cls(
            label=label,
            taxonomy=taxonomy,
            show_event_count=attributes.get("show_event_count") is True,
            show_term_event_count=attributes.get("show_term_event_count") is True,
        )
