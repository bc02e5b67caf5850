"""Attribute edits on markup produced by the navigation tree renderer.

Every edit finds its target by tag name and class, and leaves the markup
untouched when the target is missing. Classes are never added twice, so
each edit can be applied repeatedly.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup

from .types import NavigationContext, WrapperAttributes

DISABLED_CLASS = "magic-menu--disabled"
ITEM_CLASS = "navigation-item"
ITEM_CONTENT_CLASS = "navigation-item__content"
SUBMENU_CONTAINER_CLASS = "navigation__submenu-container"
OPEN_ON_CLICK_CLASS = "open-on-click"
OPEN_ON_HOVER_CLICK_CLASS = "open-on-hover-click"

AttributesLike = Union[str, WrapperAttributes, None]


def parse_wrapper_attributes(fragment: AttributesLike) -> WrapperAttributes:
    """Read a ``class="…" style="…"`` fragment into ``WrapperAttributes``."""
    if isinstance(fragment, WrapperAttributes):
        return fragment
    if not fragment or not fragment.strip():
        return WrapperAttributes()

    tag = BeautifulSoup(f"<div {fragment}></div>", "html.parser").div
    if tag is None:
        return WrapperAttributes()
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return WrapperAttributes(tuple(classes), (tag.get("style") or "").strip())


def _add_classes(tag, classes: Iterable[str]) -> None:
    current = list(tag.get("class") or [])
    for class_name in classes:
        if class_name and class_name not in current:
            current.append(class_name)
    tag["class"] = current


def _declarations(style: str) -> Dict[str, str]:
    """``"color: red; margin: 0"`` -> ``{"color": "red", "margin": "0"}``."""
    declarations = {}
    for declaration in style.split(";"):
        name, colon, value = declaration.partition(":")
        name = name.strip().lower()
        if name and colon:
            declarations[name] = value.strip()
    return declarations


def _merge_style(tag, style: str) -> None:
    incoming = _declarations(style)
    if not incoming:
        return
    # Existing properties keep their position; incoming values win.
    merged = _declarations(tag.get("style") or "")
    merged.update(incoming)
    tag["style"] = " ".join(f"{name}: {value};" for name, value in merged.items())


class HTMLProcessor:
    parser = "html.parser"

    def _soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, self.parser)

    def _merge_onto(self, html: str, attributes: AttributesLike, name: str, class_name: Optional[str]) -> str:
        attributes = parse_wrapper_attributes(attributes)
        if not attributes:
            return html
        soup = self._soup(html)
        tag = soup.find(name, class_=class_name) if class_name else soup.find(name)
        if tag is None:
            return html
        _add_classes(tag, attributes.classes)
        _merge_style(tag, attributes.style)
        return str(soup)

    def apply_wrapper_attributes(self, html: str, wrapper_attributes: AttributesLike) -> str:
        """Merge the wrapper classes and style onto the outermost ``<li>``."""
        return self._merge_onto(html, wrapper_attributes, "li", None)

    def add_disabled_attributes(self, html: str) -> str:
        soup = self._soup(html)
        link = soup.find("a", class_=ITEM_CONTENT_CLASS)
        item = soup.find("li", class_=ITEM_CLASS)
        if link is None and item is None:
            return html
        if link is not None:
            link["aria-disabled"] = "true"
        if item is not None:
            _add_classes(item, [DISABLED_CLASS])
        return str(soup)

    def apply_container_attributes_to_ul(self, html: str, container_attributes: AttributesLike) -> str:
        return self._merge_onto(html, container_attributes, "ul", SUBMENU_CONTAINER_CLASS)

    def get_submenu_interaction_classes(self, nav_context: NavigationContext) -> List[str]:
        if nav_context.open_submenus_on_click:
            return [OPEN_ON_CLICK_CLASS]
        if nav_context.show_submenu_icon:
            return [OPEN_ON_HOVER_CLICK_CLASS]
        return []

    def apply_interaction_classes_to_li(self, html: str, classes: Iterable[str]) -> str:
        classes = [class_name for class_name in classes if class_name]
        if not classes:
            return html
        return self._merge_onto(html, WrapperAttributes(tuple(classes)), "li", ITEM_CLASS)
