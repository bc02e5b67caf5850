"""Builds the menu node tree handed to the navigation tree renderer.

Nodes mirror the navigation menu's own link and submenu items so that they
pick up the same classes and styles. Context from the enclosing menu is
copied onto each node in one of two modes:

- primary: the top-level link; uses the menu's text/background colors.
- overlay: the submenu item and every link inside it; uses the overlay
  (dropdown) colors, because those sit on the dropdown surface.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from . import presentation
from .exceptions import BlockBuildError
from .interfaces import TermRepository
from .label_formatter import LabelFormatter
from .types import (
    LinkNode,
    NavigationContext,
    NodeAttributes,
    SubmenuNode,
    TermSummary,
    WrapperAttributes,
)

logger = logging.getLogger(__name__)

KIND_POST_TYPE_ARCHIVE = "post-type-archive"
KIND_TAXONOMY = "taxonomy"

# (block context key, NavigationContext field)
_STRING_CONTEXT_FIELDS = (
    ("textColor", "text_color"),
    ("customTextColor", "custom_text_color"),
    ("backgroundColor", "background_color"),
    ("customBackgroundColor", "custom_background_color"),
    ("overlayTextColor", "overlay_text_color"),
    ("customOverlayTextColor", "custom_overlay_text_color"),
    ("overlayBackgroundColor", "overlay_background_color"),
    ("customOverlayBackgroundColor", "custom_overlay_background_color"),
    ("fontSize", "font_size"),
    ("customFontSize", "custom_font_size"),
)


def _lookup(ancestor: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in ancestor:
        return ancestor[camel]
    return ancestor.get(snake)


class BlockBuilder:
    def __init__(
        self,
        terms: TermRepository,
        formatter: LabelFormatter,
        event_content_type: str = "event",
    ):
        self.terms = terms
        self.formatter = formatter
        self.event_content_type = event_content_type

    def get_navigation_context(self, ancestor: Optional[Mapping[str, Any]]) -> NavigationContext:
        """Extract the inherited navigation state, applying defaults.

        Accepts block-context (camelCase) or snake_case keys.
        """
        if not isinstance(ancestor, Mapping):
            ancestor = {}

        values = {}
        for camel, snake in _STRING_CONTEXT_FIELDS:
            value = _lookup(ancestor, camel, snake)
            values[snake] = value if isinstance(value, str) and value else None

        show_icon = _lookup(ancestor, "showSubmenuIcon", "show_submenu_icon")
        on_click = _lookup(ancestor, "openSubmenusOnClick", "open_submenus_on_click")
        style = _lookup(ancestor, "style", "style")

        return NavigationContext(
            show_submenu_icon=True if show_icon is None else bool(show_icon),
            open_submenus_on_click=False if on_click is None else bool(on_click),
            style=copy.deepcopy(dict(style)) if isinstance(style, Mapping) else {},
            **values,
        )

    def create_link_block(self, label: str, url: str, nav_context: NavigationContext) -> LinkNode:
        self._validate(label, url, nav_context)
        attributes = NodeAttributes(
            label=label,
            url=url,
            kind=KIND_POST_TYPE_ARCHIVE,
            type=self.event_content_type,
        )
        return LinkNode(self.apply_context_to_attributes(attributes, nav_context, use_overlay=False))

    def create_submenu_block(self, label: str, url: str, nav_context: NavigationContext) -> SubmenuNode:
        self._validate(label, url, nav_context)
        attributes = NodeAttributes(
            label=label,
            url=url,
            kind=KIND_POST_TYPE_ARCHIVE,
            type=self.event_content_type,
        )
        return SubmenuNode(
            attributes=self.apply_context_to_attributes(attributes, nav_context, use_overlay=True),
            show_submenu_icon=None if nav_context.show_submenu_icon else False,
        )

    def add_term_links_to_submenu(
        self,
        submenu: SubmenuNode,
        terms: Iterable[TermSummary],
        taxonomy_slug: str,
        show_term_count: bool,
        nav_context: NavigationContext,
    ) -> SubmenuNode:
        """Append one overlay-colored link per term, in input order.

        Terms whose URL cannot be resolved are skipped.
        """
        for term in terms:
            if not isinstance(term, TermSummary):
                continue
            url = self._term_url(term, taxonomy_slug)
            if not url:
                continue

            attributes = NodeAttributes(
                label=self.formatter.format_label_with_count(term.name, term.count, show_term_count),
                url=url,
                kind=KIND_TAXONOMY,
                type=taxonomy_slug,
            )
            submenu.children.append(
                LinkNode(self.apply_context_to_attributes(attributes, nav_context, use_overlay=True))
            )
        return submenu

    def get_container_attributes(self, nav_context: NavigationContext) -> WrapperAttributes:
        """Overlay palette for the submenu's child list."""
        classes = presentation.color_classes(
            nav_context.overlay_text_color,
            nav_context.overlay_background_color,
            nav_context.custom_overlay_text_color,
            nav_context.custom_overlay_background_color,
        )
        styles = presentation.color_styles(
            nav_context.custom_overlay_text_color,
            nav_context.custom_overlay_background_color,
        )
        return WrapperAttributes(tuple(classes), presentation.join_styles(styles))

    def apply_context_to_attributes(
        self, attributes: NodeAttributes, nav_context: NavigationContext, use_overlay: bool
    ) -> NodeAttributes:
        changes = {}
        if nav_context.font_size:
            changes["font_size"] = nav_context.font_size
        if nav_context.custom_font_size:
            changes["custom_font_size"] = nav_context.custom_font_size

        # Colors only travel through the explicit color fields below.
        style = {key: value for key, value in nav_context.style.items() if key != "color"}
        if style:
            changes["style"] = copy.deepcopy(style)

        if use_overlay:
            changes.update(
                text_color=nav_context.overlay_text_color,
                custom_text_color=nav_context.custom_overlay_text_color,
                background_color=nav_context.overlay_background_color,
                custom_background_color=nav_context.custom_overlay_background_color,
            )
        else:
            changes.update(
                text_color=nav_context.text_color,
                custom_text_color=nav_context.custom_text_color,
                background_color=nav_context.background_color,
                custom_background_color=nav_context.custom_background_color,
            )
        return replace(attributes, **changes)

    def _term_url(self, term: TermSummary, taxonomy_slug: str) -> Optional[str]:
        try:
            url = self.terms.term_url(term.term_id, taxonomy_slug)
        except Exception:
            logger.debug("Could not resolve URL of term %s", term.term_id, exc_info=True)
            return None
        if not isinstance(url, str) or not url:
            logger.debug("Skipping term %s without a URL", term.term_id)
            return None
        return url

    @staticmethod
    def _validate(label: Any, url: Any, nav_context: Any) -> None:
        if not isinstance(label, str):
            raise BlockBuildError(f"Menu label must be a string, got {type(label).__name__}")
        if not isinstance(url, str) or not url.strip():
            raise BlockBuildError("Menu link needs a URL")
        if not isinstance(nav_context, NavigationContext):
            raise BlockBuildError("Menu link needs a NavigationContext")
