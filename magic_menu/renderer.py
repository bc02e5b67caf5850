"""Renders the magic menu item.

Strategy, by available data:

- no upcoming events: a disabled link to the archive (count 0);
- no taxonomy selected, or no terms in use: a plain link with the total
  count;
- otherwise: a submenu with one link per term.

Whatever goes wrong, :meth:`Renderer.render` returns markup; the worst case
is a disabled link to the fallback archive URL.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from django.utils.encoding import iri_to_uri
from django.utils.html import escape, format_html
from django.utils.safestring import SafeString, mark_safe

from .block_builder import BlockBuilder
from .cache import EventMenuCache
from .exceptions import BlockBuildError
from .html_processor import DISABLED_CLASS, AttributesLike, HTMLProcessor
from .interfaces import ContentTypeRegistry, TreeRenderer, WrapperAttributesProvider
from .label_formatter import LabelFormatter
from .types import MenuItemAttributes, NavigationContext, TermSummary

logger = logging.getLogger(__name__)


class Renderer:
    def __init__(
        self,
        cache: EventMenuCache,
        formatter: LabelFormatter,
        builder: BlockBuilder,
        processor: HTMLProcessor,
        tree_renderer: TreeRenderer,
        content_types: ContentTypeRegistry,
        wrapper_attributes: WrapperAttributesProvider,
        fallback_url: str = "/#events",
    ):
        self.cache = cache
        self.formatter = formatter
        self.builder = builder
        self.processor = processor
        self.tree_renderer = tree_renderer
        self.content_types = content_types
        self.wrapper_attributes = wrapper_attributes
        self.fallback_url = fallback_url

    def render(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        ancestor: Optional[Mapping[str, Any]] = None,
    ) -> SafeString:
        """Render the menu item for the given attributes and navigation context."""
        try:
            return mark_safe(self._render(attributes, ancestor))
        except Exception:
            logger.exception("Magic menu rendering failed, showing a disabled link")
            label = escape(self.formatter.get_fallback_label())
            return mark_safe(self.render_fallback_html(label, self.fallback_url, True))

    def _render(self, attributes: Optional[Mapping[str, Any]], ancestor: Optional[Mapping[str, Any]]) -> str:
        item = MenuItemAttributes.from_mapping(attributes)
        label = item.label or self.formatter.get_fallback_label()
        archive_url = self.get_events_archive_url()
        wrapper_attributes = self.wrapper_attributes.get_wrapper_attributes(attributes)
        nav_context = self.builder.get_navigation_context(ancestor)

        upcoming_event_ids = self.cache.get_upcoming_events()
        total_count = len(upcoming_event_ids)

        if not upcoming_event_ids:
            return self.render_simple_link(
                label, archive_url, True, 0, item.show_event_count, wrapper_attributes, nav_context
            )

        if not item.taxonomy:
            return self.render_simple_link(
                label, archive_url, False, total_count, item.show_event_count,
                wrapper_attributes, nav_context,
            )

        terms_data = self.cache.get_terms_with_event_counts(item.taxonomy, upcoming_event_ids)

        if not terms_data:
            return self.render_simple_link(
                label, archive_url, False, total_count, item.show_event_count,
                wrapper_attributes, nav_context,
            )

        return self.render_submenu(
            label,
            archive_url,
            terms_data,
            item.taxonomy,
            total_count,
            item.show_event_count,
            item.show_term_event_count,
            wrapper_attributes,
            nav_context,
        )

    def get_events_archive_url(self) -> str:
        try:
            url = self.content_types.archive_url()
        except Exception:
            logger.warning("Could not resolve the events archive URL", exc_info=True)
            url = None
        if isinstance(url, str) and url:
            return url
        return self.fallback_url

    def render_simple_link(
        self,
        label: str,
        archive_url: str,
        is_disabled: bool,
        event_count: int,
        show_count: bool,
        wrapper_attributes: AttributesLike,
        nav_context: NavigationContext,
    ) -> str:
        formatted_label = self.formatter.format_label_with_count(label, event_count, show_count)
        try:
            link = self.builder.create_link_block(formatted_label, archive_url, nav_context)
        except BlockBuildError:
            logger.warning("Could not build the menu link, using plain markup", exc_info=True)
            return self.render_fallback_html(formatted_label, archive_url, is_disabled, wrapper_attributes)

        rendered = self.tree_renderer.render(link, nav_context)
        if is_disabled:
            rendered = self.processor.add_disabled_attributes(rendered)
        return self.processor.apply_wrapper_attributes(rendered, wrapper_attributes)

    def render_submenu(
        self,
        label: str,
        archive_url: str,
        terms_data: List[TermSummary],
        taxonomy_slug: str,
        total_count: int,
        show_count: bool,
        show_term_count: bool,
        wrapper_attributes: AttributesLike,
        nav_context: NavigationContext,
    ) -> str:
        formatted_label = self.formatter.format_label_with_count(label, total_count, show_count)
        try:
            submenu = self.builder.create_submenu_block(formatted_label, archive_url, nav_context)
        except BlockBuildError:
            logger.warning("Could not build the submenu, using a plain link", exc_info=True)
            return self.render_simple_link(
                label, archive_url, False, total_count, show_count, wrapper_attributes, nav_context
            )

        submenu = self.builder.add_term_links_to_submenu(
            submenu, terms_data, taxonomy_slug, show_term_count, nav_context
        )
        if not submenu.children:
            return self.render_simple_link(
                label, archive_url, False, total_count, show_count, wrapper_attributes, nav_context
            )

        rendered = self.tree_renderer.render(submenu, nav_context)

        container_attributes = self.builder.get_container_attributes(nav_context)
        if container_attributes:
            rendered = self.processor.apply_container_attributes_to_ul(rendered, container_attributes)

        interaction_classes = self.processor.get_submenu_interaction_classes(nav_context)
        if interaction_classes:
            rendered = self.processor.apply_interaction_classes_to_li(rendered, interaction_classes)

        return self.processor.apply_wrapper_attributes(rendered, wrapper_attributes)

    def render_fallback_html(
        self,
        label: str,
        archive_url: str,
        is_disabled: bool,
        wrapper_attributes: AttributesLike = "",
    ) -> str:
        """Hand-written link markup, used when no menu node could be built.

        ``label`` must already be escaped.
        """
        html = format_html(
            '<li class="navigation-item navigation-link{}">'
            '<a class="navigation-item__content" href="{}"{}>{}</a></li>',
            f" {DISABLED_CLASS}" if is_disabled else "",
            iri_to_uri(archive_url),
            mark_safe(' aria-disabled="true"') if is_disabled else "",
            mark_safe(label),
        )
        return self.processor.apply_wrapper_attributes(html, wrapper_attributes)
