"""Django implementations of the magic menu collaborators."""

from __future__ import annotations

import logging
import random
from html import unescape
from typing import Any, Iterable, List, Mapping, Optional

from django.apps import apps
from django.core.cache import caches
from django.template.loader import render_to_string
from django.urls import NoReverseMatch, reverse
from django.utils.html import strip_tags
from django.utils.safestring import mark_safe
from django.utils.text import capfirst
from django.utils.translation import gettext

from . import presentation
from .types import (
    MenuNode,
    NavigationContext,
    NodeAttributes,
    SubmenuNode,
    TermRecord,
    WrapperAttributes,
)

logger = logging.getLogger(__name__)

EVENTS_APP_LABEL = "events"


def _get_model(name):
    try:
        return apps.get_model(EVENTS_APP_LABEL, name)
    except LookupError:
        return None


class ORMEventRepository:
    def upcoming_event_ids(self) -> List[int]:
        Event = _get_model("Event")
        if Event is None:
            return []
        return list(
            Event.objects.published()
            .upcoming()
            .order_by("-starts_at", "-pk")
            .values_list("pk", flat=True)
        )


class ORMTermRepository:
    def term_ids_for_event(self, event_id: int, taxonomy: str) -> List[int]:
        Term = _get_model("Term")
        return list(
            Term.objects.filter(taxonomy__slug=taxonomy, events=event_id).values_list(
                "pk", flat=True
            )
        )

    def terms_by_ids(self, term_ids: Iterable[int], taxonomy: str) -> List[TermRecord]:
        Term = _get_model("Term")
        rows = (
            Term.objects.filter(taxonomy__slug=taxonomy, pk__in=list(term_ids))
            .order_by("name", "pk")
            .values_list("pk", "name")
        )
        return [TermRecord(id=pk, name=name) for pk, name in rows]

    def term_url(self, term_id: int, taxonomy: str) -> Optional[str]:
        Term = _get_model("Term")
        term = (
            Term.objects.select_related("taxonomy")
            .filter(pk=term_id, taxonomy__slug=taxonomy)
            .first()
        )
        if term is None:
            return None
        try:
            return term.get_absolute_url()
        except NoReverseMatch:
            return None


class DjangoContentTypeRegistry:
    """Answers questions about the event content type and its taxonomies."""

    archive_url_name = "events:archive"

    def __init__(self, content_type: str = "event"):
        self.content_type = content_type

    def archive_url(self) -> Optional[str]:
        if _get_model("Event") is None:
            return None
        try:
            return reverse(self.archive_url_name)
        except NoReverseMatch:
            return None

    def plural_label(self) -> Optional[str]:
        Event = _get_model("Event")
        if Event is None:
            return None
        return capfirst(str(Event._meta.verbose_name_plural))

    def is_event_content_type(self, content_type: str) -> bool:
        return content_type == self.content_type

    def taxonomy_applies_to_events(self, taxonomy: str) -> bool:
        Taxonomy = _get_model("Taxonomy")
        if Taxonomy is None:
            return False
        found = Taxonomy.objects.filter(slug=taxonomy).first()
        return bool(found and found.applies_to(self.content_type))


class DjangoCacheStore:
    """Cache store on top of a Django cache backend.

    Django backends cannot delete by prefix. Every key is written under the
    cache ``version`` held in ``<namespace>generation``, and a prefix purge
    moves the namespace to a new generation, so older entries are never read
    again and simply expire. A lost generation entry is replaced by a random
    one, which also hides everything written before.
    """

    def __init__(self, alias: str = "default", namespace: str = "magic_menu_"):
        self.alias = alias
        self.namespace = namespace

    @property
    def backend(self):
        return caches[self.alias]

    @property
    def generation_key(self) -> str:
        return f"{self.namespace}generation"

    def get(self, key: str) -> Any:
        return self.backend.get(key, version=self.generation())

    def set(self, key: str, value: Any, ttl: int) -> None:
        self.backend.set(key, value, ttl, version=self.generation())

    def delete(self, key: str) -> None:
        self.backend.delete(key, version=self.generation())

    def delete_by_prefix(self, prefix: str) -> None:
        # A purge narrower than the namespace still drops the whole namespace.
        if not (self.namespace.startswith(prefix) or prefix.startswith(self.namespace)):
            logger.warning("Prefix %r is outside namespace %r, nothing purged", prefix, self.namespace)
            return
        try:
            generation = self.backend.incr(self.generation_key)
        except ValueError:
            # incr raises ValueError for a missing key
            if not self.backend.add(self.generation_key, _fresh_generation(), None):
                generation = self.backend.incr(self.generation_key)
            else:
                generation = self.backend.get(self.generation_key)
        logger.debug("Cache namespace %s moved to generation %s", self.namespace, generation)

    def generation(self) -> int:
        generation = self.backend.get(self.generation_key)
        if generation is None:
            self.backend.add(self.generation_key, _fresh_generation(), None)
            generation = self.backend.get(self.generation_key)
        if generation is None:
            # Backends that store nothing (DummyCache)
            return 1
        return generation


def _fresh_generation() -> int:
    # Random start so a re-created generation never matches an earlier one
    return random.getrandbits(48) + 1


class TemplateTreeRenderer:
    """Renders menu nodes with the navigation link/submenu templates."""

    link_template = "magic_menu/navigation_link.html"
    submenu_template = "magic_menu/navigation_submenu.html"

    def render(self, node: MenuNode, nav_context: NavigationContext) -> str:
        if isinstance(node, SubmenuNode):
            return self._render_submenu(node, nav_context)
        return self._render_link(node.attributes)

    def _render_link(self, attributes: NodeAttributes) -> str:
        context = self._item_context(attributes, ["navigation-item", "navigation-link"])
        return render_to_string(self.link_template, context).strip()

    def _render_submenu(self, node: SubmenuNode, nav_context: NavigationContext) -> str:
        children = "".join(self._render_link(child.attributes) for child in node.children)
        show_icon = (
            nav_context.show_submenu_icon
            if node.show_submenu_icon is None
            else node.show_submenu_icon
        )
        context = self._item_context(
            node.attributes, ["navigation-item", "has-child", "navigation-submenu"]
        )
        context.update(
            children=mark_safe(children),
            show_submenu_icon=show_icon,
            open_on_click=nav_context.open_submenus_on_click,
            toggle_label=gettext("%(label)s submenu")
            % {"label": unescape(strip_tags(node.attributes.label)).strip()},
        )
        return render_to_string(self.submenu_template, context).strip()

    @staticmethod
    def _item_context(attributes: NodeAttributes, base_classes: List[str]) -> dict:
        style = attributes.style or {}
        nested_color = style.get("color") if isinstance(style.get("color"), Mapping) else {}
        custom_text = attributes.custom_text_color or nested_color.get("text")
        custom_background = attributes.custom_background_color or nested_color.get("background")

        classes = base_classes + presentation.color_classes(
            attributes.text_color, attributes.background_color, custom_text, custom_background
        )
        classes += presentation.font_size_classes(attributes.font_size, attributes.custom_font_size)
        styles = presentation.color_styles(custom_text, custom_background)
        styles += presentation.typography_styles(style, attributes.custom_font_size)

        return {
            "label": attributes.label,
            "url": attributes.url,
            "kind": attributes.kind,
            "type": attributes.type,
            "classes": " ".join(classes),
            "style": presentation.join_styles(styles),
        }


class BlockWrapperAttributes:
    """Wrapper attributes from the menu item's own configuration.

    Reads ``class_name``, ``style_variation`` (``default``, ``badge`` or
    ``starburst``), ``font_size`` and a nested ``style`` mapping
    (typography and spacing).
    """

    base_class = "magic-menu"
    style_variations = ("default", "badge", "starburst")

    def get_wrapper_attributes(self, attributes: Optional[Mapping[str, Any]]) -> str:
        if not isinstance(attributes, Mapping):
            attributes = {}

        classes = [self.base_class]
        class_name = attributes.get("class_name")
        if isinstance(class_name, str):
            classes.extend(class_name.split())

        variation = attributes.get("style_variation")
        if variation in self.style_variations and variation != "default":
            classes.append(f"is-style-{variation}")

        font_size = attributes.get("font_size")
        if isinstance(font_size, str) and font_size:
            classes.extend(presentation.font_size_classes(font_size))

        style = attributes.get("style")
        style = style if isinstance(style, Mapping) else {}
        styles = presentation.typography_styles(style) + presentation.spacing_styles(style)

        unique_classes = tuple(dict.fromkeys(classes))
        return WrapperAttributes(unique_classes, presentation.join_styles(styles)).as_fragment()
