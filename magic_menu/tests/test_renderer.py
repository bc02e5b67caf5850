from unittest.mock import Mock, patch

from bs4 import BeautifulSoup
from django.test import SimpleTestCase

from magic_menu.adapters import BlockWrapperAttributes, TemplateTreeRenderer
from magic_menu.block_builder import BlockBuilder
from magic_menu.cache import EventMenuCache
from magic_menu.exceptions import BlockBuildError
from magic_menu.html_processor import (
    DISABLED_CLASS,
    OPEN_ON_CLICK_CLASS,
    OPEN_ON_HOVER_CLICK_CLASS,
    HTMLProcessor,
)
from magic_menu.label_formatter import COUNT_CLASS, LabelFormatter
from magic_menu.renderer import Renderer

from .doubles import MemoryStore, StaticContentTypes, StaticEvents, StaticTerms

NAVIGATION = {
    "textColor": "primary",
    "backgroundColor": "base",
    "overlayTextColor": "contrast",
    "overlayBackgroundColor": "tertiary",
}


class RendererTestMixin:
    event_ids = [1, 2, 3]

    def build_renderer(self, events=None, terms=None, content_types=None, wrapper=None):
        self.terms = terms or StaticTerms(
            names={10: "Workshops", 11: "Concerts"},
            assignments={"event-type": {1: [10, 11], 2: [10], 3: []}},
        )
        self.content_types = content_types or StaticContentTypes(archive="/events/")
        formatter = LabelFormatter(self.content_types)
        cache = EventMenuCache(
            store=MemoryStore(),
            events=events or StaticEvents(self.event_ids),
            terms=self.terms,
            content_types=self.content_types,
            prefix="test_menu_",
            expiry=60,
        )
        return Renderer(
            cache=cache,
            formatter=formatter,
            builder=BlockBuilder(self.terms, formatter),
            processor=HTMLProcessor(),
            tree_renderer=TemplateTreeRenderer(),
            content_types=self.content_types,
            wrapper_attributes=wrapper or BlockWrapperAttributes(),
            fallback_url="/#events",
        )

    @staticmethod
    def parse(html):
        return BeautifulSoup(html, "html.parser")

    @staticmethod
    def count_badge(tag):
        badge = tag.find("span", class_=COUNT_CLASS)
        return int(badge.get_text()) if badge else None


class RenderStateTests(RendererTestMixin, SimpleTestCase):
    def test_no_upcoming_events_renders_disabled_link(self):
        renderer = self.build_renderer(events=StaticEvents([]))

        html = renderer.render({"label": "Events", "taxonomy": "event-type", "show_event_count": True})

        parsed = self.parse(html)
        item = parsed.li
        self.assertIn(DISABLED_CLASS, item["class"])
        self.assertEqual(parsed.a["href"], "/events/")
        self.assertEqual(parsed.a["aria-disabled"], "true")
        self.assertEqual(self.count_badge(item), 0)
        self.assertIsNone(parsed.find("ul"))

    def test_without_taxonomy_renders_link_with_total(self):
        renderer = self.build_renderer()

        for taxonomy in ("", "none", None):
            with self.subTest(taxonomy=taxonomy):
                html = renderer.render({"label": "Events", "taxonomy": taxonomy, "show_event_count": True})

                parsed = self.parse(html)
                self.assertNotIn(DISABLED_CLASS, parsed.li["class"])
                self.assertFalse(parsed.a.has_attr("aria-disabled"))
                self.assertEqual(self.count_badge(parsed.li), 3)
                self.assertIsNone(parsed.find("ul"))

    def test_taxonomy_without_terms_renders_link(self):
        renderer = self.build_renderer()

        html = renderer.render({"label": "Events", "taxonomy": "venue"})

        parsed = self.parse(html)
        self.assertIsNone(parsed.find("ul"))
        self.assertEqual(parsed.a["href"], "/events/")
        self.assertIsNone(self.count_badge(parsed.li))

    def test_submenu_lists_terms_with_counts(self):
        renderer = self.build_renderer()

        html = renderer.render(
            {
                "label": "Events",
                "taxonomy": "event-type",
                "show_event_count": True,
                "show_term_event_count": True,
            },
            NAVIGATION,
        )

        parsed = self.parse(html)
        outer = parsed.li
        self.assertIn("has-child", outer["class"])
        self.assertEqual(outer.a["href"], "/events/")
        self.assertEqual(self.count_badge(outer.a), 3)

        children = parsed.find("ul").find_all("li", recursive=False)
        self.assertEqual(
            [(child.a["href"], child.a.get_text(" ", strip=True)) for child in children],
            [
                ("/events/event-type/term-11/", "Concerts 1"),
                ("/events/event-type/term-10/", "Workshops 2"),
            ],
        )

    def test_submenu_counts_hidden_unless_requested(self):
        renderer = self.build_renderer()

        html = renderer.render({"label": "Events", "taxonomy": "event-type"})

        self.assertIsNone(self.parse(html).find("span", class_=COUNT_CLASS))

    def test_submenu_without_resolvable_terms_degrades_to_link(self):
        terms = StaticTerms(
            names={10: "Workshops"},
            assignments={"event-type": {1: [10]}},
            urls={},
        )
        renderer = self.build_renderer(terms=terms)

        html = renderer.render({"label": "Events", "taxonomy": "event-type"})

        parsed = self.parse(html)
        self.assertIsNone(parsed.find("ul"))
        self.assertIn("navigation-link", parsed.li["class"])

    def test_default_label_comes_from_content_type(self):
        renderer = self.build_renderer(content_types=StaticContentTypes(label="Gatherings"))

        for attributes in (None, {}, {"label": "   "}):
            html = renderer.render(attributes)
            self.assertEqual(self.parse(html).a.get_text(strip=True), "Gatherings")

    def test_missing_archive_falls_back_to_fallback_url(self):
        renderer = self.build_renderer(content_types=StaticContentTypes(archive=None))

        html = renderer.render({"label": "Events"})

        self.assertEqual(self.parse(html).a["href"], "/#events")

    def test_label_is_escaped(self):
        renderer = self.build_renderer()

        html = renderer.render({"label": "<script>alert(1)</script>"})

        self.assertIsNone(self.parse(html).find("script"))

    def test_unexpected_failure_renders_disabled_fallback(self):
        renderer = self.build_renderer()
        renderer.cache = Mock()
        renderer.cache.get_upcoming_events.side_effect = RuntimeError("boom")

        with self.assertLogs("magic_menu.renderer", level="ERROR"):
            html = renderer.render({"label": "Events"})

        parsed = self.parse(html)
        self.assertEqual(parsed.a["href"], "/#events")
        self.assertEqual(parsed.a["aria-disabled"], "true")
        self.assertIn(DISABLED_CLASS, parsed.li["class"])
        self.assertEqual(parsed.a.get_text(), "Events")

    def test_wrapper_attributes_reach_outer_item(self):
        renderer = self.build_renderer()

        html = renderer.render(
            {
                "label": "Events",
                "taxonomy": "event-type",
                "class_name": "featured",
                "style_variation": "badge",
                "style": {"spacing": {"padding": {"left": "8px"}}},
            }
        )

        outer = self.parse(html).li
        for class_name in ("magic-menu", "featured", "is-style-badge"):
            self.assertIn(class_name, outer["class"])
        self.assertIn("padding-left: 8px;", outer["style"])


class BuildFailureTests(RendererTestMixin, SimpleTestCase):
    attributes = {
        "label": "Art & <Music>",
        "taxonomy": "event-type",
        "show_event_count": True,
        "class_name": "featured",
        "style": {"spacing": {"margin": "0 auto"}},
    }

    def assert_wrapper_merged(self, item):
        self.assertIn("magic-menu", item["class"])
        self.assertIn("featured", item["class"])
        self.assertIn("margin: 0 auto;", item["style"])

    def test_link_build_failure_renders_literal_link(self):
        renderer = self.build_renderer()

        with patch.object(renderer.builder, "create_link_block", side_effect=BlockBuildError("bad")):
            with self.assertLogs("magic_menu.renderer", level="WARNING"):
                html = renderer.render(dict(self.attributes, taxonomy=""))

        parsed = self.parse(html)
        self.assertEqual(parsed.a["href"], "/events/")
        self.assertEqual(parsed.a.contents[0], "Art & <Music> ")
        self.assertIsNone(parsed.find("music"))
        self.assertEqual(self.count_badge(parsed.li), 3)
        self.assertFalse(parsed.a.has_attr("aria-disabled"))
        self.assertNotIn(DISABLED_CLASS, parsed.li["class"])
        self.assert_wrapper_merged(parsed.li)

    def test_link_build_failure_without_events_is_disabled(self):
        renderer = self.build_renderer(events=StaticEvents([]))

        with patch.object(renderer.builder, "create_link_block", side_effect=BlockBuildError("bad")):
            with self.assertLogs("magic_menu.renderer", level="WARNING"):
                html = renderer.render(self.attributes)

        parsed = self.parse(html)
        self.assertEqual(parsed.a["href"], "/events/")
        self.assertEqual(parsed.a["aria-disabled"], "true")
        self.assertIn(DISABLED_CLASS, parsed.li["class"])
        self.assertEqual(self.count_badge(parsed.li), 0)
        self.assert_wrapper_merged(parsed.li)

    def test_submenu_build_failure_degrades_to_link(self):
        renderer = self.build_renderer()

        with patch.object(renderer.builder, "create_submenu_block", side_effect=BlockBuildError("bad")):
            with self.assertLogs("magic_menu.renderer", level="WARNING"):
                html = renderer.render(self.attributes)

        parsed = self.parse(html)
        self.assertIsNone(parsed.find("ul"))
        self.assertIn("navigation-link", parsed.li["class"])
        self.assertEqual(parsed.a["href"], "/events/")
        self.assertEqual(self.count_badge(parsed.li), 3)
        self.assertNotIn(DISABLED_CLASS, parsed.li["class"])
        self.assert_wrapper_merged(parsed.li)

    def test_submenu_and_link_failure_renders_literal_link(self):
        renderer = self.build_renderer()
        error = BlockBuildError("bad")

        with patch.object(renderer.builder, "create_submenu_block", side_effect=error), \
                patch.object(renderer.builder, "create_link_block", side_effect=error):
            with self.assertLogs("magic_menu.renderer", level="WARNING") as logs:
                html = renderer.render(self.attributes)

        self.assertEqual(len(logs.records), 2)
        parsed = self.parse(html)
        self.assertIsNone(parsed.find("ul"))
        self.assertEqual(parsed.a["href"], "/events/")
        self.assertEqual(self.count_badge(parsed.li), 3)
        self.assert_wrapper_merged(parsed.li)


class ColorInheritanceTests(RendererTestMixin, SimpleTestCase):
    def render_submenu(self, navigation):
        renderer = self.build_renderer()
        return self.parse(renderer.render({"label": "Events", "taxonomy": "event-type"}, navigation))

    def test_simple_link_uses_primary_colors(self):
        renderer = self.build_renderer()

        parsed = self.parse(renderer.render({"label": "Events"}, NAVIGATION))

        classes = parsed.li["class"]
        self.assertIn("has-primary-color", classes)
        self.assertIn("has-base-background-color", classes)
        self.assertNotIn("has-contrast-color", classes)
        self.assertNotIn("has-tertiary-background-color", classes)

    def test_submenu_and_terms_use_overlay_colors(self):
        parsed = self.render_submenu(NAVIGATION)

        outer = parsed.li
        self.assertIn("has-contrast-color", outer["class"])
        self.assertNotIn("has-primary-color", outer["class"])

        container = parsed.find("ul")
        self.assertIn("has-contrast-color", container["class"])
        self.assertIn("has-tertiary-background-color", container["class"])

        for child in container.find_all("li"):
            self.assertIn("has-contrast-color", child["class"])
            self.assertNotIn("has-primary-color", child["class"])
            self.assertNotIn("has-base-background-color", child["class"])

    def test_nested_color_style_never_leaks(self):
        navigation = dict(NAVIGATION, style={"color": {"text": "#ff0000"}})

        parsed = self.render_submenu(navigation)

        for item in parsed.find_all("li"):
            self.assertNotIn("#ff0000", item.get("style", ""))

    def test_hover_menu_gets_toggle_icon(self):
        parsed = self.render_submenu(NAVIGATION)

        self.assertIn(OPEN_ON_HOVER_CLICK_CLASS, parsed.li["class"])
        toggle = parsed.find("button")
        self.assertIn("navigation__submenu-icon", toggle["class"])
        self.assertEqual(toggle["aria-label"], "Events submenu")

    def test_click_menu_renders_toggle_button(self):
        parsed = self.render_submenu(dict(NAVIGATION, openSubmenusOnClick=True))

        outer = parsed.li
        self.assertIn(OPEN_ON_CLICK_CLASS, outer["class"])
        self.assertNotIn(OPEN_ON_HOVER_CLICK_CLASS, outer["class"])
        self.assertIsNotNone(outer.find("button", recursive=False))
        self.assertIsNone(outer.find("a", recursive=False))

    def test_hidden_icon_menu_has_no_toggle(self):
        parsed = self.render_submenu(dict(NAVIGATION, showSubmenuIcon=False))

        self.assertIsNone(parsed.find("button"))
        self.assertNotIn(OPEN_ON_HOVER_CLICK_CLASS, parsed.li["class"])
