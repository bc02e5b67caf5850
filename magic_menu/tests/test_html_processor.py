from bs4 import BeautifulSoup
from django.test import SimpleTestCase

from magic_menu.html_processor import (
    DISABLED_CLASS,
    OPEN_ON_CLICK_CLASS,
    OPEN_ON_HOVER_CLICK_CLASS,
    HTMLProcessor,
    parse_wrapper_attributes,
)
from magic_menu.types import NavigationContext, WrapperAttributes

LINK = (
    '<li class="navigation-item navigation-link" style="color: #111;">'
    '<a class="navigation-item__content" href="/events/">Events</a></li>'
)
SUBMENU = (
    '<li class="navigation-item has-child navigation-submenu">'
    '<a class="navigation-item__content" href="/events/">Events</a>'
    '<ul class="navigation__submenu-container navigation-submenu">'
    '<li class="navigation-item navigation-link">'
    '<a class="navigation-item__content" href="/events/t/a/">A</a></li>'
    "</ul></li>"
)


def soup(html):
    return BeautifulSoup(html, "html.parser")


class ParseWrapperAttributesTests(SimpleTestCase):
    def test_parses_class_and_style(self):
        parsed = parse_wrapper_attributes('class="magic-menu is-style-badge" style="padding: 4px;"')

        self.assertEqual(parsed.classes, ("magic-menu", "is-style-badge"))
        self.assertEqual(parsed.style, "padding: 4px;")

    def test_empty_fragment(self):
        self.assertFalse(parse_wrapper_attributes(""))
        self.assertFalse(parse_wrapper_attributes(None))

    def test_passes_through_parsed_attributes(self):
        attributes = WrapperAttributes(("x",))
        self.assertIs(parse_wrapper_attributes(attributes), attributes)


class HTMLProcessorTests(SimpleTestCase):
    def setUp(self):
        self.processor = HTMLProcessor()

    def test_wrapper_attributes_merge_onto_outer_li(self):
        html = self.processor.apply_wrapper_attributes(
            LINK, 'class="magic-menu navigation-item" style="margin: 0;"'
        )

        li = soup(html).li
        self.assertEqual(li["class"], ["navigation-item", "navigation-link", "magic-menu"])
        self.assertEqual(li["style"], "color: #111; margin: 0;")

    def test_styles_merge_by_property_name(self):
        html = (
            '<li class="navigation-item" style="background-color: blue; margin: 0">'
            '<a class="navigation-item__content" href="/events/">Events</a></li>'
        )

        html = self.processor.apply_wrapper_attributes(html, 'style="color: blue; margin: 4px;"')

        self.assertEqual(
            soup(html).li["style"],
            "background-color: blue; margin: 4px; color: blue;",
        )

    def test_wrapper_attributes_are_idempotent(self):
        fragment = 'class="magic-menu" style="margin: 0;"'
        once = self.processor.apply_wrapper_attributes(LINK, fragment)
        twice = self.processor.apply_wrapper_attributes(once, fragment)

        self.assertEqual(once, twice)

    def test_wrapper_attributes_only_touch_first_li(self):
        html = self.processor.apply_wrapper_attributes(SUBMENU, 'class="magic-menu"')

        items = soup(html).find_all("li")
        self.assertIn("magic-menu", items[0]["class"])
        self.assertNotIn("magic-menu", items[1]["class"])

    def test_empty_wrapper_attributes_leave_markup_alone(self):
        self.assertEqual(self.processor.apply_wrapper_attributes(LINK, ""), LINK)

    def test_disabled_marks_link_and_item(self):
        html = self.processor.add_disabled_attributes(LINK)

        parsed = soup(html)
        self.assertIn(DISABLED_CLASS, parsed.li["class"])
        self.assertEqual(parsed.a["aria-disabled"], "true")
        self.assertEqual(self.processor.add_disabled_attributes(html), html)

    def test_disabled_without_targets_is_noop(self):
        self.assertEqual(self.processor.add_disabled_attributes("<p>hi</p>"), "<p>hi</p>")

    def test_container_attributes_go_on_submenu_list(self):
        html = self.processor.apply_container_attributes_to_ul(
            SUBMENU, WrapperAttributes(("has-background",), "background-color: #fff;")
        )

        ul = soup(html).find("ul")
        self.assertIn("has-background", ul["class"])
        self.assertEqual(ul["style"], "background-color: #fff;")

    def test_container_attributes_without_list(self):
        self.assertEqual(
            self.processor.apply_container_attributes_to_ul(LINK, 'class="has-background"'),
            LINK,
        )

    def test_interaction_classes(self):
        self.assertEqual(
            self.processor.get_submenu_interaction_classes(
                NavigationContext(open_submenus_on_click=True)
            ),
            [OPEN_ON_CLICK_CLASS],
        )
        self.assertEqual(
            self.processor.get_submenu_interaction_classes(NavigationContext()),
            [OPEN_ON_HOVER_CLICK_CLASS],
        )
        self.assertEqual(
            self.processor.get_submenu_interaction_classes(
                NavigationContext(show_submenu_icon=False)
            ),
            [],
        )

    def test_interaction_classes_applied_once_to_outer_item(self):
        html = self.processor.apply_interaction_classes_to_li(SUBMENU, [OPEN_ON_CLICK_CLASS])
        html = self.processor.apply_interaction_classes_to_li(html, [OPEN_ON_CLICK_CLASS])

        items = soup(html).find_all("li")
        self.assertEqual(items[0]["class"].count(OPEN_ON_CLICK_CLASS), 1)
        self.assertNotIn(OPEN_ON_CLICK_CLASS, items[1]["class"])

    def test_no_interaction_classes_is_noop(self):
        self.assertEqual(self.processor.apply_interaction_classes_to_li(SUBMENU, []), SUBMENU)
