"""Template entry point for the magic menu item.

Usage::

    {% load magic_menu_tags %}
    <ul class="navigation">
      {% magic_menu label="What's on" taxonomy="event-type" show_event_count=True %}
    </ul>

The enclosing navigation's presentation state (``textColor``,
``overlayBackgroundColor``, ``showSubmenuIcon``, ...) is read from the
``navigation`` template variable unless passed explicitly.
"""

from __future__ import annotations

from django import template

from magic_menu.services import get_renderer

register = template.Library()


@register.simple_tag(takes_context=True)
def magic_menu(
    context,
    label="",
    taxonomy="",
    show_event_count=False,
    show_term_event_count=False,
    class_name="",
    style_variation="",
    font_size="",
    style=None,
    navigation=None,
):
    """Render the events menu item as a navigation ``<li>``."""
    attributes = {
        "label": label,
        "taxonomy": taxonomy,
        "show_event_count": show_event_count,
        "show_term_event_count": show_term_event_count,
        "class_name": class_name,
        "style_variation": style_variation,
        "font_size": font_size,
        "style": style,
    }
    ancestor = navigation if navigation is not None else context.get("navigation")
    return get_renderer().render(attributes, ancestor)
