import logging

from django.utils.html import escape, format_html
from django.utils.safestring import SafeString, mark_safe
from django.utils.translation import gettext

from .interfaces import ContentTypeRegistry

logger = logging.getLogger(__name__)

COUNT_CLASS = "magic-menu__count"


class LabelFormatter:
    """Builds menu labels, optionally followed by an event count badge."""

    def __init__(self, content_types: ContentTypeRegistry):
        self.content_types = content_types

    def get_fallback_label(self) -> str:
        """Plural label of the event content type, else "Events"."""
        try:
            label = self.content_types.plural_label()
        except Exception:
            logger.warning("Could not read the event type label", exc_info=True)
            label = None
        if isinstance(label, str) and label:
            return label
        return gettext("Events")

    def format_label_with_count(self, label: str, count: int, show_count: bool) -> SafeString:
        if not show_count:
            return escape(label)

        count_html = format_html('<span class="{}">{}</span>', COUNT_CLASS, int(count))
        # Translators: %(label)s is the menu label, %(count)s the event count
        # badge. Reorder them to move the badge before the label.
        template = gettext("%(label)s %(count)s")
        return mark_safe(template % {"label": escape(label), "count": count_html})
