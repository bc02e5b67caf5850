"""Settings lookups for the magic menu, with their defaults."""

from django.conf import settings

WEEK_IN_SECONDS = 60 * 60 * 24 * 7


def cache_alias():
    return getattr(settings, "MAGIC_MENU_CACHE_ALIAS", "default")


def cache_expiry():
    return getattr(settings, "MAGIC_MENU_CACHE_EXPIRY", WEEK_IN_SECONDS)


def cache_prefix():
    return getattr(settings, "MAGIC_MENU_CACHE_PREFIX", "magic_menu_")


def event_content_type():
    return getattr(settings, "MAGIC_MENU_EVENT_CONTENT_TYPE", "event")


def fallback_url():
    """Archive URL used when the event archive cannot be resolved."""
    return getattr(settings, "MAGIC_MENU_FALLBACK_URL", "/#events")
