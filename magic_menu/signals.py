import logging

from django.core.signals import setting_changed
from django.dispatch import receiver

from events.signals import content_status_transitioned, object_terms_changed

from . import services

logger = logging.getLogger(__name__)


@receiver(content_status_transitioned, dispatch_uid="magic_menu_status_transitioned")
def clear_cache_on_status_change(sender, content_type=None, old_status=None, new_status=None, **kwargs):
    cleared = services.get_menu_cache().clear_cache_on_status_change(
        content_type, old_status, new_status
    )
    if cleared:
        logger.info(
            "Event %s went %s -> %s; magic menu caches cleared",
            kwargs.get("object_id"), old_status, new_status,
        )


@receiver(object_terms_changed, dispatch_uid="magic_menu_terms_changed")
def clear_cache_on_terms_change(sender, object_id=None, taxonomy="", term_ids=None, content_type=None, **kwargs):
    services.get_menu_cache().clear_cache_on_terms_change(
        object_id, taxonomy, term_ids, content_type
    )


@receiver(setting_changed)
def reset_services_on_setting_change(sender, setting, **kwargs):
    if setting.startswith("MAGIC_MENU_") or setting == "CACHES":
        services.reset_services()
