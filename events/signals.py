# events/signals.py
"""Change notifications for event content.

Two signals are published for other apps to subscribe to:

- ``content_status_transitioned``: sent after every save or delete of an
  event with ``content_type``, ``object_id``, ``old_status`` and
  ``new_status``. New events report ``old_status="new"``; deleted events
  report ``new_status="deleted"``.
- ``object_terms_changed``: sent once per affected taxonomy whenever terms
  are added to, removed from or cleared on an event, with ``content_type``,
  ``object_id``, ``taxonomy`` and ``term_ids``.
"""

import logging
from collections import defaultdict

from django.db.models.signals import m2m_changed, post_delete, post_save, pre_save
from django.dispatch import Signal, receiver

from .models import EVENT_CONTENT_TYPE, Event, Term

logger = logging.getLogger(__name__)

STATUS_NEW = "new"
STATUS_DELETED = "deleted"

content_status_transitioned = Signal()
object_terms_changed = Signal()


@receiver(pre_save, sender=Event)
def remember_previous_status(sender, instance, raw=False, **kwargs):
    if raw or instance.pk is None:
        instance._previous_status = STATUS_NEW
        return
    previous = (
        sender.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
    )
    instance._previous_status = previous or STATUS_NEW


@receiver(post_save, sender=Event)
def announce_status_transition(sender, instance, created, raw=False, **kwargs):
    # Skip fixture loading; caches are rebuilt on the next read anyway
    if raw:
        return
    old_status = getattr(instance, "_previous_status", STATUS_NEW)
    logger.debug(
        "Event %s status transitioned %s -> %s", instance.pk, old_status, instance.status
    )
    content_status_transitioned.send(
        sender=sender,
        content_type=EVENT_CONTENT_TYPE,
        object_id=instance.pk,
        old_status=old_status,
        new_status=instance.status,
    )


@receiver(post_delete, sender=Event)
def announce_deletion(sender, instance, **kwargs):
    content_status_transitioned.send(
        sender=sender,
        content_type=EVENT_CONTENT_TYPE,
        object_id=instance.pk,
        old_status=instance.status,
        new_status=STATUS_DELETED,
    )


def _send_terms_changed(event_id, taxonomy, term_ids):
    object_terms_changed.send(
        sender=Event,
        content_type=EVENT_CONTENT_TYPE,
        object_id=event_id,
        taxonomy=taxonomy,
        term_ids=sorted(term_ids),
    )


@receiver(m2m_changed, sender=Event.terms.through)
def announce_term_assignment(sender, instance, action, reverse, pk_set, **kwargs):
    """Translate ``Event.terms`` changes into ``object_terms_changed``.

    ``reverse`` is True when the change was made from the term side
    (``term.events.add(event)``); ``instance`` is then a ``Term``.
    """
    if action == "pre_clear":
        # pk_set is None on clear, so capture what is about to go away
        if reverse:
            instance._cleared_event_ids = list(
                instance.events.values_list("pk", flat=True)
            )
        else:
            instance._cleared_terms = list(
                instance.terms.values_list("pk", "taxonomy__slug")
            )
        return

    if action not in ("post_add", "post_remove", "post_clear"):
        return

    if reverse:
        if action == "post_clear":
            event_ids = getattr(instance, "_cleared_event_ids", [])
        else:
            event_ids = pk_set or []
        for event_id in sorted(event_ids):
            _send_terms_changed(event_id, instance.taxonomy.slug, [instance.pk])
        return

    if action == "post_clear":
        pairs = getattr(instance, "_cleared_terms", [])
    else:
        pairs = Term.objects.filter(pk__in=pk_set or []).values_list(
            "pk", "taxonomy__slug"
        )

    by_taxonomy = defaultdict(list)
    for term_id, taxonomy in pairs:
        by_taxonomy[taxonomy].append(term_id)
    for taxonomy, term_ids in by_taxonomy.items():
        _send_terms_changed(instance.pk, taxonomy, term_ids)
