"""Cached upcoming-event and term-count lookups for the magic menu.

Two kinds of entries live under the namespace prefix:

- ``<prefix>upcoming_events``: list of upcoming event ids.
- ``<prefix>terms_<taxonomy>``: list of ``{term_id, name, count}`` dicts,
  sorted by name.

Entries expire after a week as a safety net; the change signals handled in
:mod:`magic_menu.signals` are what keep them fresh.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from .conf import WEEK_IN_SECONDS
from .interfaces import CacheStore, ContentTypeRegistry, EventRepository, TermRepository
from .types import TermSummary

logger = logging.getLogger(__name__)

PUBLISHED = "published"


class EventMenuCache:
    def __init__(
        self,
        store: CacheStore,
        events: EventRepository,
        terms: TermRepository,
        content_types: ContentTypeRegistry,
        *,
        prefix: str = "magic_menu_",
        expiry: int = WEEK_IN_SECONDS,
        content_type: str = "event",
    ):
        self.store = store
        self.events = events
        self.terms = terms
        self.content_types = content_types
        self.prefix = prefix
        self.expiry = expiry
        self.content_type = content_type

    @property
    def upcoming_events_key(self) -> str:
        return f"{self.prefix}upcoming_events"

    def terms_key(self, taxonomy_slug: str) -> str:
        return f"{self.prefix}terms_{taxonomy_slug}"

    # ── store access; failures behave like a miss ──────────────────────────

    def _read(self, key: str) -> Any:
        try:
            return self.store.get(key)
        except Exception:
            logger.warning("Cache read failed for %s", key, exc_info=True)
            return None

    def _write(self, key: str, value: Any) -> None:
        try:
            self.store.set(key, value, self.expiry)
        except Exception:
            logger.warning("Cache write failed for %s", key, exc_info=True)

    # ── lookups ────────────────────────────────────────────────────────────

    def get_upcoming_events(self) -> List[int]:
        """Return ids of all published, upcoming events (cached).

        An empty result is cached too, so a site without events does not
        query on every page view.
        """
        cached = self._read(self.upcoming_events_key)
        if isinstance(cached, (list, tuple)):
            return list(cached)

        try:
            events = list(dict.fromkeys(int(pk) for pk in self.events.upcoming_event_ids()))
        except Exception:
            logger.warning("Upcoming events query failed", exc_info=True)
            events = []

        self._write(self.upcoming_events_key, events)
        logger.info("Cached %d upcoming event(s)", len(events))
        return events

    def get_terms_with_event_counts(
        self, taxonomy_slug: str, upcoming_event_ids: Iterable[int]
    ) -> List[TermSummary]:
        """Return the terms of ``taxonomy_slug`` used by upcoming events.

        Each summary carries the number of upcoming events tagged with the
        term. Malformed cached entries are dropped on read.
        """
        key = self.terms_key(taxonomy_slug)
        cached = self._read(key)
        if isinstance(cached, (list, tuple)):
            summaries = [TermSummary.from_dict(item) for item in cached]
            return [summary for summary in summaries if summary is not None]

        summaries = self._compute_term_summaries(taxonomy_slug, upcoming_event_ids)
        self._write(key, [summary.as_dict() for summary in summaries])
        logger.info("Cached %d term(s) for taxonomy %s", len(summaries), taxonomy_slug)
        return summaries

    def _compute_term_summaries(
        self, taxonomy_slug: str, upcoming_event_ids: Iterable[int]
    ) -> List[TermSummary]:
        event_ids = list(dict.fromkeys(upcoming_event_ids))
        assignments = self._collect_assignments(taxonomy_slug, event_ids)

        term_ids: Set[int] = set()
        for ids in assignments.values():
            term_ids.update(ids)
        if not term_ids:
            return []

        try:
            records = self.terms.terms_by_ids(sorted(term_ids), taxonomy_slug)
        except Exception:
            logger.warning("Term lookup failed for taxonomy %s", taxonomy_slug, exc_info=True)
            return []

        summaries = []
        seen: Set[int] = set()
        for record in records or []:
            if record.id in seen:
                continue
            seen.add(record.id)
            summaries.append(
                TermSummary(
                    term_id=record.id,
                    name=record.name,
                    count=self._count_events_for_term(record.id, event_ids, assignments),
                )
            )
        return summaries

    def _collect_assignments(self, taxonomy_slug: str, event_ids: List[int]) -> Dict[int, Set[int]]:
        assignments = {}
        for event_id in event_ids:
            try:
                ids = self.terms.term_ids_for_event(event_id, taxonomy_slug)
            except Exception:
                logger.warning(
                    "Could not read %s terms of event %s", taxonomy_slug, event_id, exc_info=True
                )
                continue
            assignments[event_id] = {term_id for term_id in ids or [] if term_id > 0}
        return assignments

    @staticmethod
    def _count_events_for_term(
        term_id: int, event_ids: List[int], assignments: Dict[int, Set[int]]
    ) -> int:
        return sum(1 for event_id in event_ids if term_id in assignments.get(event_id, ()))

    # ── invalidation ───────────────────────────────────────────────────────

    def clear_cache_on_status_change(
        self, content_type: Optional[str], old_status: Optional[str], new_status: Optional[str]
    ) -> bool:
        """Clear everything when an event enters or leaves published status."""
        if content_type != self.content_type:
            return False
        if PUBLISHED not in (old_status, new_status):
            return False
        self.clear_all_caches()
        return True

    def clear_cache_on_terms_change(
        self,
        object_id: Optional[int],
        taxonomy: str,
        term_ids: Optional[Iterable[int]] = None,
        content_type: Optional[str] = None,
    ) -> bool:
        """Clear the term snapshot of ``taxonomy`` after an event's terms change."""
        if content_type is not None and not self.content_types.is_event_content_type(content_type):
            return False
        try:
            registered = self.content_types.taxonomy_applies_to_events(taxonomy)
        except Exception:
            logger.warning("Could not check taxonomy %s", taxonomy, exc_info=True)
            registered = False
        if not registered:
            return False

        try:
            self.store.delete(self.terms_key(taxonomy))
        except Exception:
            logger.exception("Failed to clear term cache for taxonomy %s", taxonomy)
            return False
        logger.debug("Cleared term cache for %s (event %s)", taxonomy, object_id)
        return True

    def clear_all_caches(self) -> None:
        """Delete every entry under the namespace prefix."""
        try:
            self.store.delete(self.upcoming_events_key)
            self.store.delete_by_prefix(self.prefix)
        except Exception:
            logger.exception("Failed to clear magic menu caches")
            return
        logger.info("Cleared all magic menu caches")
