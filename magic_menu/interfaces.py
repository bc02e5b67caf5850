"""Collaborators the menu pipeline depends on.

Django-backed implementations live in :mod:`magic_menu.adapters`; tests
swap in simple doubles.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence

from .types import MenuNode, NavigationContext, TermRecord


class EventRepository(Protocol):
    def upcoming_event_ids(self) -> Sequence[int]:
        """Published, upcoming events, newest first, ids only."""


class TermRepository(Protocol):
    def term_ids_for_event(self, event_id: int, taxonomy: str) -> Sequence[int]:
        ...

    def terms_by_ids(self, term_ids: Iterable[int], taxonomy: str) -> List[TermRecord]:
        """Terms of ``taxonomy`` with the given ids, sorted by name."""

    def term_url(self, term_id: int, taxonomy: str) -> Optional[str]:
        """Canonical URL of a term, or ``None`` when it cannot be resolved."""


class ContentTypeRegistry(Protocol):
    def archive_url(self) -> Optional[str]:
        ...

    def plural_label(self) -> Optional[str]:
        ...

    def is_event_content_type(self, content_type: str) -> bool:
        ...

    def taxonomy_applies_to_events(self, taxonomy: str) -> bool:
        ...


class CacheStore(Protocol):
    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def delete_by_prefix(self, prefix: str) -> None:
        ...


class TreeRenderer(Protocol):
    def render(self, node: MenuNode, nav_context: NavigationContext) -> str:
        ...


class WrapperAttributesProvider(Protocol):
    def get_wrapper_attributes(self, attributes: Optional[Mapping[str, Any]]) -> str:
        """A ``class="…" style="…"`` fragment for the menu item's root element."""
