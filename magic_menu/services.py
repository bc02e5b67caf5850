"""Process-wide instances of the magic menu components.

Each factory builds its component once and hands the shared collaborators
to it. Call :func:`reset_services` after changing ``MAGIC_MENU_*`` settings
(done automatically on ``setting_changed``).
"""

from functools import lru_cache

from . import conf
from .adapters import (
    BlockWrapperAttributes,
    DjangoCacheStore,
    DjangoContentTypeRegistry,
    ORMEventRepository,
    ORMTermRepository,
    TemplateTreeRenderer,
)
from .block_builder import BlockBuilder
from .cache import EventMenuCache
from .html_processor import HTMLProcessor
from .label_formatter import LabelFormatter
from .renderer import Renderer


@lru_cache(maxsize=1)
def get_content_types():
    return DjangoContentTypeRegistry(conf.event_content_type())


@lru_cache(maxsize=1)
def get_term_repository():
    return ORMTermRepository()


@lru_cache(maxsize=1)
def get_menu_cache():
    prefix = conf.cache_prefix()
    return EventMenuCache(
        store=DjangoCacheStore(conf.cache_alias(), namespace=prefix),
        events=ORMEventRepository(),
        terms=get_term_repository(),
        content_types=get_content_types(),
        prefix=prefix,
        expiry=conf.cache_expiry(),
        content_type=conf.event_content_type(),
    )


@lru_cache(maxsize=1)
def get_label_formatter():
    return LabelFormatter(get_content_types())


@lru_cache(maxsize=1)
def get_renderer():
    formatter = get_label_formatter()
    return Renderer(
        cache=get_menu_cache(),
        formatter=formatter,
        builder=BlockBuilder(get_term_repository(), formatter, conf.event_content_type()),
        processor=HTMLProcessor(),
        tree_renderer=TemplateTreeRenderer(),
        content_types=get_content_types(),
        wrapper_attributes=BlockWrapperAttributes(),
        fallback_url=conf.fallback_url(),
    )


def reset_services():
    for factory in (
        get_content_types,
        get_term_repository,
        get_menu_cache,
        get_label_formatter,
        get_renderer,
    ):
        factory.cache_clear()
