"""Topic list filters and the registry that applies them.

A filter is a function ``(TopicQuery, TopicListOptions) -> TopicQuery``
that either returns the query untouched or narrows it with one more
condition. Filters are independent and conjunctive, so the order they
run in does not change the result.
"""

import sqlite3
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable

from ..logging import get_logger
from ..models import TopicListOptions
from ..query import TopicQuery

logger = get_logger(__name__)


@runtime_checkable
class FilterFunction(Protocol):
    def __call__(self, results: TopicQuery, options: TopicListOptions) -> TopicQuery:
        ...


@dataclass(frozen=True)
class TopicFilter:
    """A named filter as registered with a FilterRegistry."""

    name: str
    fn: FilterFunction
    description: str = ""

    def __call__(self, results: TopicQuery, options: TopicListOptions) -> TopicQuery:
        return self.fn(results, options)


class FilterRegistry:
    """Ordered, immutable set of named topic filters.

    ``register`` returns a new registry, so a registry built at startup can
    be shared between requests without locking.
    """

    def __init__(self, filters: tuple[TopicFilter, ...] = ()):
        self._filters = filters

    def register(self, name: str, fn: FilterFunction, description: str | None = None) -> "FilterRegistry":
        """Return a registry with ``fn`` appended under ``name``.

        Raises:
            ValueError: If ``name`` is empty or already registered
            TypeError: If ``fn`` is not callable
        """
        if not name:
            raise ValueError("filter name must not be empty")
        if name in self.names:
            raise ValueError(f"filter {name!r} is already registered")
        if not callable(fn):
            raise TypeError(f"filter {name!r} is not callable")

        if description is None:
            doc = (getattr(fn, "__doc__", None) or "").strip()
            description = doc.splitlines()[0] if doc else ""
        return FilterRegistry(self._filters + (TopicFilter(name, fn, description),))

    def apply(
        self,
        results: TopicQuery,
        options: Union[TopicListOptions, Mapping[str, Any], None],
        *,
        enabled: bool = True,
    ) -> TopicQuery:
        """Fold every filter over ``results`` in registration order.

        A filter that raises is logged and skipped; the fold carries on with
        the query as it was before that filter. Store errors
        (``sqlite3.Error``) propagate. With ``enabled`` false the input is
        returned as is.
        """
        results, _ = self.apply_traced(results, options, enabled=enabled)
        return results

    def apply_traced(
        self,
        results: TopicQuery,
        options: Union[TopicListOptions, Mapping[str, Any], None],
        *,
        enabled: bool = True,
    ) -> tuple[TopicQuery, list[str]]:
        """Like ``apply``, also returning the names of filters that narrowed."""
        if not enabled:
            return results, []
        if not isinstance(options, TopicListOptions):
            options = TopicListOptions.from_params(options)

        applied: list[str] = []
        for topic_filter in self._filters:
            try:
                narrowed = topic_filter(results, options)
            except sqlite3.Error:
                raise
            except Exception as e:
                logger.warning("filter_failed", filter=topic_filter.name, error=str(e))
                continue
            if narrowed is not results:
                applied.append(topic_filter.name)
            results = narrowed
        return results, applied

    def get(self, name: str) -> TopicFilter | None:
        for topic_filter in self._filters:
            if topic_filter.name == name:
                return topic_filter
        return None

    @property
    def filters(self) -> tuple[TopicFilter, ...]:
        return self._filters

    @property
    def names(self) -> list[str]:
        return [f.name for f in self._filters]

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self):
        return iter(self._filters)


from .categories import categories, exclude_categories
from .dates import after, after_date, before_date
from .groups import no_reply_from, reply_from, topic_author
from .tags import exclude_tags, include_tags


def default_registry() -> FilterRegistry:
    """Registry with every URL filter, in the order they are documented."""
    return (
        FilterRegistry()
        .register("after", after)
        .register("after_date", after_date)
        .register("before_date", before_date)
        .register("categories", categories)
        .register("exclude_categories", exclude_categories)
        .register("include_tags", include_tags, "Topics with any of the given tags")
        .register("exclude_tags", exclude_tags, "Topics with none of the given tags")
        .register("topic_author", topic_author)
        .register("reply_from", reply_from)
        .register("no_reply_from", no_reply_from)
    )


__all__ = [
    "FilterFunction",
    "TopicFilter",
    "FilterRegistry",
    "default_registry",
    "after",
    "after_date",
    "before_date",
    "categories",
    "exclude_categories",
    "include_tags",
    "exclude_tags",
    "topic_author",
    "reply_from",
    "no_reply_from",
]
