"""Composable, parameterized topic query.

A ``TopicQuery`` is an immutable list of SQL conditions over ``topics``
plus the values bound to them. Filters narrow it; nothing is executed
until ``all()``, ``ids()`` or ``count()`` is called.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from .models import Topic

if TYPE_CHECKING:
    from .store import ForumStore

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_PLACEHOLDER = re.compile(r"(?<!:):([A-Za-z_][A-Za-z0-9_]*)")


def format_timestamp(value: date) -> str:
    """Format a date or datetime the way ``created_at`` columns store it.

    Aware datetimes are converted to UTC, naive ones are taken as UTC and
    plain dates mean midnight UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.strftime(TIMESTAMP_FORMAT)
    return datetime(value.year, value.month, value.day).strftime(TIMESTAMP_FORMAT)


def _bind(value: Any) -> Any:
    if isinstance(value, date):
        return format_timestamp(value)
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class Condition:
    """One ANDed condition with its already-namespaced parameters."""

    sql: str
    params: Mapping[str, Any] = field(default_factory=dict)


class TopicQuery:
    """Immutable query over topics supporting conjunctive narrowing."""

    def __init__(self, store: "ForumStore", conditions: tuple[Condition, ...] = ()):
        self._store = store
        self._conditions = conditions

    @property
    def lookups(self) -> "ForumStore":
        """Category, tag and group lookups backing this query."""
        return self._store

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return self._conditions

    def narrow(self, condition: str, **params: Any) -> "TopicQuery":
        """Return a new query with ``condition`` ANDed in.

        ``condition`` refers to values as ``:name`` placeholders. Lists,
        tuples and sets expand to one placeholder per element, so write
        ``IN (:ids)``. Names are namespaced per condition, so two filters
        can both use ``:group_id``.

        Raises:
            KeyError: If the condition references an unbound name
        """
        prefix = f"c{len(self._conditions)}_"
        bound: dict[str, Any] = {}

        def substitute(match: re.Match) -> str:
            name = match.group(1)
            if name not in params:
                raise KeyError(f"unbound query parameter :{name}")
            value = params[name]
            key = prefix + name
            if isinstance(value, (set, frozenset)):
                value = sorted(value)
            if isinstance(value, (list, tuple)):
                keys = [f"{key}_{i}" for i in range(len(value))]
                for k, item in zip(keys, value):
                    bound[k] = _bind(item)
                return ", ".join(f":{k}" for k in keys)
            bound[key] = _bind(value)
            return f":{key}"

        sql = _PLACEHOLDER.sub(substitute, condition.strip())
        return TopicQuery(self._store, self._conditions + (Condition(sql, bound),))

    def to_sql(
        self,
        select: str = "topics.*",
        order_by: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[str, dict[str, Any]]:
        """Render the query as SQL text plus named parameters."""
        sql = f"SELECT {select} FROM topics"
        params: dict[str, Any] = {}
        if self._conditions:
            sql += " WHERE " + " AND ".join(f"({c.sql})" for c in self._conditions)
            for c in self._conditions:
                params.update(c.params)
        if order_by:
            sql += f" ORDER BY {order_by}"
        if limit is not None:
            sql += " LIMIT :limit OFFSET :offset"
            params["limit"] = limit
            params["offset"] = offset
        return sql, params

    def all(
        self,
        order_by: str = "topics.bumped_at DESC, topics.id DESC",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Topic]:
        """Execute the query and return matching topics."""
        sql, params = self.to_sql(order_by=order_by, limit=limit, offset=offset)
        return [Topic.model_validate(dict(row)) for row in self._store.fetch_rows(sql, params)]

    def ids(self) -> list[int]:
        """Execute the query and return matching topic ids, ascending."""
        sql, params = self.to_sql(select="topics.id", order_by="topics.id")
        return [row["id"] for row in self._store.fetch_rows(sql, params)]

    def count(self) -> int:
        sql, params = self.to_sql(select="COUNT(*) AS total")
        return self._store.fetch_rows(sql, params)[0]["total"]

    def __repr__(self) -> str:
        return f"TopicQuery(conditions={len(self._conditions)})"
