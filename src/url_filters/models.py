"""Pydantic models for topic listings and their URL options."""

from collections.abc import Mapping
from datetime import datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PostType(IntEnum):
    """Post types as stored in ``posts.post_type``."""

    REGULAR = 1
    MODERATOR_ACTION = 2
    SMALL_ACTION = 3
    WHISPER = 4


class Category(BaseModel):
    id: int
    slug: str
    name: str
    parent_category_id: int | None = None


class Tag(BaseModel):
    id: int
    name: str


class User(BaseModel):
    id: int
    username: str


class Group(BaseModel):
    """A named collection of users."""

    id: int
    name: str


class Topic(BaseModel):
    """A forum discussion thread."""

    id: int
    title: str
    category_id: int | None = None
    user_id: int | None = None
    created_at: datetime
    bumped_at: datetime


class Post(BaseModel):
    """A message within a topic. Post number 1 opens the thread."""

    id: int
    topic_id: int
    user_id: int
    post_number: int
    post_type: PostType = PostType.REGULAR
    raw: str = ""
    created_at: datetime


class TopicListOptions(BaseModel):
    """URL parameters understood by the topic filters.

    Every field is the raw request value. Parsing and validation belong to
    the filter that reads the field, so a bad value only disables that
    one filter.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    after: str | None = Field(
        default=None, description="Only topics created within the last N days"
    )
    after_date: str | None = Field(
        default=None, description="Only topics created after YYYY-MM-DD"
    )
    before_date: str | None = Field(
        default=None, description="Only topics created before YYYY-MM-DD"
    )
    categories: str | None = Field(
        default=None, description="Comma-separated category slugs to include"
    )
    exclude_categories: str | None = Field(
        default=None,
        description="Comma-separated category slugs to exclude, with their subcategories",
    )
    include_tags: str | None = Field(
        default=None, description="Comma-separated tag names; topics with any of them"
    )
    exclude_tags: str | None = Field(
        default=None, description="Comma-separated tag names; topics with none of them"
    )
    topic_author: str | None = Field(
        default=None, description="Group whose members started the topic"
    )
    reply_from: str | None = Field(
        default=None, description="Group with at least one member reply in the topic"
    )
    no_reply_from: str | None = Field(
        default=None, description="Group with no member replies in the topic"
    )

    @classmethod
    def from_params(cls, params: Mapping[str, Any] | None) -> "TopicListOptions":
        """Build options from raw request parameters.

        Unknown keys are ignored. Values other than strings and integers
        are dropped, as are empty strings.
        """
        values: dict[str, str] = {}
        for key, value in (params or {}).items():
            if key not in cls.model_fields:
                continue
            if isinstance(value, bool) or not isinstance(value, (str, int)):
                continue
            value = str(value)
            if value.strip():
                values[key] = value
        return cls(**values)

    def present(self) -> dict[str, str]:
        """Return only the options that were supplied."""
        return self.model_dump(exclude_none=True)


class TopicList(BaseModel):
    """One page of a filtered topic listing."""

    topics: list[Topic]
    options: TopicListOptions
    filters_applied: list[str] = Field(
        default_factory=list, description="Filters that narrowed the query"
    )
    page: int = 0
    per_page: int
    total: int = Field(description="Matching topics across all pages")
