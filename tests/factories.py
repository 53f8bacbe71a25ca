"""Test factories for forum data.

Each factory takes a store plus the few values a test cares about and
fills in the rest.
"""

from datetime import datetime, timedelta, timezone
from itertools import count

from url_filters.models import Category, Group, Post, PostType, Topic, User
from url_filters.store import ForumStore

_sequence = count(1)


def days_ago(days: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def make_user(store: ForumStore, username: str | None = None) -> User:
    return store.create_user(username or f"user{next(_sequence)}")


def make_topic(
    store: ForumStore,
    user: User | None = None,
    category: Category | None = None,
    created_at: datetime | None = None,
    title: str | None = None,
    tags: tuple[str, ...] = (),
) -> Topic:
    """Create a topic, creating a missing author or tags on the way."""
    user = user or make_user(store)
    topic = store.create_topic(
        title or f"Topic {next(_sequence)}", user, category=category, created_at=created_at
    )
    if tags:
        store.tag_topic(topic, *(store.find_or_create_tag(name) for name in tags))
    return topic


def make_group(store: ForumStore, name: str, *members: User) -> Group:
    group = store.create_group(name)
    for member in members:
        store.add_group_member(group, member)
    return group


def make_reply(
    store: ForumStore,
    topic: Topic,
    user: User,
    post_type: PostType = PostType.REGULAR,
) -> Post:
    return store.create_post(topic, user, post_type=post_type, raw="reply")
