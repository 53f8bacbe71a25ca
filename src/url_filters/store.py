"""SQLite forum store: schema, reference lookups and write helpers.

Holds the parts of a forum the URL filters read: categories, tags,
groups and their members, topics and posts.
"""

import sqlite3
from collections.abc import Iterable, Mapping, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator, Protocol, runtime_checkable

from .logging import get_logger
from .models import Category, Group, Post, PostType, Tag, Topic, User
from .query import TIMESTAMP_FORMAT, TopicQuery, format_timestamp

logger = get_logger(__name__)


@runtime_checkable
class CategoryLookup(Protocol):
    def category_ids_for_slugs(self, slugs: Iterable[str]) -> list[int]:
        """Resolve category slugs to ids. Unknown slugs are left out."""
        ...


@runtime_checkable
class TagLookup(Protocol):
    def tag_ids_for_names(self, names: Iterable[str]) -> list[int]:
        """Resolve tag names to ids. Unknown names are left out."""
        ...


@runtime_checkable
class GroupLookup(Protocol):
    def group_by_name(self, name: str) -> Group | None:
        """Find a group by its name."""
        ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ForumStore:
    """SQLite-backed forum data implementing the filter lookups."""

    def __init__(self, db_path: Path):
        """Open (and if needed create) the forum database.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self._ensure_db_exists()
        self._create_tables()

    def _ensure_db_exists(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def _create_tables(self) -> None:
        with self._get_connection() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS categories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    slug TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    parent_category_id INTEGER REFERENCES categories(id)
                );

                CREATE TABLE IF NOT EXISTS tags (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE
                );

                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE
                );

                CREATE TABLE IF NOT EXISTS groups (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE
                );

                CREATE TABLE IF NOT EXISTS group_users (
                    group_id INTEGER NOT NULL REFERENCES groups(id),
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    PRIMARY KEY (group_id, user_id)
                );

                CREATE TABLE IF NOT EXISTS topics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    category_id INTEGER REFERENCES categories(id),
                    user_id INTEGER REFERENCES users(id),
                    created_at TEXT NOT NULL,
                    bumped_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS topic_tags (
                    topic_id INTEGER NOT NULL REFERENCES topics(id),
                    tag_id INTEGER NOT NULL REFERENCES tags(id),
                    PRIMARY KEY (topic_id, tag_id)
                );

                CREATE TABLE IF NOT EXISTS posts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    topic_id INTEGER NOT NULL REFERENCES topics(id),
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    post_number INTEGER NOT NULL,
                    post_type INTEGER NOT NULL DEFAULT 1,
                    raw TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    UNIQUE(topic_id, post_number)
                );

                CREATE INDEX IF NOT EXISTS idx_topics_category ON topics(category_id);
                CREATE INDEX IF NOT EXISTS idx_topics_created_at ON topics(created_at);
                CREATE INDEX IF NOT EXISTS idx_topic_tags_tag ON topic_tags(tag_id);
                CREATE INDEX IF NOT EXISTS idx_posts_user ON posts(user_id);
                CREATE INDEX IF NOT EXISTS idx_group_users_user ON group_users(user_id);
            """)
            conn.commit()

    # Queries
    def topics(self) -> TopicQuery:
        """Base query over every topic."""
        return TopicQuery(self)

    def fetch_rows(
        self, sql: str, params: Mapping[str, Any] | Sequence[Any] = ()
    ) -> list[sqlite3.Row]:
        """Run a read query with named or positional bound parameters."""
        with self._get_connection() as conn:
            return conn.execute(sql, params).fetchall()

    # Lookups
    def category_ids_for_slugs(self, slugs: Iterable[str]) -> list[int]:
        slugs = list(slugs)
        if not slugs:
            return []
        placeholders = ", ".join("?" for _ in slugs)
        rows = self.fetch_rows(
            f"SELECT id FROM categories WHERE slug IN ({placeholders}) ORDER BY id", slugs
        )
        return [row["id"] for row in rows]

    def tag_ids_for_names(self, names: Iterable[str]) -> list[int]:
        names = list(names)
        if not names:
            return []
        placeholders = ", ".join("?" for _ in names)
        rows = self.fetch_rows(
            f"SELECT id FROM tags WHERE name IN ({placeholders}) ORDER BY id", names
        )
        return [row["id"] for row in rows]

    def group_by_name(self, name: str) -> Group | None:
        rows = self.fetch_rows("SELECT id, name FROM groups WHERE name = ?", [name])
        return Group.model_validate(dict(rows[0])) if rows else None

    def get_topic(self, topic_id: int) -> Topic | None:
        rows = self.fetch_rows("SELECT * FROM topics WHERE id = ?", [topic_id])
        return Topic.model_validate(dict(rows[0])) if rows else None

    # Writes
    def _insert(self, sql: str, params: tuple) -> int:
        with self._get_connection() as conn:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor.lastrowid

    def create_category(self, slug: str, name: str | None = None, parent: Category | None = None) -> Category:
        parent_id = parent.id if parent else None
        category_id = self._insert(
            "INSERT INTO categories (slug, name, parent_category_id) VALUES (?, ?, ?)",
            (slug, name or slug, parent_id),
        )
        return Category(id=category_id, slug=slug, name=name or slug, parent_category_id=parent_id)

    def create_tag(self, name: str) -> Tag:
        return Tag(id=self._insert("INSERT INTO tags (name) VALUES (?)", (name,)), name=name)

    def find_or_create_tag(self, name: str) -> Tag:
        rows = self.fetch_rows("SELECT id, name FROM tags WHERE name = ?", [name])
        return Tag.model_validate(dict(rows[0])) if rows else self.create_tag(name)

    def create_user(self, username: str) -> User:
        return User(id=self._insert("INSERT INTO users (username) VALUES (?)", (username,)), username=username)

    def create_group(self, name: str) -> Group:
        return Group(id=self._insert("INSERT INTO groups (name) VALUES (?)", (name,)), name=name)

    def add_group_member(self, group: Group, user: User) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO group_users (group_id, user_id) VALUES (?, ?)",
                (group.id, user.id),
            )
            conn.commit()

    def create_topic(
        self,
        title: str,
        user: User,
        category: Category | None = None,
        created_at: datetime | None = None,
        raw: str = "",
    ) -> Topic:
        """Create a topic together with its opening post (post number 1)."""
        created_at = created_at or _now()
        stamp = format_timestamp(created_at)
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO topics (title, category_id, user_id, created_at, bumped_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (title, category.id if category else None, user.id, stamp, stamp),
            )
            topic_id = cursor.lastrowid
            conn.execute(
                """
                INSERT INTO posts (topic_id, user_id, post_number, post_type, raw, created_at)
                VALUES (?, ?, 1, ?, ?, ?)
                """,
                (topic_id, user.id, int(PostType.REGULAR), raw or title, stamp),
            )
            conn.commit()

        logger.debug("topic_created", topic_id=topic_id, title=title)
        return self.get_topic(topic_id)

    def create_post(
        self,
        topic: Topic,
        user: User,
        post_type: PostType = PostType.REGULAR,
        raw: str = "",
        created_at: datetime | None = None,
    ) -> Post:
        """Append a post to a topic with the next post number and bump the topic."""
        stamp = format_timestamp(created_at or _now())
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT COALESCE(MAX(post_number), 0) + 1 AS next FROM posts WHERE topic_id = ?",
                (topic.id,),
            ).fetchone()
            post_number = row["next"]
            cursor = conn.execute(
                """
                INSERT INTO posts (topic_id, user_id, post_number, post_type, raw, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (topic.id, user.id, post_number, int(post_type), raw, stamp),
            )
            conn.execute(
                "UPDATE topics SET bumped_at = MAX(bumped_at, ?) WHERE id = ?",
                (stamp, topic.id),
            )
            conn.commit()
            post_id = cursor.lastrowid

        return Post(
            id=post_id,
            topic_id=topic.id,
            user_id=user.id,
            post_number=post_number,
            post_type=post_type,
            raw=raw,
            created_at=datetime.strptime(stamp, TIMESTAMP_FORMAT),
        )

    def tag_topic(self, topic: Topic, *tags: Tag) -> None:
        with self._get_connection() as conn:
            conn.executemany(
                "INSERT OR IGNORE INTO topic_tags (topic_id, tag_id) VALUES (?, ?)",
                [(topic.id, tag.id) for tag in tags],
            )
            conn.commit()
