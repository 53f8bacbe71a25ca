"""Shared fixtures: a fresh SQLite forum per test."""

import pytest
import structlog

from url_filters.config import Settings, get_settings
from url_filters.store import ForumStore


@pytest.fixture
def store(tmp_path) -> ForumStore:
    return ForumStore(tmp_path / "forum.db")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, database_path=tmp_path / "forum.db", per_page=30)


@pytest.fixture
def user(store):
    return store.create_user("alice")


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
