"""Tests for the url-filters CLI."""

import json
import sqlite3

import pytest
from typer.testing import CliRunner

from url_filters.cli import app
from url_filters.store import ForumStore
from tests.factories import days_ago, make_topic

runner = CliRunner()


@pytest.fixture
def db(tmp_path, monkeypatch):
    path = tmp_path / "forum.db"
    monkeypatch.setenv("URL_FILTERS_DATABASE_PATH", str(path))
    monkeypatch.setenv("URL_FILTERS_LOG_LEVEL", "WARNING")
    return path


def test_init_db(db):
    result = runner.invoke(app, ["init-db", "--db", str(db)])

    assert result.exit_code == 0
    assert db.exists()


def test_list_with_filters(db):
    store = ForumStore(db)
    user = store.create_user("alice")
    make_topic(store, user, title="old", created_at=days_ago(10))
    make_topic(store, user, title="recent", created_at=days_ago(2))

    result = runner.invoke(app, ["list", "--db", str(db), "--after", "5"])

    assert result.exit_code == 0
    assert "recent" in result.output
    assert "old" not in result.output
    assert "Filters: after" in result.output


def test_list_json(db):
    store = ForumStore(db)
    user = store.create_user("alice")
    make_topic(store, user, title="hello")

    result = runner.invoke(app, ["list", "--json", "--before-date", "asdf"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [t["title"] for t in payload["topics"]] == ["hello"]
    assert payload["options"]["before_date"] == "asdf"
    assert payload["filters_applied"] == []


def test_filters_command():
    result = runner.invoke(app, ["filters"])

    assert result.exit_code == 0
    for name in ("after_date", "exclude_categories", "no_reply_from"):
        assert name in result.output


def test_log_level_comes_from_settings(db, monkeypatch):
    monkeypatch.setenv("URL_FILTERS_LOG_LEVEL", "INFO")
    ForumStore(db)

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    assert "topics_listed" in result.output


def test_log_level_option_overrides_settings(db, monkeypatch):
    monkeypatch.setenv("URL_FILTERS_LOG_LEVEL", "INFO")
    ForumStore(db)

    result = runner.invoke(app, ["--log-level", "WARNING", "list"])

    assert result.exit_code == 0
    assert "topics_listed" not in result.output


def test_log_format_comes_from_settings(db, monkeypatch):
    monkeypatch.setenv("URL_FILTERS_LOG_LEVEL", "INFO")
    monkeypatch.setenv("URL_FILTERS_LOG_FORMAT", "json")
    ForumStore(db)

    result = runner.invoke(app, ["list", "--categories", "dev"])

    events = [
        json.loads(line) for line in result.output.splitlines() if line.startswith("{")
    ]
    listed = [e for e in events if e["event"] == "topics_listed"]
    assert listed[0]["level"] == "info"
    assert listed[0]["options"] == {"categories": "dev"}


def test_store_error_exits_with_status_1(db, monkeypatch):
    ForumStore(db)

    def locked(self, slugs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(ForumStore, "category_ids_for_slugs", locked)

    result = runner.invoke(app, ["list", "--categories", "dev"])

    assert result.exit_code == 1
    assert "listing failed" in result.output
