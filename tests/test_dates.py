"""Tests for the after, after_date and before_date filters."""

import pytest

from url_filters.filters import after, after_date, before_date, default_registry
from url_filters.models import TopicListOptions
from tests.factories import days_ago, make_topic


def _date(days: int) -> str:
    return days_ago(days).strftime("%Y-%m-%d")


@pytest.fixture
def dated_topics(store, user):
    return (
        make_topic(store, user, created_at=days_ago(10)),
        make_topic(store, user, created_at=days_ago(8)),
        make_topic(store, user, created_at=days_ago(6)),
    )


def _ids(query):
    return set(query.ids())


class TestAfterDate:
    def test_only_topics_after_date(self, store, dated_topics):
        topic1, topic2, topic3 = dated_topics
        results = after_date(store.topics(), TopicListOptions(after_date=_date(9)))

        assert _ids(results) == {topic2.id, topic3.id}

    @pytest.mark.parametrize("value", ["asdf", "2024-13-40", "2024/01/01"])
    def test_malformed_date_is_noop(self, store, dated_topics, value):
        base = store.topics()
        assert after_date(base, TopicListOptions(after_date=value)) is base


class TestBeforeDate:
    def test_only_topics_before_date(self, store, dated_topics):
        topic1, _, _ = dated_topics
        results = before_date(store.topics(), TopicListOptions(before_date=_date(9)))

        assert _ids(results) == {topic1.id}

    def test_malformed_date_returns_everything(self, store, dated_topics):
        results = default_registry().apply(store.topics(), {"before_date": "asdf"})
        assert results.count() == 3

    def test_calendar_invalid_date_returns_everything(self, store, dated_topics):
        results = default_registry().apply(store.topics(), {"before_date": "2024-13-40"})
        assert results.count() == 3


class TestDateRange:
    def test_between_before_and_after(self, store, dated_topics):
        _, topic2, _ = dated_topics
        results = default_registry().apply(
            store.topics(), {"before_date": _date(7), "after_date": _date(9)}
        )

        assert _ids(results) == {topic2.id}

    def test_range_is_intersection_of_each_bound(self, store, dated_topics):
        registry = default_registry()
        before = _ids(registry.apply(store.topics(), {"before_date": _date(7)}))
        after_ = _ids(registry.apply(store.topics(), {"after_date": _date(9)}))
        both = _ids(
            registry.apply(store.topics(), {"before_date": _date(7), "after_date": _date(9)})
        )

        assert both == before & after_


class TestAfterDays:
    def test_topics_within_last_days(self, store, dated_topics):
        _, topic2, topic3 = dated_topics
        results = after(store.topics(), TopicListOptions(after=9))

        assert _ids(results) == {topic2.id, topic3.id}

    @pytest.mark.parametrize("value", ["0", "-5", "soon", "1.5"])
    def test_invalid_count_is_noop(self, store, dated_topics, value):
        base = store.topics()
        assert after(base, TopicListOptions(after=value)) is base

    @pytest.mark.parametrize("value", ["1000000000", "999999999", "800000"])
    def test_huge_count_is_noop(self, store, dated_topics, value):
        base = store.topics()
        assert after(base, TopicListOptions(after=value)) is base

    def test_underscored_count_is_noop(self, store, dated_topics):
        base = store.topics()
        assert after(base, TopicListOptions(after="1_0")) is base

    def test_absent_is_noop(self, store):
        base = store.topics()
        assert after(base, TopicListOptions()) is base
