"""Creation-date filters: after, after_date, before_date."""

from datetime import datetime, timedelta, timezone

from ..logging import get_logger
from ..models import TopicListOptions
from ..query import TopicQuery
from .params import parse_date, parse_days

logger = get_logger(__name__)


def after(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics created within the last ``after`` days."""
    if options.after is None:
        return results

    days = parse_days(options.after)
    if days is None:
        logger.debug("filter_skipped", filter="after", value=options.after)
        return results

    try:
        since = datetime.now(timezone.utc) - timedelta(days=days)
    except OverflowError:
        # Reaches back past year 1, so every topic qualifies
        logger.debug("filter_skipped", filter="after", value=options.after)
        return results
    return results.narrow("topics.created_at > :since", since=since)


def after_date(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics created after midnight UTC of ``after_date``."""
    if options.after_date is None:
        return results

    day = parse_date(options.after_date)
    if day is None:
        logger.debug("filter_skipped", filter="after_date", value=options.after_date)
        return results

    return results.narrow("topics.created_at > :after_date", after_date=day)


def before_date(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics created before midnight UTC of ``before_date``."""
    if options.before_date is None:
        return results

    day = parse_date(options.before_date)
    if day is None:
        logger.debug("filter_skipped", filter="before_date", value=options.before_date)
        return results

    return results.narrow("topics.created_at < :before_date", before_date=day)
