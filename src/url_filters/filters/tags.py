"""Tag filters. A topic matches when it carries any of the named tags."""

from ..logging import get_logger
from ..models import TopicListOptions
from ..query import TopicQuery
from .params import split_list

logger = get_logger(__name__)

TAGGED_TOPICS = """
    SELECT topic_tags.topic_id
    FROM topic_tags
    WHERE topic_tags.tag_id IN (:tag_ids)
"""


def include_tags(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    if options.include_tags is None:
        return results

    names = split_list(options.include_tags)
    tag_ids = results.lookups.tag_ids_for_names(names)
    logger.debug("filter_applied", filter="include_tags", tags=names, tag_ids=tag_ids)

    return results.narrow(f"topics.id IN ({TAGGED_TOPICS})", tag_ids=tag_ids)


def exclude_tags(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    if options.exclude_tags is None:
        return results

    names = split_list(options.exclude_tags)
    tag_ids = results.lookups.tag_ids_for_names(names)
    logger.debug("filter_applied", filter="exclude_tags", tags=names, tag_ids=tag_ids)

    return results.narrow(f"topics.id NOT IN ({TAGGED_TOPICS})", tag_ids=tag_ids)
