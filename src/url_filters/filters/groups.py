"""Group filters: who started a topic and who replied to it.

A reply is any regular post after the opening post. Moderator actions,
small actions and whispers do not count.
"""

from ..logging import get_logger
from ..models import Group, PostType, TopicListOptions
from ..query import TopicQuery

logger = get_logger(__name__)

GROUP_POSTS = """
    SELECT posts.topic_id
    FROM posts
    INNER JOIN group_users gu ON gu.user_id = posts.user_id
    WHERE gu.group_id = :group_id
"""

OPENING_POSTS = GROUP_POSTS + " AND posts.post_number = 1"

REPLIES = GROUP_POSTS + " AND posts.post_number > 1 AND posts.post_type = :post_type"


def _resolve_group(results: TopicQuery, name: str | None, filter_name: str) -> Group | None:
    if name is None:
        return None
    group = results.lookups.group_by_name(name.strip())
    if group is None:
        logger.debug("filter_skipped", filter=filter_name, group=name, reason="unknown group")
    return group


def topic_author(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics whose opening post was written by a member of the group."""
    group = _resolve_group(results, options.topic_author, "topic_author")
    if group is None:
        return results
    return results.narrow(f"topics.id IN ({OPENING_POSTS})", group_id=group.id)


def reply_from(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics with at least one reply from a member of the group."""
    group = _resolve_group(results, options.reply_from, "reply_from")
    if group is None:
        return results
    return results.narrow(
        f"topics.id IN ({REPLIES})", group_id=group.id, post_type=PostType.REGULAR
    )


def no_reply_from(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics without any reply from a member of the group."""
    group = _resolve_group(results, options.no_reply_from, "no_reply_from")
    if group is None:
        return results
    return results.narrow(
        f"topics.id NOT IN ({REPLIES})", group_id=group.id, post_type=PostType.REGULAR
    )
