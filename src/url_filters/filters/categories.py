"""Category filters.

``exclude_categories`` also drops direct subcategories of the excluded
categories; ``categories`` matches the named categories only.
"""

from ..logging import get_logger
from ..models import TopicListOptions
from ..query import TopicQuery
from .params import split_list

logger = get_logger(__name__)


def categories(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics in any of the comma-separated category slugs."""
    if options.categories is None:
        return results

    slugs = split_list(options.categories)
    category_ids = results.lookups.category_ids_for_slugs(slugs)
    logger.debug("filter_applied", filter="categories", slugs=slugs, category_ids=category_ids)

    return results.narrow("topics.category_id IN (:category_ids)", category_ids=category_ids)


def exclude_categories(results: TopicQuery, options: TopicListOptions) -> TopicQuery:
    """Topics outside the given categories and their direct subcategories."""
    if options.exclude_categories is None:
        return results

    slugs = split_list(options.exclude_categories)
    category_ids = results.lookups.category_ids_for_slugs(slugs)
    logger.debug(
        "filter_applied", filter="exclude_categories", slugs=slugs, category_ids=category_ids
    )

    # Uncategorized topics are never excluded
    return results.narrow(
        """
        topics.category_id IS NULL OR (
          topics.category_id NOT IN (:category_ids)
          AND topics.category_id NOT IN (
            SELECT categories.id
            FROM categories
            WHERE categories.parent_category_id IN (:category_ids)
          )
        )
        """,
        category_ids=category_ids,
    )
