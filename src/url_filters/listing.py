"""Topic listing: the per-request entry point for the URL filters.

Coordinates one listing:
1. Build options from the request parameters
2. Start from every topic in the store
3. Apply the filter registry (skipped when the feature flag is off)
4. Order latest first and cut one page
"""

from collections.abc import Mapping
from typing import Any

from .config import Settings, get_settings
from .filters import FilterRegistry, default_registry
from .logging import get_logger, request_context
from .models import TopicList, TopicListOptions
from .store import ForumStore

logger = get_logger(__name__)

LATEST_ORDER = "topics.bumped_at DESC, topics.id DESC"


class TopicLister:
    """Lists topics from a forum store through a filter registry."""

    def __init__(
        self,
        store: ForumStore | None = None,
        registry: FilterRegistry | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the lister.

        Args:
            store: Forum store; defaults to one at ``settings.database_path``
            registry: Filters to apply; defaults to ``default_registry()``
            settings: Optional settings override
        """
        self.settings = settings or get_settings()
        self.store = store or ForumStore(self.settings.database_path)
        self.registry = registry if registry is not None else default_registry()

    def list_topics(
        self,
        params: TopicListOptions | Mapping[str, Any] | None = None,
        page: int = 0,
    ) -> TopicList:
        """List one page of latest topics narrowed by the URL options.

        Args:
            params: Parsed options or the raw request parameters
            page: Zero-based page number; negative values mean page 0

        Returns:
            TopicList with the page of topics and the filters that applied
        """
        options = params if isinstance(params, TopicListOptions) else TopicListOptions.from_params(params)
        page = max(page, 0)
        per_page = self.settings.per_page

        with request_context(options=options.present()):
            results, applied = self.registry.apply_traced(
                self.store.topics(),
                options,
                enabled=self.settings.url_filters_enabled,
            )
            topics = results.all(order_by=LATEST_ORDER, limit=per_page, offset=page * per_page)
            total = results.count()

            logger.info(
                "topics_listed",
                filters_applied=applied,
                enabled=self.settings.url_filters_enabled,
                page=page,
                count=len(topics),
                total=total,
            )

        return TopicList(
            topics=topics,
            options=options,
            filters_applied=applied,
            page=page,
            per_page=per_page,
            total=total,
        )
