"""url_filters - URL query parameter filters for forum topic listings.

Registers date, category, tag and group filters that narrow a topic
query according to the current request's parameters.
"""

from .cli import main
from .filters import FilterRegistry, default_registry
from .listing import TopicLister
from .models import TopicListOptions

__all__ = ["main", "FilterRegistry", "default_registry", "TopicLister", "TopicListOptions"]
