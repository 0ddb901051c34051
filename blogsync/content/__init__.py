"""Blog content caching and update reconciliation."""

from .cache import (
    BlogCache,
    CacheNotInitializedError,
    get_cache,
    set_cache,
    clear_cache,
    get_post,
    get_configuration,
)
from .updater import (
    UpdatedContent,
    CheckUpdatesResult,
    check_updates,
)
from .refresher import (
    UpdatePoller,
    initialize_cache,
    handle_update_check,
)

__all__ = [
    "BlogCache",
    "CacheNotInitializedError",
    "get_cache",
    "set_cache",
    "clear_cache",
    "get_post",
    "get_configuration",
    "UpdatedContent",
    "CheckUpdatesResult",
    "check_updates",
    "UpdatePoller",
    "initialize_cache",
    "handle_update_check",
]
