"""In-memory cache of blog posts and configuration."""

from dataclasses import dataclass
from datetime import datetime

from blogsync.models.configuration import Configuration
from blogsync.models.post import Post, PostCache
from blogsync.repository.provider import RepositoryHandle


class CacheNotInitializedError(Exception):
    """Raised when trying to access cache before initialization."""

    pass


@dataclass(frozen=True)
class BlogCache:
    """Snapshot of all blog content.

    Snapshots are never modified; a refresh builds a new one and swaps it in
    with set_cache(), so readers see either the old or the new content.
    """

    repository: RepositoryHandle
    posts: PostCache  # language -> name -> post
    configurations: list[Configuration]
    last_refreshed: datetime
    # Last time the repository was asked for changes, with or without updates
    last_checked: datetime | None = None


# Global cache singleton
_cache: BlogCache | None = None


def get_cache() -> BlogCache:
    """Get the blog cache.

    Raises:
        CacheNotInitializedError: If cache has not been initialized.
    """
    if _cache is None:
        raise CacheNotInitializedError(
            "Blog cache not initialized. Call initialize_cache() first."
        )
    return _cache


def set_cache(cache: BlogCache) -> None:
    """Set the blog cache (used by the refresher and tests)."""
    global _cache
    _cache = cache


def clear_cache() -> None:
    """Clear the blog cache (used by tests)."""
    global _cache
    _cache = None


def get_post(language: str, name: str) -> Post | None:
    """Look up a cached post."""
    return get_cache().posts.get(language, {}).get(name)


def get_configuration(language: str) -> Configuration | None:
    """Look up the cached configuration for a language."""
    for configuration in get_cache().configurations:
        if configuration.language == language:
            return configuration
    return None
