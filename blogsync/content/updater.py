"""Reconcile repository changes into the blog cache.

check_updates() should run off the event loop (the refresher runs it in a
worker thread) so a slow repository never blocks readers of the cache.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from blogsync.config import get_posts_folder
from blogsync.models import configuration as blog_configuration
from blogsync.models import post as blog_post
from blogsync.models.configuration import Configuration
from blogsync.models.post import PostCache, PostKey
from blogsync.repository.provider import (
    NoUpdates,
    RepositoryHandle,
    partition_changes,
    split_posts_folder,
)

from .cache import BlogCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdatedContent:
    """New cache content produced by a reconciliation."""

    posts: PostCache
    configurations: list[Configuration]


CheckUpdatesResult = Union[NoUpdates, UpdatedContent]


def check_updates(state: BlogCache) -> CheckUpdatesResult:
    """Check the repository for changes and build the updated content.

    `state` is not modified. Errors from the provider or while compiling
    posts and configuration propagate to the caller.

    Returns:
        NoUpdates if nothing changed, otherwise UpdatedContent with the
        complete new posts mapping and configuration list.
    """
    repository = state.repository
    result = repository.provider.fetch(repository.repo)
    if isinstance(result, NoUpdates):
        return NoUpdates()

    changed_paths = list(dict.fromkeys(result.paths))
    logger.info(f"Repository reported {len(changed_paths)} changed path(s)")

    posts = _updated_posts(state.posts, changed_paths, repository)
    configurations = _updated_configurations(
        state.configurations,
        blog_configuration.updated(changed_paths),
        repository,
    )
    return UpdatedContent(posts=posts, configurations=configurations)


def _updated_posts(
    current: PostCache, changed_paths: list[str], repository: RepositoryHandle
) -> PostCache:
    posts_folder = get_posts_folder()
    present, other = partition_changes(changed_paths, repository.provider)

    deleted = blog_post.names_from_files(split_posts_folder(other, posts_folder))
    new_paths = split_posts_folder(present, posts_folder)
    compiled = blog_post.compile_posts(new_paths, repository)
    # Present sources that did not compile (unpublished) drop out of the cache
    withdrawn = [
        (language, name)
        for language, name in (
            blog_post.name_from_file(path) for path in new_paths if path.endswith(".md")
        )
        if name not in compiled.get(language, {})
    ]

    logger.info(
        f"Reconciling {len(new_paths)} new/changed and {len(deleted)} deleted post(s)"
    )
    return _delete_posts(_merge_posts(current, compiled), deleted + withdrawn)


def _merge_posts(current: PostCache, compiled: PostCache) -> PostCache:
    """Merge per language; compiled posts win over cached ones of the same name."""
    merged = dict(current)
    for language, new_posts in compiled.items():
        merged[language] = {**current.get(language, {}), **new_posts}
    return merged


def _delete_posts(posts: PostCache, keys: Iterable[PostKey]) -> PostCache:
    result = dict(posts)
    for language, name in keys:
        if name not in result.get(language, {}):
            continue
        result[language] = {
            n: p for n, p in result[language].items() if n != name
        }
        logger.info(f"Removed post {language}/{name}")
    return result


def _updated_configurations(
    current: list[Configuration], changed: bool, repository: RepositoryHandle
) -> list[Configuration]:
    if not changed:
        return current
    logger.info("Configuration file changed, reloading configuration")
    return blog_configuration.from_file(repository.provider)
