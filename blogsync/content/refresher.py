"""Load the blog cache and keep it in sync with the repository.

Update checks are serialized: fetch() drains the repository's change log,
so two concurrent checks would split one batch of changes between them.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime

from blogsync.config import get_poll_interval, get_posts_folder
from blogsync.models import configuration as blog_configuration
from blogsync.models import post as blog_post
from blogsync.repository.provider import NoUpdates, RepositoryHandle

from .cache import BlogCache, CacheNotInitializedError, get_cache, set_cache
from .updater import check_updates

logger = logging.getLogger(__name__)

# Check locking state
_check_lock = asyncio.Lock()
_recheck_pending = False


def initialize_cache(repository: RepositoryHandle) -> BlogCache:
    """Compile every post and load the configuration, then install the cache.

    Called on startup. Errors propagate; there is no cache to fall back to.
    """
    provider = repository.provider
    post_files = provider.list_files(get_posts_folder())
    logger.info(f"Loading {len(post_files)} post file(s) from {provider.local_path()}")

    now = datetime.now()
    cache = BlogCache(
        repository=repository,
        posts=blog_post.compile_posts(post_files, repository),
        configurations=blog_configuration.from_file(provider),
        last_refreshed=now,
        last_checked=now,
    )
    set_cache(cache)

    post_count = sum(len(posts) for posts in cache.posts.values())
    logger.info(
        f"Blog cache initialized: {post_count} post(s) in "
        f"{len(cache.posts)} language(s), {len(cache.configurations)} configuration(s)"
    )
    return cache


async def _run_check() -> str:
    """Run one check in a worker thread and install its result."""
    state = get_cache()
    try:
        result = await asyncio.to_thread(check_updates, state)
    except Exception as e:
        # Keep serving the old content; the next cycle retries
        logger.error(f"Update check failed, keeping current content: {e}")
        return "error"

    now = datetime.now()
    if isinstance(result, NoUpdates):
        set_cache(replace(get_cache(), last_checked=now))
        return "no_updates"

    set_cache(
        replace(
            get_cache(),
            posts=result.posts,
            configurations=result.configurations,
            last_refreshed=now,
            last_checked=now,
        )
    )
    logger.info("Blog cache updated")
    return "updated"


async def handle_update_check() -> dict:
    """Check the repository for updates with check locking.

    If a check is in progress:
        - Sets recheck_pending flag
        - Returns immediately (the running check will go again)

    If no check in progress:
        - Acquires lock
        - Runs the check
        - Loops while recheck_pending is set

    Returns:
        Status dict with check details

    Raises:
        CacheNotInitializedError: If initialize_cache() was never called
    """
    global _recheck_pending

    if _check_lock.locked():
        _recheck_pending = True
        logger.info("Update check already in progress, queued another")
        return {"status": "queued", "checks": 0}

    # Fail before taking the lock when there is nothing to update
    get_cache()

    async with _check_lock:
        checks = 0
        updated = False
        status = "no_updates"

        while True:
            _recheck_pending = False
            status = await _run_check()
            checks += 1
            updated = updated or status == "updated"

            if not _recheck_pending:
                break
            logger.info("Pending update check detected, checking again")

        if updated and status == "no_updates":
            status = "updated"
        return {"status": status, "checks": checks}


def _reset_check_state() -> None:
    """Reset check locking state. For testing only."""
    global _recheck_pending
    _recheck_pending = False


class UpdatePoller:
    """Periodically checks the repository for updates in the background."""

    def __init__(self, poll_interval: int | None = None):
        self._poll_task: asyncio.Task | None = None
        self._poll_interval = poll_interval or get_poll_interval()

    @property
    def is_running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def start_polling(self) -> None:
        """Start background polling if not already running."""
        if not self.is_running:
            self._poll_task = asyncio.create_task(self._poll_loop())
            logger.info(f"Background polling started (every {self._poll_interval}s)")

    def stop_polling(self) -> None:
        """Stop background polling."""
        if self.is_running:
            self._poll_task.cancel()
            self._poll_task = None
            logger.info("Background polling stopped")

    async def _poll_loop(self) -> None:
        while True:
            try:
                await handle_update_check()
            except asyncio.CancelledError:
                break
            except CacheNotInitializedError:
                logger.warning("Blog cache not initialized, skipping update check")
            except Exception as e:
                logger.error(f"Poll error: {e}")

            try:
                await asyncio.sleep(self._poll_interval)
            except asyncio.CancelledError:
                break

        logger.info("Poll loop exiting")
