"""In-memory repository provider, used by tests and local development.

All operations run under a single lock and replace the whole state with a new
immutable snapshot, so no caller ever observes a half-applied change.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Union

from blogsync.config import get_posts_folder
from blogsync.repository.provider import (
    FetchResult,
    FileInfo,
    FileNotFound,
    NoUpdates,
    RepositoryProvider,
    Updates,
    normalize_path,
)

logger = logging.getLogger(__name__)

MEMORY_LOCAL_PATH = "memory"


@dataclass(frozen=True)
class RawPost:
    """A post source file as stored in the repository."""

    path: str
    author: str | None = None
    content: str = "# Title\n Some text...\n## Section 1\n Hey!!\n* i1\n * i2"
    created_at: str = "2017-04-21 22:23:12"
    updated_at: str = "2017-04-22 13:15:32"


@dataclass(frozen=True)
class MemoryState:
    """Snapshot of the in-memory repository."""

    raw_posts: tuple[RawPost, ...] = ()
    pending_changes: tuple[str, ...] = ()
    files: dict[str, str] = field(default_factory=dict)


class MemoryProvider(RepositoryProvider):
    """Repository provider keeping posts, files and pending changes in memory.

    Mutations append to the pending-change log; fetch() drains it.
    """

    def __init__(self, state: MemoryState | None = None):
        self._state = state or MemoryState()
        self._lock = threading.RLock()

    def repository(self) -> "MemoryProvider":
        """The repository reference to pair with this provider."""
        return self

    def state(self) -> MemoryState:
        """Get a copy of the current state snapshot."""
        with self._lock:
            return replace(self._state, files=dict(self._state.files))

    def _get_and_update(
        self, update: Callable[[MemoryState], MemoryState]
    ) -> MemoryState:
        """Apply `update` atomically and return the state before it."""
        with self._lock:
            previous = self._state
            self._state = update(previous)
            return previous

    def _post_change_path(self, post_path: str) -> str:
        return f"{get_posts_folder()}/{normalize_path(post_path)}"

    def _strip_posts_prefix(self, path: str) -> str:
        path = normalize_path(path)
        prefix = f"{get_posts_folder()}/"
        if path.startswith(prefix):
            return path[len(prefix):]
        return path

    def _find_post(self, path: str) -> RawPost | None:
        wanted = self._strip_posts_prefix(path)
        with self._lock:
            for post in self._state.raw_posts:
                if normalize_path(post.path) == wanted:
                    return post
        return None

    # Mutations

    def add_file(self, path: str, data: str) -> MemoryState:
        """Add or overwrite a non-post file. Returns the previous state."""

        path = normalize_path(path)

        def update(state: MemoryState) -> MemoryState:
            return replace(
                state,
                files={**state.files, path: data},
                pending_changes=state.pending_changes + (path,),
            )

        logger.debug(f"Adding file {path}")
        return self._get_and_update(update)

    def add_post(self, raw_post: RawPost) -> MemoryState:
        """Prepend a post without checking for an existing one at the same path.

        Use replace_post() to add-or-replace. Returns the previous state.
        """
        change = self._post_change_path(raw_post.path)

        def update(state: MemoryState) -> MemoryState:
            return replace(
                state,
                raw_posts=(raw_post,) + state.raw_posts,
                pending_changes=state.pending_changes + (change,),
            )

        logger.debug(f"Adding post {raw_post.path}")
        return self._get_and_update(update)

    def delete_post(self, post_path: str) -> MemoryState:
        """Remove every post stored at `post_path`. Returns the previous state."""
        change = self._post_change_path(post_path)
        wanted = normalize_path(post_path)

        def update(state: MemoryState) -> MemoryState:
            return replace(
                state,
                raw_posts=tuple(
                    p for p in state.raw_posts if normalize_path(p.path) != wanted
                ),
                pending_changes=state.pending_changes + (change,),
            )

        logger.debug(f"Deleting post {post_path}")
        return self._get_and_update(update)

    def replace_post(self, raw_post: RawPost) -> MemoryState:
        """Replace the post at the same path, or add it. Returns the previous state."""
        change = self._post_change_path(raw_post.path)
        wanted = normalize_path(raw_post.path)

        def update(state: MemoryState) -> MemoryState:
            kept = tuple(
                p for p in state.raw_posts if normalize_path(p.path) != wanted
            )
            return replace(
                state,
                raw_posts=(raw_post,) + kept,
                pending_changes=state.pending_changes + (change,),
            )

        logger.debug(f"Replacing post {raw_post.path}")
        return self._get_and_update(update)

    # RepositoryProvider

    def fetch(self, repo: Any = None) -> FetchResult:
        with self._lock:
            changes = self._state.pending_changes
            if not changes:
                return NoUpdates()
            self._state = replace(self._state, pending_changes=())
        logger.debug(f"Drained {len(changes)} pending change(s)")
        return Updates(paths=changes)

    def file_in(self, path: str) -> bool:
        return self._find_post(path) is not None

    def list_files(self, subpath: str = "") -> list[str]:
        folder = get_posts_folder()
        with self._lock:
            state = self._state
        all_paths = [f"{folder}/{normalize_path(p.path)}" for p in state.raw_posts]
        all_paths.extend(normalize_path(p) for p in state.files)

        prefix = normalize_path(subpath)
        if not prefix:
            return list(dict.fromkeys(all_paths))
        prefix += "/"
        return list(
            dict.fromkeys(p[len(prefix):] for p in all_paths if p.startswith(prefix))
        )

    def read_file(self, path: str, folder: str = "") -> Union[str, FileNotFound]:
        full_path = normalize_path(f"{folder}/{path}" if folder else path)
        posts_folder = get_posts_folder()
        in_folder = normalize_path(folder) == posts_folder
        if in_folder or full_path.startswith(f"{posts_folder}/"):
            post = self._find_post(path if in_folder else full_path)
            if post is None:
                return FileNotFound(path)
            return post.content

        with self._lock:
            data = self._state.files.get(full_path)
        if data is None:
            return FileNotFound(full_path)
        return data

    def file_info(self, repo: Any, path: str) -> FileInfo:
        post = self._find_post(path)
        if post is None:
            return FileInfo()
        return FileInfo(
            author=post.author,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )

    def local_path(self) -> str:
        return MEMORY_LOCAL_PATH
