"""Repository provider interface and the values it exchanges.

A provider gives access to a git-like content repository: the set of files
changed since the last fetch, existence checks, listing, reading and file
metadata. Change paths carry no add/modify/delete tag; consumers classify a
path by asking the provider whether the file still exists.
"""

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Union


@dataclass(frozen=True)
class NoUpdates:
    """Nothing changed since the previous fetch."""


@dataclass(frozen=True)
class Updates:
    """Paths changed since the previous fetch, in arrival order.

    The same path may appear more than once (e.g. added, then deleted).
    """

    paths: tuple[str, ...]


FetchResult = Union[NoUpdates, Updates]


@dataclass(frozen=True)
class FileNotFound:
    """Returned by read_file when the requested file does not exist."""

    path: str


@dataclass(frozen=True)
class FileInfo:
    """Authoring metadata for a repository file (None when unknown)."""

    author: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class RepositoryProvider(ABC):
    """Abstract base class for content repository backends."""

    @abstractmethod
    def fetch(self, repo: Any) -> FetchResult:
        """Return and clear the pending change set.

        A second call with no mutation in between must return NoUpdates.
        """
        pass

    @abstractmethod
    def file_in(self, path: str) -> bool:
        """Check if a file currently exists at `path`."""
        pass

    @abstractmethod
    def list_files(self, subpath: str = "") -> list[str]:
        """List all known files under `subpath`, relative to it ("" = root)."""
        pass

    @abstractmethod
    def read_file(self, path: str, folder: str = "") -> Union[str, FileNotFound]:
        """Read a tracked file. Returns FileNotFound instead of raising."""
        pass

    @abstractmethod
    def file_info(self, repo: Any, path: str) -> FileInfo:
        """Get author and timestamps for a file."""
        pass

    @abstractmethod
    def local_path(self) -> str:
        """Filesystem-like location of the repository content."""
        pass


@dataclass(frozen=True)
class RepositoryHandle:
    """A provider together with the repository reference it operates on."""

    provider: RepositoryProvider
    repo: Any


def normalize_path(path: str) -> str:
    """Normalize a repository path to a '/'-separated path relative to the root."""
    path = path.replace("\\", "/").strip()
    if not path:
        return ""
    normalized = posixpath.normpath(path).lstrip("/")
    return "" if normalized == "." else normalized


def split_posts_folder(paths: Iterable[str], posts_folder: str) -> list[str]:
    """Keep paths inside the posts folder and strip the folder segment.

    Only the first path segment is compared, so "posts-old/a.md" is not a
    post path for the "posts" folder.
    """
    result = []
    for path in paths:
        parts = normalize_path(path).split("/")
        if len(parts) > 1 and parts[0] == posts_folder:
            result.append("/".join(parts[1:]))
    return result


def partition_changes(
    paths: Iterable[str], provider: RepositoryProvider
) -> tuple[list[str], list[str]]:
    """Split changed paths into (still present, everything else).

    Each distinct path lands in exactly one of the two lists, in first-seen
    order.
    """
    present: list[str] = []
    other: list[str] = []
    for path in dict.fromkeys(paths):
        if provider.file_in(path):
            present.append(path)
        else:
            other.append(path)
    return present, other
