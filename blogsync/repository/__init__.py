"""Content repository providers."""

from .provider import (
    FetchResult,
    FileInfo,
    FileNotFound,
    NoUpdates,
    RepositoryHandle,
    RepositoryProvider,
    Updates,
    normalize_path,
    partition_changes,
    split_posts_folder,
)
from .memory import MemoryProvider, MemoryState, RawPost

__all__ = [
    "FetchResult",
    "FileInfo",
    "FileNotFound",
    "NoUpdates",
    "RepositoryHandle",
    "RepositoryProvider",
    "Updates",
    "normalize_path",
    "partition_changes",
    "split_posts_folder",
    "MemoryProvider",
    "MemoryState",
    "RawPost",
]
