"""Pytest fixtures for content tests."""

from datetime import datetime

import pytest

from blogsync.content.cache import BlogCache, clear_cache
from blogsync.models.configuration import Configuration
from blogsync.repository.memory import MemoryProvider
from blogsync.repository.provider import RepositoryHandle


@pytest.fixture(autouse=True)
def reset_cache():
    """Start and end every test without a cache."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def memory_provider():
    return MemoryProvider()


@pytest.fixture
def repository(memory_provider):
    return RepositoryHandle(provider=memory_provider, repo=memory_provider.repository())


@pytest.fixture
def empty_state(repository):
    return BlogCache(
        repository=repository,
        posts={},
        configurations=[Configuration(language="en")],
        last_refreshed=datetime(2026, 1, 1, 12, 0, 0),
    )
