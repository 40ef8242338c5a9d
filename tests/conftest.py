"""Shared fixtures for shardfs tests."""

import pytest

from shardfs import ShardConfig, ShardedFilesystem
from shardfs.services.storage import InMemoryBackend, LocalFileBackend


@pytest.fixture
def memory_backend():
    """Provide a clean in-memory backend for each test."""
    return InMemoryBackend()


@pytest.fixture
def local_backend(tmp_path):
    """Local backend rooted in a per-test directory."""
    return LocalFileBackend(root=tmp_path / "store")


@pytest.fixture
def fs(memory_backend):
    """Sharded filesystem with default parameters over memory."""
    return ShardedFilesystem(memory_backend, ShardConfig())


@pytest.fixture
def local_fs(local_backend):
    """Sharded filesystem with default parameters over local disk."""
    return ShardedFilesystem(local_backend)
