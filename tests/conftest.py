"""Shared test fixtures."""

import pytest

from tweet_intent.drafts import DraftStore
from tweet_intent.settings import SettingsStore
from tweet_intent.snippets import SnippetStore
from tweet_intent.storage import Host, MemoryArea, StorageAdapter


class RecordingArea(MemoryArea):
    """Memory area that remembers which keys were written."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes: list[str] = []

    async def set(self, key, value):
        self.writes.append(key)
        await super().set(key, value)


class FailingArea:
    async def get(self, key):
        raise OSError("backend unavailable")

    async def set(self, key, value):
        raise OSError("quota exceeded")


class ReadOnlyArea(MemoryArea):
    """Memory area that serves reads but rejects every write."""

    async def set(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def area() -> RecordingArea:
    return RecordingArea()


@pytest.fixture
def storage(area, tmp_path) -> StorageAdapter:
    return StorageAdapter.select(Host(local=area), tmp_path / "data")


@pytest.fixture
def failing_area() -> FailingArea:
    return FailingArea()


@pytest.fixture
def failing_storage(failing_area, tmp_path) -> StorageAdapter:
    return StorageAdapter.select(Host(sync=failing_area), tmp_path / "data")


@pytest.fixture
def read_only_area() -> ReadOnlyArea:
    """Read-only area already holding one text and one hashtag snippet."""
    stamp = "2025-01-01T00:00:00+00:00"
    times = {"createdAt": stamp, "updatedAt": stamp}
    stored = {
        "version": 1,
        "texts": [{"id": "t1", "label": "Hello", "content": "Hello", **times}],
        "hashtags": [{"id": "h1", "label": "#python", "tag": "python", **times}],
    }
    return ReadOnlyArea({"twIntent/snippets": stored})


@pytest.fixture
def read_only_storage(read_only_area, tmp_path) -> StorageAdapter:
    return StorageAdapter.select(Host(local=read_only_area), tmp_path / "data")


@pytest.fixture
def snippet_store(storage) -> SnippetStore:
    return SnippetStore(storage)


@pytest.fixture
def settings_store(storage) -> SettingsStore:
    return SettingsStore(storage)


@pytest.fixture
def draft_store(storage, settings_store) -> DraftStore:
    return DraftStore(storage, settings_store)
