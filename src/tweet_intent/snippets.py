"""Reusable text and hashtag snippets.

The whole collection lives under a single key:
    {
        "version": 1,
        "texts": [{"id", "label", "content", "createdAt", "updatedAt"}, ...],
        "hashtags": [{"id", "label", "tag", "createdAt", "updatedAt"}, ...]
    }

Every mutation reads the collection, changes it and writes it back whole.
Two overlapping mutations can lose one of the writes.
"""

import logging
import time
import uuid
from dataclasses import replace

from .models import (
    HASHTAG,
    SCHEMA_VERSION,
    TEXT,
    HashtagSnippet,
    SnippetCollection,
    TextSnippet,
    now_iso,
)
from .normalize import is_non_empty_string, normalize_hashtags
from .storage import DEFAULT_NAMESPACE, StorageAdapter

logger = logging.getLogger(__name__)

DEFAULT_LABEL_LENGTH = 24

_PATCHABLE = {
    TEXT: {"label", "content"},
    HASHTAG: {"label", "tag"},
}

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class SnippetValidationError(ValueError):
    """Raised when a snippet would be stored with missing content."""


class SnippetStorageError(RuntimeError):
    """Raised when the backend did not accept the changed collection."""


def _base36(n: int) -> str:
    digits = ""
    while True:
        n, r = divmod(n, 36)
        digits = _BASE36[r] + digits
        if n == 0:
            return digits


def new_snippet_id() -> str:
    """Random prefix plus millisecond timestamp. Unique, not unguessable."""
    return uuid.uuid4().hex[:8] + _base36(time.time_ns() // 1_000_000)


class SnippetStore:
    def __init__(self, storage: StorageAdapter, namespace: str = DEFAULT_NAMESPACE):
        self.storage = storage
        self.key = f"{namespace}/snippets"

    async def get_all(self) -> SnippetCollection:
        """Load the collection, repairing missing or malformed parts."""
        raw = await self.storage.get(self.key, None)
        return SnippetCollection.from_raw(raw)

    async def save_all(self, collection: SnippetCollection) -> bool:
        collection.version = SCHEMA_VERSION
        return await self.storage.set(self.key, collection.to_dict())

    async def _commit(self, collection: SnippetCollection) -> None:
        if not await self.save_all(collection):
            raise SnippetStorageError("Snippets could not be saved")

    async def add_text(self, label: str | None, content: str) -> TextSnippet:
        if not is_non_empty_string(content):
            raise SnippetValidationError("Text snippet content must not be empty")

        collection = await self.get_all()
        now = now_iso()
        item = TextSnippet(
            id=new_snippet_id(),
            label=(label or "").strip() or content[:DEFAULT_LABEL_LENGTH],
            content=content,
            created_at=now,
            updated_at=now,
        )
        collection.texts.append(item)
        await self._commit(collection)
        logger.debug("Added text snippet %s", item.id)
        return item

    async def add_hashtag(self, label: str | None, tag: str) -> HashtagSnippet:
        tags = normalize_hashtags(tag)
        if not tags:
            raise SnippetValidationError(f"Not a usable hashtag: {tag!r}")

        collection = await self.get_all()
        now = now_iso()
        item = HashtagSnippet(
            id=new_snippet_id(),
            label=(label or "").strip() or "#" + tags[0],
            tag=tags[0],
            created_at=now,
            updated_at=now,
        )
        collection.hashtags.append(item)
        await self._commit(collection)
        logger.debug("Added hashtag snippet %s (#%s)", item.id, item.tag)
        return item

    async def delete(self, kind: str, snippet_id: str):
        """Remove a snippet. Returns the removed entry, or None if nothing matched.

        Raises SnippetStorageError if the change could not be written.
        """
        if kind not in _PATCHABLE:
            return None

        collection = await self.get_all()
        items = _items(collection, kind)
        for i, item in enumerate(items):
            if item.id == snippet_id:
                del items[i]
                await self._commit(collection)
                logger.debug("Deleted %s snippet %s", kind, snippet_id)
                return item
        return None

    async def update(self, kind: str, snippet_id: str, patch: dict):
        """Apply *patch* to a snippet and return it, or None if the id is unknown.

        Raises SnippetValidationError for a bad patch and SnippetStorageError
        if the change could not be written.
        """
        if kind not in _PATCHABLE:
            return None
        patch = _validate_patch(kind, patch)

        collection = await self.get_all()
        items = _items(collection, kind)
        for i, item in enumerate(items):
            if item.id == snippet_id:
                items[i] = replace(item, **patch, updated_at=now_iso())
                await self._commit(collection)
                return items[i]
        return None


def _items(collection: SnippetCollection, kind: str) -> list:
    return collection.texts if kind == TEXT else collection.hashtags


def _validate_patch(kind: str, patch: dict) -> dict:
    unknown = set(patch) - _PATCHABLE[kind]
    if unknown:
        raise SnippetValidationError(
            f"Cannot update {kind} snippet field(s): {', '.join(sorted(unknown))}"
        )
    patch = dict(patch)
    if "content" in patch and not is_non_empty_string(patch["content"]):
        raise SnippetValidationError("Text snippet content must not be empty")
    if "tag" in patch:
        tags = normalize_hashtags(patch["tag"])
        if not tags:
            raise SnippetValidationError(f"Not a usable hashtag: {patch['tag']!r}")
        patch["tag"] = tags[0]
    if "label" in patch:
        patch["label"] = str(patch["label"] or "")
    return patch
