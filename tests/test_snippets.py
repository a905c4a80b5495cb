"""Tests for the snippet store."""

import pytest

from tweet_intent.models import SCHEMA_VERSION
from tweet_intent.snippets import (
    SnippetStorageError,
    SnippetStore,
    SnippetValidationError,
    new_snippet_id,
)
from tweet_intent.storage import Host, MemoryArea, StorageAdapter

SNIPPETS_KEY = "twIntent/snippets"

FIXED_NOW = "2030-01-01T00:00:00+00:00"


def store_with(initial, tmp_path) -> SnippetStore:
    area = MemoryArea({SNIPPETS_KEY: initial})
    return SnippetStore(StorageAdapter.select(Host(local=area), tmp_path))


class TestGetAll:
    @pytest.mark.asyncio
    async def test_empty_store(self, snippet_store):
        collection = await snippet_store.get_all()
        assert collection.version == SCHEMA_VERSION
        assert collection.texts == []
        assert collection.hashtags == []

    @pytest.mark.asyncio
    async def test_repairs_malformed_lists(self, tmp_path):
        store = store_with({"texts": "oops"}, tmp_path)
        collection = await store.get_all()
        assert collection.version == SCHEMA_VERSION
        assert collection.texts == []
        assert collection.hashtags == []

    @pytest.mark.asyncio
    async def test_repairs_non_dict_root(self, tmp_path):
        store = store_with(["not", "a", "dict"], tmp_path)
        collection = await store.get_all()
        assert collection.texts == []

    @pytest.mark.asyncio
    async def test_drops_malformed_entries(self, tmp_path):
        raw = {
            "version": 1,
            "texts": [{"id": "a", "content": "kept"}, "junk", {"content": "no id"}],
            "hashtags": None,
        }
        store = store_with(raw, tmp_path)
        collection = await store.get_all()
        assert [t.id for t in collection.texts] == ["a"]
        assert collection.texts[0].content == "kept"
        assert collection.hashtags == []

    @pytest.mark.asyncio
    async def test_backend_failure_gives_empty_collection(self, failing_storage):
        collection = await SnippetStore(failing_storage).get_all()
        assert collection.texts == []
        assert collection.hashtags == []


class TestAdd:
    @pytest.mark.asyncio
    async def test_add_text(self, snippet_store, area):
        item = await snippet_store.add_text("", "A reusable sentence that is long")

        assert item.id
        assert item.label == "A reusable sentence that"
        assert len(item.label) == 24
        assert item.created_at == item.updated_at

        collection = await snippet_store.get_all()
        assert [t.id for t in collection.texts] == [item.id]

        raw = await area.get(SNIPPETS_KEY)
        assert raw["version"] == SCHEMA_VERSION
        assert set(raw["texts"][0]) == {"id", "label", "content", "createdAt", "updatedAt"}

    @pytest.mark.asyncio
    async def test_add_text_with_label(self, snippet_store):
        item = await snippet_store.add_text("  Greeting ", "Hello everyone")
        assert item.label == "Greeting"

    @pytest.mark.asyncio
    async def test_ids_are_distinct(self, snippet_store):
        ids = [(await snippet_store.add_text("", f"text {i}")).id for i in range(20)]
        assert all(ids)
        assert len(set(ids)) == 20

    @pytest.mark.asyncio
    async def test_blank_text_rejected_before_write(self, snippet_store, area):
        with pytest.raises(SnippetValidationError):
            await snippet_store.add_text("label", "   ")
        assert area.writes == []

    @pytest.mark.asyncio
    async def test_add_hashtag_normalizes(self, snippet_store, area):
        item = await snippet_store.add_hashtag(None, "  #Python ")
        assert item.tag == "Python"
        assert item.label == "#Python"

        raw = await area.get(SNIPPETS_KEY)
        assert raw["hashtags"][0]["tag"] == "Python"

    @pytest.mark.asyncio
    async def test_unusable_hashtag_rejected(self, snippet_store, area):
        with pytest.raises(SnippetValidationError):
            await snippet_store.add_hashtag("", "#")
        assert area.writes == []

    def test_new_snippet_id_shape(self):
        snippet_id = new_snippet_id()
        assert len(snippet_id) > 8
        assert snippet_id.isalnum()


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_text(self, snippet_store):
        keep = await snippet_store.add_text("", "keep me")
        gone = await snippet_store.add_text("", "delete me")

        removed = await snippet_store.delete("text", gone.id)
        assert removed.id == gone.id

        collection = await snippet_store.get_all()
        assert [t.id for t in collection.texts] == [keep.id]

    @pytest.mark.asyncio
    async def test_delete_hashtag(self, snippet_store):
        tag = await snippet_store.add_hashtag("", "python")
        assert await snippet_store.delete("hashtag", tag.id) is not None
        assert (await snippet_store.get_all()).hashtags == []

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, snippet_store, area):
        await snippet_store.add_text("", "something")
        area.writes.clear()
        assert await snippet_store.delete("text", "nope") is None
        assert area.writes == []

    @pytest.mark.asyncio
    async def test_delete_unknown_kind_is_noop(self, snippet_store, area):
        item = await snippet_store.add_text("", "something")
        area.writes.clear()
        assert await snippet_store.delete("note", item.id) is None
        assert area.writes == []
        assert len((await snippet_store.get_all()).texts) == 1

    @pytest.mark.asyncio
    async def test_kind_selects_list(self, snippet_store):
        item = await snippet_store.add_text("", "something")
        assert await snippet_store.delete("hashtag", item.id) is None
        assert len((await snippet_store.get_all()).texts) == 1


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_text(self, snippet_store, monkeypatch):
        item = await snippet_store.add_text("", "original")
        monkeypatch.setattr("tweet_intent.snippets.now_iso", lambda: FIXED_NOW)

        updated = await snippet_store.update("text", item.id, {"content": "changed"})
        assert updated.content == "changed"
        assert updated.label == item.label
        assert updated.created_at == item.created_at
        assert updated.updated_at == FIXED_NOW

        stored = (await snippet_store.get_all()).texts[0]
        assert stored == updated

    @pytest.mark.asyncio
    async def test_update_with_empty_patch_still_found(self, snippet_store):
        item = await snippet_store.add_text("", "original")
        updated = await snippet_store.update("text", item.id, {})
        assert updated is not None
        assert updated.content == "original"

    @pytest.mark.asyncio
    async def test_update_hashtag_normalizes_tag(self, snippet_store):
        item = await snippet_store.add_hashtag("", "old")
        updated = await snippet_store.update("hashtag", item.id, {"tag": "#New"})
        assert updated.tag == "New"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, snippet_store, area):
        await snippet_store.add_text("", "something")
        area.writes.clear()
        assert await snippet_store.update("text", "nope", {"label": "x"}) is None
        assert area.writes == []

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, snippet_store):
        item = await snippet_store.add_text("", "something")
        with pytest.raises(SnippetValidationError):
            await snippet_store.update("text", item.id, {"id": "hijack"})
        with pytest.raises(SnippetValidationError):
            await snippet_store.update("text", item.id, {"tag": "wrong-kind"})

    @pytest.mark.asyncio
    async def test_update_rejects_blank_content(self, snippet_store):
        item = await snippet_store.add_text("", "something")
        with pytest.raises(SnippetValidationError):
            await snippet_store.update("text", item.id, {"content": ""})


class TestWriteFailure:
    @pytest.fixture
    def store(self, read_only_storage) -> SnippetStore:
        return SnippetStore(read_only_storage)

    @pytest.mark.asyncio
    async def test_add_text_raises(self, store):
        with pytest.raises(SnippetStorageError):
            await store.add_text("", "hello")
        assert [t.id for t in (await store.get_all()).texts] == ["t1"]

    @pytest.mark.asyncio
    async def test_add_hashtag_raises(self, store):
        with pytest.raises(SnippetStorageError):
            await store.add_hashtag("", "rust")
        assert [h.tag for h in (await store.get_all()).hashtags] == ["python"]

    @pytest.mark.asyncio
    async def test_delete_raises(self, store):
        with pytest.raises(SnippetStorageError):
            await store.delete("text", "t1")
        assert len((await store.get_all()).texts) == 1

    @pytest.mark.asyncio
    async def test_update_raises(self, store):
        with pytest.raises(SnippetStorageError):
            await store.update("hashtag", "h1", {"tag": "rust"})
        assert (await store.get_all()).hashtags[0].tag == "python"

    @pytest.mark.asyncio
    async def test_not_found_is_not_a_failure(self, store):
        assert await store.delete("text", "nope") is None
        assert await store.update("text", "nope", {"label": "x"}) is None

    @pytest.mark.asyncio
    async def test_validation_checked_first(self, store):
        with pytest.raises(SnippetValidationError):
            await store.add_text("", " ")
