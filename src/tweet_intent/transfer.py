"""Export snippets to a portable JSON document and import them back.

Export format:
    {
        "version": "1.0",
        "exportDate": "2025-01-15T14:30:00+00:00",
        "templates": {
            "texts": [{"content": "...", "createdAt": "..."}],
            "hashtags": [{"tag": "...", "createdAt": "..."}]
        }
    }

Older exports used a "snippets" key instead of "templates"; both are read.
Imported entries get fresh ids and timestamps.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from .models import SnippetCollection
from .normalize import normalize_hashtags
from .snippets import SnippetStorageError, SnippetStore

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


class ImportFormatError(ValueError):
    """Raised when an import document does not have the expected shape."""


@dataclass
class ImportResult:
    imported: int = 0
    duplicates: int = 0
    failed: int = 0


def build_export(collection: SnippetCollection, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    return {
        "version": EXPORT_VERSION,
        "exportDate": now.isoformat(),
        "templates": {
            "texts": [
                {"content": t.content, "createdAt": t.created_at}
                for t in collection.texts
            ],
            "hashtags": [
                {"tag": h.tag, "createdAt": h.created_at}
                for h in collection.hashtags
            ],
        },
    }


def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"twitter-intent-templates-{now.strftime('%Y-%m-%d')}.json"


def parse_import(text: str | bytes) -> dict:
    """Parse an import document, raising ImportFormatError if it is not JSON.

    Bytes are decoded as UTF-8.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ImportFormatError(f"Import file is not UTF-8 text: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Import file is not valid JSON: {e}") from e
    _templates(data)
    return data


def _templates(data) -> dict:
    source = None
    if isinstance(data, dict):
        source = data.get("templates") or data.get("snippets")
    if (
        not isinstance(source, dict)
        or not isinstance(source.get("texts"), list)
        or not isinstance(source.get("hashtags"), list)
    ):
        raise ImportFormatError("Invalid file format")
    entries = source["texts"] + source["hashtags"]
    if not all(isinstance(entry, dict) for entry in entries):
        raise ImportFormatError("Invalid file format")
    return source


async def import_snippets(store: SnippetStore, data: dict) -> ImportResult:
    """Add the snippets in *data* that the store does not already hold.

    Entries are matched by value (text content, normalized tag), not id.
    Empty and already-present entries count as duplicates, and entries the
    backend refused count as failed. The whole document is validated before
    anything is added.
    """
    source = _templates(data)

    existing = await store.get_all()
    known_texts = {t.content for t in existing.texts}
    known_tags = {h.tag for h in existing.hashtags}

    new_texts = [
        entry["content"]
        for entry in source["texts"]
        if isinstance(entry.get("content"), str)
        and entry["content"].strip()
        and entry["content"] not in known_texts
    ]
    new_tags = []
    for entry in source["hashtags"]:
        tags = normalize_hashtags(entry.get("tag"))
        if tags and tags[0] not in known_tags:
            new_tags.append(tags[0])

    total = len(source["texts"]) + len(source["hashtags"])
    result = ImportResult(duplicates=total - len(new_texts) - len(new_tags))

    additions = [(store.add_text, content) for content in new_texts]
    additions += [(store.add_hashtag, tag) for tag in new_tags]
    for add, value in additions:
        try:
            await add("", value)
        except SnippetStorageError:
            logger.warning("Could not save imported snippet %r", value)
            result.failed += 1
        else:
            result.imported += 1

    logger.info(
        "Imported %d snippets (%d duplicates skipped, %d failed)",
        result.imported,
        result.duplicates,
        result.failed,
    )
    return result
