"""Data models for share parameters, snippets, settings and drafts.

Persisted records use camelCase keys (``createdAt``, ``saveDraft``) so the
stored shape stays stable regardless of the Python attribute names.
"""

import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Snippet kinds accepted by SnippetStore.delete/update
TEXT = "text"
HASHTAG = "hashtag"

DRAFT_FIELDS = ("text", "url", "hashtags", "via", "related")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ShareParams:
    text: str = ""
    url: str = ""
    hashtags: list[str] = field(default_factory=list)
    via: str = ""  # handle, leading @ optional
    related: list[str] = field(default_factory=list)


def share_fields(params) -> dict:
    """Return share parameters as a plain dict, whatever form they came in."""
    if params is None:
        return {}
    if isinstance(params, ShareParams):
        return asdict(params)
    return dict(params)


@dataclass
class TextSnippet:
    id: str
    label: str
    content: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TextSnippet":
        return cls(
            id=str(data["id"]),
            label=str(data.get("label") or ""),
            content=str(data.get("content") or ""),
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )


@dataclass
class HashtagSnippet:
    id: str
    label: str
    tag: str  # normalized, no leading #
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "tag": self.tag,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HashtagSnippet":
        return cls(
            id=str(data["id"]),
            label=str(data.get("label") or ""),
            tag=str(data.get("tag") or ""),
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )


@dataclass
class SnippetCollection:
    version: int = SCHEMA_VERSION
    texts: list[TextSnippet] = field(default_factory=list)
    hashtags: list[HashtagSnippet] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "texts": [t.to_dict() for t in self.texts],
            "hashtags": [h.to_dict() for h in self.hashtags],
        }

    @classmethod
    def from_raw(cls, raw) -> "SnippetCollection":
        """Build a collection from whatever was persisted.

        Missing or malformed ``texts``/``hashtags`` become empty lists and a
        missing version is filled in. Individual entries that cannot be read
        are dropped rather than failing the whole collection.
        """
        if not isinstance(raw, dict):
            raw = {}
        version = raw.get("version") or SCHEMA_VERSION
        return cls(
            version=version,
            texts=_parse_entries(raw.get("texts"), TextSnippet),
            hashtags=_parse_entries(raw.get("hashtags"), HashtagSnippet),
        )


def _parse_entries(items, model) -> list:
    if not isinstance(items, list):
        return []
    parsed = []
    for item in items:
        try:
            parsed.append(model.from_dict(item))
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Dropping malformed %s entry: %s", model.__name__, e)
    return parsed


@dataclass
class SaveDraftFlags:
    text: bool = False
    url: bool = True
    hashtags: bool = True
    via: bool = True
    related: bool = True


@dataclass
class Settings:
    save_draft: SaveDraftFlags = field(default_factory=SaveDraftFlags)
    compact_mode: bool = False

    def to_dict(self) -> dict:
        return {
            "saveDraft": asdict(self.save_draft),
            "compactMode": self.compact_mode,
        }

    @classmethod
    def from_raw(cls, raw) -> "Settings":
        """Merge persisted values over the hard defaults, field by field."""
        settings = cls()
        if not isinstance(raw, dict):
            return settings
        save_draft = raw.get("saveDraft")
        if isinstance(save_draft, dict):
            for f in fields(SaveDraftFlags):
                if save_draft.get(f.name) is not None:
                    setattr(settings.save_draft, f.name, bool(save_draft[f.name]))
        if raw.get("compactMode") is not None:
            settings.compact_mode = bool(raw["compactMode"])
        return settings


@dataclass
class Draft:
    """Last-entered form values. ``None`` means the field was not saved."""

    text: str | None = None
    url: str | None = None
    hashtags: list[str] | None = None
    via: str | None = None
    related: list[str] | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        data = {
            name: getattr(self, name)
            for name in DRAFT_FIELDS
            if getattr(self, name) is not None
        }
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_raw(cls, raw: dict) -> "Draft":
        return cls(
            text=raw.get("text"),
            url=raw.get("url"),
            hashtags=raw.get("hashtags"),
            via=raw.get("via"),
            related=raw.get("related"),
            updated_at=raw.get("updatedAt"),
        )
