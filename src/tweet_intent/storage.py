"""Key-value persistence behind a single async get/set interface.

Three backends are supported, picked once when the adapter is built:

    sync   - a synchronizing key-value area exposed by the host
    local  - a local-only key-value area exposed by the host
    file   - JSON files on disk, one per key (always available)

Host areas store structured values as-is. The file backend serializes to
JSON text and treats unparseable files as absent keys.

Callers never see backend errors: reads fall back to the supplied default
and writes report failure as False.
"""

import asyncio
import copy
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)

# Prefix separating our records from anything else in the same backend
DEFAULT_NAMESPACE = "twIntent"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Returned by areas and backends for keys that hold no value
MISSING: Any = _Missing()


class KeyValueArea(Protocol):
    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...


@dataclass
class Host:
    """Storage areas the embedding environment makes available."""

    sync: KeyValueArea | None = None
    local: KeyValueArea | None = None


class MemoryArea:
    """In-process key-value area. Values are copied in and out."""

    def __init__(self, initial: dict | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    async def get(self, key: str) -> Any:
        if key not in self._data:
            return MISSING
        return copy.deepcopy(self._data[key])

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class AreaBackend:
    """Backend over a host-provided area."""

    def __init__(self, area: KeyValueArea, kind: str):
        self.area = area
        self.kind = kind

    async def read(self, key: str) -> Any:
        return await self.area.get(key)

    async def write(self, key: str, value: Any) -> None:
        await self.area.set(key, value)


class JsonFileBackend:
    """Backend storing each key as a JSON text file in a directory."""

    kind = "file"

    def __init__(self, directory: Path):
        self.directory = directory

    def path_for(self, key: str) -> Path:
        return self.directory / (quote(key, safe="") + ".json")

    async def read(self, key: str) -> Any:
        return await asyncio.to_thread(self._read, key)

    async def write(self, key: str, value: Any) -> None:
        text = json.dumps(value, indent=2, ensure_ascii=False)
        await asyncio.to_thread(self._write, key, text)

    def _read(self, key: str) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return MISSING
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return MISSING
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Unparseable JSON in %s, treating as absent", path, exc_info=True)
            return MISSING

    def _write(self, key: str, text: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        # Write to a sibling temp file first so readers never see half a record
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class StorageAdapter:
    def __init__(self, backend: AreaBackend | JsonFileBackend):
        self._backend = backend

    @classmethod
    def select(cls, host: Host | None, fallback_dir: Path) -> "StorageAdapter":
        """Pick the first available backend: host sync, host local, files."""
        sync = getattr(host, "sync", None)
        local = getattr(host, "local", None)
        if sync is not None:
            backend = AreaBackend(sync, "sync")
        elif local is not None:
            backend = AreaBackend(local, "local")
        else:
            backend = JsonFileBackend(fallback_dir)
        logger.info("Using %s storage backend", backend.kind)
        return cls(backend)

    @property
    def kind(self) -> str:
        return self._backend.kind

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default* if absent or unreadable."""
        try:
            value = await self._backend.read(key)
        except Exception:
            logger.warning(
                "Failed to read %r from %s storage", key, self.kind, exc_info=True
            )
            return default
        return default if value is MISSING else value

    async def set(self, key: str, value: Any) -> bool:
        """Store *value* under *key*. Returns False if the backend failed."""
        try:
            await self._backend.write(key, value)
        except Exception:
            logger.warning(
                "Failed to write %r to %s storage", key, self.kind, exc_info=True
            )
            return False
        return True
