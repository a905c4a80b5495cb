"""User preferences: which draft fields to remember, and compact mode."""

import logging

from .models import Settings, now_iso
from .storage import DEFAULT_NAMESPACE, StorageAdapter

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, storage: StorageAdapter, namespace: str = DEFAULT_NAMESPACE):
        self.storage = storage
        self.key = f"{namespace}/settings"

    async def get(self) -> Settings:
        """Return stored settings merged over the defaults."""
        raw = await self.storage.get(self.key, None)
        return Settings.from_raw(raw)

    async def set(self, settings: Settings) -> bool:
        """Replace the stored settings. Pass a complete Settings object."""
        data = settings.to_dict()
        data["updatedAt"] = now_iso()
        return await self.storage.set(self.key, data)

    async def reset(self) -> bool:
        logger.info("Resetting settings to defaults")
        return await self.set(Settings())
