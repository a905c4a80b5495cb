"""Remember the last-entered form values between sessions.

Which fields are kept is decided by the ``saveDraft`` settings at the time of
each write. A field that was saved earlier and has since been disabled stays
in storage until the next write replaces the draft record.
"""

import asyncio
import logging

from .models import DRAFT_FIELDS, Draft, now_iso, share_fields
from .settings import SettingsStore
from .storage import DEFAULT_NAMESPACE, StorageAdapter

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class DraftStore:
    def __init__(
        self,
        storage: StorageAdapter,
        settings: SettingsStore,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.storage = storage
        self.settings = settings
        self.key = f"{namespace}/draft"

    async def get(self) -> Draft | None:
        raw = await self.storage.get(self.key, None)
        if not isinstance(raw, dict):
            return None
        return Draft.from_raw(raw)

    async def set(self, snapshot) -> bool:
        """Persist the fields of *snapshot* that the current settings allow."""
        flags = (await self.settings.get()).save_draft
        values = share_fields(snapshot)
        data = {
            name: values[name]
            for name in DRAFT_FIELDS
            if getattr(flags, name) and name in values
        }
        data["updatedAt"] = now_iso()
        return await self.storage.set(self.key, data)


class DraftSaver:
    """Coalesce rapid draft writes into one write after a quiet period.

    Each ``schedule()`` replaces any write still waiting out its delay, so
    only the latest snapshot is persisted. Must be used from a running event
    loop.
    """

    def __init__(self, store: DraftStore, delay: float = DEFAULT_DEBOUNCE_SECONDS):
        self.store = store
        self.delay = delay
        self._pending = None
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule(self, snapshot) -> None:
        self.cancel()
        self._pending = snapshot
        task = asyncio.get_running_loop().create_task(self._write_after_delay())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._timer = task

    def cancel(self) -> bool:
        """Drop the waiting write, if any. Writes already under way finish."""
        timer, self._timer = self._timer, None
        self._pending = None
        if timer is None:
            return False
        timer.cancel()
        return True

    async def flush(self) -> bool | None:
        """Write the waiting snapshot now. Returns None if nothing was waiting."""
        if self._timer is None:
            return None
        snapshot = self._pending
        self.cancel()
        return await self.store.set(snapshot)

    async def drain(self) -> None:
        """Wait for every scheduled and in-flight write to settle."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _write_after_delay(self) -> bool:
        await asyncio.sleep(self.delay)
        snapshot, self._pending = self._pending, None
        self._timer = None
        ok = await self.store.set(snapshot)
        if not ok:
            logger.warning("Draft could not be saved")
        return ok
