"""Wire the storage adapter and stores together for one application."""

from dataclasses import dataclass

from .config import AppConfig
from .drafts import DraftSaver, DraftStore
from .settings import SettingsStore
from .snippets import SnippetStore
from .storage import Host, StorageAdapter


@dataclass
class Core:
    config: AppConfig
    storage: StorageAdapter
    snippets: SnippetStore
    settings: SettingsStore
    drafts: DraftStore

    def draft_saver(self) -> DraftSaver:
        """A debouncer for draft writes, owned by the caller."""
        return DraftSaver(self.drafts, delay=self.config.debounce_ms / 1000)


def build_core(config: AppConfig, host: Host | None = None) -> Core:
    storage = StorageAdapter.select(host, config.data_dir)
    settings = SettingsStore(storage, config.namespace)
    return Core(
        config=config,
        storage=storage,
        snippets=SnippetStore(storage, config.namespace),
        settings=settings,
        drafts=DraftStore(storage, settings, config.namespace),
    )
