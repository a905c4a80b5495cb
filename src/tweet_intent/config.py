"""Configuration loading and saving.

Config file location: ~/.config/tweet-intent/config.toml

Schema:
    [storage]
    data_dir = "~/.local/share/tweet-intent"
    namespace = "twIntent"

    [intent]
    base_url = "https://x.com/intent/tweet"

    [draft]
    debounce_ms = 300

Every key is optional. TWEET_INTENT_DATA_DIR overrides the default data_dir.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

from .intent import X_INTENT_BASE
from .storage import DEFAULT_NAMESPACE

CONFIG_DIR = Path.home() / ".config" / "tweet-intent"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_DEBOUNCE_MS = 300


def default_data_dir() -> Path:
    env = os.environ.get("TWEET_INTENT_DATA_DIR")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".local" / "share" / "tweet-intent"


@dataclass
class AppConfig:
    data_dir: Path = field(default_factory=default_data_dir)
    namespace: str = DEFAULT_NAMESPACE
    base_url: str = X_INTENT_BASE
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    storage_data = data.get("storage", {})
    intent_data = data.get("intent", {})
    draft_data = data.get("draft", {})

    data_dir = storage_data.get("data_dir")
    namespace = storage_data.get("namespace", DEFAULT_NAMESPACE)
    debounce_ms = draft_data.get("debounce_ms", DEFAULT_DEBOUNCE_MS)

    if not isinstance(namespace, str) or not namespace.strip():
        raise ValueError("Config storage.namespace must be a non-empty string")
    if not isinstance(debounce_ms, int) or debounce_ms < 0:
        raise ValueError("Config draft.debounce_ms must be a non-negative integer")

    return AppConfig(
        data_dir=Path(data_dir).expanduser() if data_dir else default_data_dir(),
        namespace=namespace,
        base_url=intent_data.get("base_url", X_INTENT_BASE),
        debounce_ms=debounce_ms,
    )


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "storage": {
            "data_dir": str(config.data_dir),
            "namespace": config.namespace,
        },
        "intent": {
            "base_url": config.base_url,
        },
        "draft": {
            "debounce_ms": config.debounce_ms,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
