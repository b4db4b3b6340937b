"""Store selection from settings."""

import logging
from typing import Optional

from noor.core.config import STATE_BACKENDS, Settings, settings as default_settings
from noor.core.errors import ConfigError
from noor.features.storage.json_store import JsonFileStore
from noor.features.storage.provider import InMemoryStore, KeyValueStore
from noor.features.storage.sql_store import SqlKeyValueStore

logger = logging.getLogger(__name__)


def create_store(settings_obj: Optional[Settings] = None) -> KeyValueStore:
    """Build the key-value store named by STATE_BACKEND."""
    cfg = settings_obj or default_settings
    backend = cfg.STATE_BACKEND

    if backend == "memory":
        store: KeyValueStore = InMemoryStore()
    elif backend == "json":
        store = JsonFileStore(cfg.state_path())
    elif backend == "sql":
        store = SqlKeyValueStore(cfg.database_url())
    else:
        raise ConfigError(f"STATE_BACKEND must be one of {', '.join(STATE_BACKENDS)} (got {backend!r})")

    logger.info("[storage] store ready", extra={"backend": backend})
    return store
