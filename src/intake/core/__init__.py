"""
Core module - Configuration, logging, key/value storage, and email rendering.
"""

from intake.core.config import Settings, get_settings
from intake.core.kv import (
    JsonCollection,
    KeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
    init_store,
)
from intake.core.logging_config import configure_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    # Storage
    "JsonCollection",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "init_store",
]
