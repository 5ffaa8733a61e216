"""
Persistence for reading positions, heading caches and settings.

Provides:
- KeyValueStore: Async string store protocol, with memory and JSON-file backends
- PositionStore: Per-document reading positions
- TocCache: Content-validated heading cache
- SettingsStore: User settings
"""

from .cache import TocCache
from .kv import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .positions import PositionSource, PositionStore, ResolvedPosition, reconcile_position
from .settings import SettingsStore

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PositionSource",
    "PositionStore",
    "ResolvedPosition",
    "SettingsStore",
    "TocCache",
    "reconcile_position",
]
