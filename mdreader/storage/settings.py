"""
Settings persistence.
"""

import logging
from typing import Any

from pydantic import ValidationError

from ..errors import StorageError
from ..schema.settings import AppSettings
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "appSettings"


class SettingsStore:
    """
    Load and update AppSettings in a key-value store.

    Stored values are merged over the defaults, so settings added in later
    versions get their default value.
    """

    def __init__(self, store: KeyValueStore, key: str = SETTINGS_KEY) -> None:
        self.store = store
        self.key = key
        self.settings = AppSettings()

    async def load(self) -> AppSettings:
        """Load settings, falling back to defaults on any failure."""
        try:
            raw = await self.store.get(self.key)
            if raw:
                self.settings = AppSettings.model_validate_json(raw)
        except (StorageError, ValidationError) as e:
            logger.warning(f"Failed to load settings, using defaults: {e}")
        return self.settings

    async def update(self, **changes: Any) -> AppSettings:
        """
        Apply changes and persist them.

        The in-memory settings keep the change even if persisting fails.
        """
        self.settings = AppSettings.model_validate({**self.settings.model_dump(), **changes})
        try:
            await self.store.set(self.key, self.settings.model_dump_json(by_alias=True))
        except StorageError as e:
            logger.warning(f"Failed to save settings: {e}")
        return self.settings
