"""
Heading cache.

Extracting headings from a large document on every open is wasted work when
the document has not changed. Entries are keyed by document and validated
against a hash of the content and a format version.
"""

import json
import logging
import time
from dataclasses import asdict
from typing import Optional

from ..errors import StorageError
from ..parsing.headings import Heading
from ..utils.hashing import content_hash
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "@markdown_cache_"
CACHE_VERSION = "1"


class TocCache:
    """Content-validated cache of extracted headings."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def key_for(self, document_id: str) -> str:
        return f"{CACHE_KEY_PREFIX}{document_id}"

    async def get(self, document_id: str, content: str) -> Optional[list[Heading]]:
        """
        Return cached headings if they still match ``content``.

        Any failure (storage, corrupt entry, stale hash) is a miss.
        """
        try:
            raw = await self.store.get(self.key_for(document_id))
        except StorageError as e:
            logger.warning(f"[cache] ERROR reading {document_id}: {e}")
            return None

        if raw is None:
            logger.debug(f"[cache] MISS {document_id}: no entry")
            return None

        try:
            data = json.loads(raw)
            if data.get("version") != CACHE_VERSION:
                logger.debug(f"[cache] MISS {document_id}: version mismatch")
                return None
            if data.get("content_hash") != content_hash(content):
                logger.debug(f"[cache] MISS {document_id}: content changed")
                return None
            headings = [Heading(**item) for item in data["headings"]]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"[cache] Discarding corrupt entry for {document_id}: {e}")
            return None

        logger.debug(f"[cache] HIT {document_id} ({len(headings)} headings)")
        return headings

    async def put(self, document_id: str, content: str, headings: list[Heading]) -> None:
        """Cache headings for the given content; failures are logged."""
        entry = {
            "version": CACHE_VERSION,
            "document_id": document_id,
            "content_hash": content_hash(content),
            "headings": [asdict(h) for h in headings],
            "timestamp": time.time(),
        }
        try:
            await self.store.set(self.key_for(document_id), json.dumps(entry, ensure_ascii=False))
        except StorageError as e:
            logger.warning(f"[cache] ERROR saving {document_id}: {e}")
            return
        logger.debug(f"[cache] SAVED {document_id} ({len(headings)} headings)")

    async def clear(self, document_id: str) -> None:
        try:
            await self.store.delete(self.key_for(document_id))
        except StorageError as e:
            logger.warning(f"[cache] ERROR clearing {document_id}: {e}")

    async def clear_all(self) -> None:
        """Remove every cached entry from the store."""
        try:
            keys = await self.store.keys()
            for key in keys:
                if key.startswith(CACHE_KEY_PREFIX):
                    await self.store.delete(key)
        except StorageError as e:
            logger.warning(f"[cache] ERROR clearing all entries: {e}")
