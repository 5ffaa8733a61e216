"""
Durable reading positions and their reconciliation on reopen.

Saving must never interrupt reading: storage failures are logged and
dropped. Restoring must never fail either: a position that no longer fits
the document degrades to the closest thing still available.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ..binding.locator import (
    heading_index_to_offset,
    offset_to_nearest_heading,
    segment_for_offset,
)
from ..chunking.chunker import Segment
from ..errors import HeadingNotFound, StorageError
from ..parsing.headings import Heading
from ..schema.position import PositionRecord
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

# Per-document records live under "<prefix>:<document_id>"; the older layout
# kept one JSON map of document id -> record under "<prefix>" itself.
POSITION_KEY_PREFIX = "readingPositions"


class PositionSource(str, Enum):
    """Which part of a saved record a restored position came from."""

    HEADING = "heading"
    LEGACY_OFFSET = "legacy_offset"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedPosition:
    """A saved position mapped onto the current document and chunking."""

    offset: int
    segment_index: int
    heading_index: Optional[int]
    source: PositionSource


def reconcile_position(
    record: Optional[PositionRecord],
    headings: Sequence[Heading],
    segments: Sequence[Segment],
    content_length: int,
) -> ResolvedPosition:
    """
    Map a saved position onto the current document.

    Order of preference:
    1. The saved heading ordinal, if the document still has it
    2. The saved character offset, clamped to the document
    3. The start of the document

    Args:
        record: Saved record, or None if nothing was saved
        headings: Headings of the current content
        segments: Current segment table
        content_length: Length of the current content

    Returns:
        ResolvedPosition (never raises)
    """
    if record is not None and record.heading_index is not None:
        try:
            offset = heading_index_to_offset(record.heading_index, headings)
        except HeadingNotFound as e:
            logger.info(f"{record.document_id}: {e}, falling back")
        else:
            return ResolvedPosition(
                offset=offset,
                segment_index=segment_for_offset(offset, segments),
                heading_index=record.heading_index,
                source=PositionSource.HEADING,
            )

    if record is not None and record.legacy_character_offset is not None:
        offset = max(0, min(record.legacy_character_offset, content_length))
        return ResolvedPosition(
            offset=offset,
            segment_index=segment_for_offset(offset, segments),
            heading_index=offset_to_nearest_heading(offset, headings),
            source=PositionSource.LEGACY_OFFSET,
        )

    return ResolvedPosition(
        offset=0,
        segment_index=0,
        heading_index=None,
        source=PositionSource.DEFAULT,
    )


class PositionStore:
    """
    Per-document reading positions in a key-value store.

    Every save replaces the whole record for the document.
    """

    def __init__(self, store: KeyValueStore, key_prefix: str = POSITION_KEY_PREFIX) -> None:
        self.store = store
        self.key_prefix = key_prefix

    def key_for(self, document_id: str) -> str:
        return f"{self.key_prefix}:{document_id}"

    async def save(
        self,
        document_id: str,
        heading_index: Optional[int] = None,
        legacy_offset: Optional[int] = None,
        segment_index: Optional[int] = None,
    ) -> None:
        """
        Overwrite the saved position for a document.

        Failures are logged, never raised.
        """
        try:
            record = PositionRecord(
                document_id=document_id,
                heading_index=heading_index,
                legacy_character_offset=legacy_offset,
                segment_index_at_save=segment_index,
            )
            await self.store.set(self.key_for(document_id), record.model_dump_json())
        except Exception:
            logger.exception(f"Failed to save reading position for {document_id}")
            return

        logger.debug(
            f"Saved position for {document_id}: heading={heading_index} "
            f"offset={legacy_offset} segment={segment_index}"
        )

    async def load(self, document_id: str) -> Optional[PositionRecord]:
        """
        Load the saved position for a document.

        Returns:
            The record, or None if never saved or unreadable
        """
        try:
            raw = await self.store.get(self.key_for(document_id))
        except StorageError as e:
            logger.warning(f"Failed to load reading position for {document_id}: {e}")
            return None

        if raw is None:
            return await self._load_legacy(document_id)

        try:
            return PositionRecord.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable position for {document_id}: {e}")
            return None

    async def _load_legacy(self, document_id: str) -> Optional[PositionRecord]:
        """Read a record from the older single-map layout, if present."""
        try:
            raw = await self.store.get(self.key_prefix)
        except StorageError as e:
            logger.warning(f"Failed to load legacy positions: {e}")
            return None

        if raw is None:
            return None

        try:
            entry = json.loads(raw).get(document_id)
            if entry is None:
                return None
            record = PositionRecord.model_validate(entry)
        except (ValueError, AttributeError) as e:
            logger.warning(f"Discarding unreadable legacy position for {document_id}: {e}")
            return None

        logger.info(f"Upgraded legacy reading position for {document_id}")
        return record

    async def clear(self, document_id: str) -> None:
        """Forget the saved position for a document, in both layouts."""
        try:
            await self.store.delete(self.key_for(document_id))
            raw = await self.store.get(self.key_prefix)
            if raw is not None:
                legacy = json.loads(raw)
                if isinstance(legacy, dict) and legacy.pop(document_id, None) is not None:
                    await self.store.set(self.key_prefix, json.dumps(legacy))
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to clear reading position for {document_id}: {e}")

    async def restore(
        self,
        document_id: str,
        headings: Sequence[Heading],
        segments: Sequence[Segment],
        content_length: int,
    ) -> ResolvedPosition:
        """Load and reconcile the saved position in one step."""
        record = await self.load(document_id)
        return reconcile_position(record, headings, segments, content_length)
