"""
Reading position schema.

A position is anchored on a heading ordinal when one is known, with an
absolute character offset kept as a fallback. Records written by the older
offset-only format are upgraded on load.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

# Older records: {"documentId", "scrollOffset", "chunkIndex", "timestamp" (epoch ms)}
_LEGACY_KEYS = {
    "documentId": "document_id",
    "scrollOffset": "legacy_character_offset",
    "chunkIndex": "segment_index_at_save",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PositionRecord(BaseModel):
    """
    Saved reading position for one document.

    ``heading_index`` takes priority over ``legacy_character_offset`` when
    both are present.
    """

    document_id: str = Field(..., min_length=1)
    heading_index: Optional[int] = Field(None, ge=0)
    legacy_character_offset: Optional[int] = Field(None, ge=0)
    segment_index_at_save: Optional[int] = Field(None, ge=0)
    saved_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy_format(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "documentId" not in data:
            return data

        upgraded: dict[str, Any] = {}
        for old, new in _LEGACY_KEYS.items():
            if data.get(old) is not None:
                upgraded[new] = data[old]

        offset = upgraded.get("legacy_character_offset")
        if isinstance(offset, float):
            upgraded["legacy_character_offset"] = max(0, int(offset))

        timestamp = data.get("timestamp")
        if isinstance(timestamp, (int, float)):
            upgraded["saved_at"] = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)

        return upgraded

    @property
    def has_position(self) -> bool:
        return self.heading_index is not None or self.legacy_character_offset is not None
