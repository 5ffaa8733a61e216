"""
Reading session state.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class SessionStage(Enum):
    """Reading session lifecycle stages."""

    INIT = "init"
    LOADING = "loading"
    READY = "ready"
    CLOSED = "closed"
    ERROR = "error"


@dataclass
class SessionState:
    """
    Mutable state of one reading session.

    Tracks the reader's current position between saves.
    """

    document_id: str
    stage: SessionStage = SessionStage.INIT

    # Current position (absolute offsets)
    current_offset: int = 0
    current_heading: Optional[int] = None
    dirty: bool = False

    # Tracking
    restored_from: Optional[str] = None
    errors: list[str] = field(default_factory=list)
    saves_written: int = 0
    segments_loaded: int = 0

    def add_error(self, error: str) -> None:
        """Record an error."""
        self.errors.append(error)
        logger.error(f"[{self.document_id}] {error}")

    def advance_to(self, stage: SessionStage) -> None:
        """Advance to a new stage."""
        logger.info(f"[{self.document_id}] Stage: {self.stage.value} → {stage.value}")
        self.stage = stage

    def move_to(self, offset: int, heading: Optional[int]) -> None:
        """Record a new reading position; marks the state dirty if it changed."""
        if offset != self.current_offset or heading != self.current_heading:
            self.current_offset = offset
            self.current_heading = heading
            self.dirty = True

    def summary(self) -> dict:
        """Return a summary of the session state."""
        return {
            "stage": self.stage.value,
            "document_id": self.document_id,
            "offset": self.current_offset,
            "heading": self.current_heading,
            "restored_from": self.restored_from,
            "saves_written": self.saves_written,
            "segments_loaded": self.segments_loaded,
            "errors": len(self.errors),
        }
