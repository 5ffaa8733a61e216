"""
Reading session orchestration.

ReaderSession: Document → Chunk → Restore position → Window →
  scroll / jump events → autosave → final save on close
"""

from .session import JumpResult, ReaderSession
from .state import SessionStage, SessionState

__all__ = [
    "JumpResult",
    "ReaderSession",
    "SessionStage",
    "SessionState",
]
