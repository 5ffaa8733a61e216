"""
Segment window management.

Provides:
- WindowManager: Load, extend and re-center the window of loaded segments
- LoadedWindow: Immutable snapshot of the loaded range
"""

from .window import (
    ExtendResult,
    ExtendStatus,
    LoadedWindow,
    WindowManager,
    WindowState,
    jump_scroll_fraction,
)

__all__ = [
    "ExtendResult",
    "ExtendStatus",
    "LoadedWindow",
    "WindowManager",
    "WindowState",
    "jump_scroll_fraction",
]
