"""
Sliding window over document segments.

The window is the contiguous range of segments currently materialized in the
reader. Scroll-triggered extensions are rate limited; jumps are not.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from ..chunking.chunker import Segment

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 3
DEFAULT_DEBOUNCE_MS = 2000
DEFAULT_COOLDOWN_MS = 500


class WindowState(Enum):
    """Window manager lifecycle."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


class ExtendStatus(Enum):
    """Outcome of a scroll-triggered extension."""

    LOADED = "loaded"
    AT_BOUNDARY = "at_boundary"  # no more content in that direction
    THROTTLED = "throttled"  # debounce interval not elapsed
    BUSY = "busy"  # cooldown after the previous load
    NOT_READY = "not_ready"  # load_initial not called yet


@dataclass(frozen=True)
class LoadedWindow:
    """Inclusive range of loaded segment indices."""

    first_segment: int
    last_segment: int
    total_segments: int

    def __post_init__(self) -> None:
        if not 0 <= self.first_segment <= self.last_segment < self.total_segments:
            raise ValueError(
                f"Invalid window [{self.first_segment}, {self.last_segment}] "
                f"of {self.total_segments}"
            )

    @property
    def size(self) -> int:
        return self.last_segment - self.first_segment + 1

    def contains(self, segment_index: int) -> bool:
        return self.first_segment <= segment_index <= self.last_segment


@dataclass(frozen=True)
class ExtendResult:
    """Result of extend_forward / extend_backward."""

    status: ExtendStatus
    window: Optional[LoadedWindow]
    segment_index: Optional[int] = None
    content: str = ""

    @property
    def loaded(self) -> bool:
        return self.status is ExtendStatus.LOADED


WindowListener = Callable[[LoadedWindow], None]


class WindowManager:
    """
    Track which segments are loaded and serve load requests.

    All methods are synchronous. Bursts of scroll events are collapsed by a
    debounce interval (time since the last successful extension, in either
    direction) and a short cooldown after each load. ``jump_to`` bypasses
    both.
    """

    def __init__(
        self,
        content: str,
        segments: Sequence[Segment],
        window_size: int = DEFAULT_WINDOW_SIZE,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize window manager.

        Args:
            content: Full document text
            segments: Segment table for ``content`` (at least one segment)
            window_size: Segments loaded by load_initial and jump_to
            debounce_ms: Minimum time between successful extensions
            cooldown_ms: Time after a load during which extensions report BUSY
            clock: Monotonic clock in seconds
        """
        if not segments:
            raise ValueError("segments must not be empty")
        if window_size < 1:
            raise ValueError("window_size must be at least 1")

        self._content = content
        self._segments = list(segments)
        self.window_size = window_size
        self.debounce_s = debounce_ms / 1000
        self.cooldown_s = cooldown_ms / 1000
        self._clock = clock

        self._window: Optional[LoadedWindow] = None
        self._last_extend_at: Optional[float] = None
        self._busy_until = float("-inf")
        self._listeners: list[WindowListener] = []

    # ── State ──────────────────────────────────────────────────────────────

    @property
    def state(self) -> WindowState:
        if self._window is None:
            return WindowState.UNINITIALIZED
        return WindowState.READY

    @property
    def window(self) -> Optional[LoadedWindow]:
        return self._window

    @property
    def total_segments(self) -> int:
        return len(self._segments)

    @property
    def is_loading(self) -> bool:
        return self._clock() < self._busy_until

    @property
    def window_start_offset(self) -> int:
        if self._window is None:
            return 0
        return self._segments[self._window.first_segment].start_offset

    @property
    def window_end_offset(self) -> int:
        if self._window is None:
            return 0
        return self._segments[self._window.last_segment].end_offset

    def is_loaded(self, segment_index: int) -> bool:
        return self._window is not None and self._window.contains(segment_index)

    def segment_text(self, segment_index: int) -> str:
        return self._segments[self._clamp(segment_index)].text(self._content)

    def window_text(self) -> str:
        """Text of every loaded segment, in order."""
        return self._content[self.window_start_offset:self.window_end_offset]

    def subscribe(self, listener: WindowListener) -> Callable[[], None]:
        """
        Register a callback for window changes.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # ── Transitions ────────────────────────────────────────────────────────

    def load_initial(self, start_segment: int = 0, window_size: Optional[int] = None) -> str:
        """
        Load the first window, starting at ``start_segment``.

        Args:
            start_segment: First segment to load (clamped)
            window_size: Override for the configured window size

        Returns:
            Text of the loaded window
        """
        if window_size is not None:
            if window_size < 1:
                raise ValueError("window_size must be at least 1")
            self.window_size = window_size

        first = self._clamp(start_segment)
        self._set_window(first, min(first + self.window_size - 1, self.total_segments - 1))
        logger.debug(
            f"Loaded initial segments [{self._window.first_segment}, "
            f"{self._window.last_segment}] of {self.total_segments}"
        )
        return self.window_text()

    def extend_forward(self) -> ExtendResult:
        """Load the segment after the window, if allowed."""
        if self._window is None:
            return ExtendResult(ExtendStatus.NOT_READY, None)

        next_segment = self._window.last_segment + 1
        blocked = self._check_extend(next_segment < self.total_segments, "forward")
        if blocked is not None:
            return blocked

        self._set_window(self._window.first_segment, next_segment)
        return self._loaded(next_segment)

    def extend_backward(self) -> ExtendResult:
        """Load the segment before the window, if allowed."""
        if self._window is None:
            return ExtendResult(ExtendStatus.NOT_READY, None)

        prev_segment = self._window.first_segment - 1
        blocked = self._check_extend(prev_segment >= 0, "backward")
        if blocked is not None:
            return blocked

        self._set_window(prev_segment, self._window.last_segment)
        return self._loaded(prev_segment)

    def jump_to(self, target_segment: int) -> str:
        """
        Reset the window to start at ``target_segment``.

        Never throttled: jumps are user-initiated discontinuities.

        Returns:
            Text of the new window
        """
        first = self._clamp(target_segment)
        self._set_window(first, min(first + self.window_size - 1, self.total_segments - 1))
        logger.debug(
            f"Jumped to segment {target_segment}, loaded "
            f"[{self._window.first_segment}, {self._window.last_segment}]"
        )
        return self.window_text()

    # ── Internals ──────────────────────────────────────────────────────────

    def _check_extend(self, has_more: bool, direction: str) -> Optional[ExtendResult]:
        now = self._clock()

        if now < self._busy_until:
            logger.debug(f"extend {direction}: already loading, skipping")
            return ExtendResult(ExtendStatus.BUSY, self._window)

        if not has_more:
            logger.debug(f"extend {direction}: no more content")
            return ExtendResult(ExtendStatus.AT_BOUNDARY, self._window)

        if self._last_extend_at is not None and now - self._last_extend_at < self.debounce_s:
            logger.debug(f"extend {direction}: debouncing, too soon")
            return ExtendResult(ExtendStatus.THROTTLED, self._window)

        self._last_extend_at = now
        self._busy_until = now + self.cooldown_s
        return None

    def _loaded(self, segment_index: int) -> ExtendResult:
        text = self.segment_text(segment_index)
        logger.debug(f"Loaded segment {segment_index} ({len(text)} chars)")
        return ExtendResult(ExtendStatus.LOADED, self._window, segment_index, text)

    def _clamp(self, segment_index: int) -> int:
        return max(0, min(segment_index, self.total_segments - 1))

    def _set_window(self, first: int, last: int) -> None:
        window = LoadedWindow(first, last, self.total_segments)
        changed = window != self._window
        self._window = window
        if changed:
            for listener in list(self._listeners):
                listener(window)


def jump_scroll_fraction(
    previous: Optional[LoadedWindow],
    target_segment: int,
    backward: float = 0.28,
    forward: float = 0.52,
) -> float:
    """
    Scroll fraction to restore inside the new window after a jump.

    Jumping backward keeps some preceding context on screen; jumping forward
    places the target lower, in a comfortable reading position.
    """
    if previous is not None and target_segment < previous.first_segment:
        return backward
    return forward
