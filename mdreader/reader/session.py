"""
Reading session orchestration.

One ReaderSession owns one open document: its segment table, headings and
window. Renderer events (scroll, viewport changes, TOC clicks) arrive on the
event loop and are turned into synchronous window operations; only reading
the document and persisting positions await I/O.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..binding.locator import offset_to_nearest_heading, segment_for_offset
from ..chunking.chunker import Chunker, Segment
from ..config import ReaderConfig
from ..errors import DocumentLoadError
from ..pagination.window import (
    ExtendResult,
    LoadedWindow,
    WindowManager,
    jump_scroll_fraction,
)
from ..parsing.documents import DocumentRef, DocumentSource
from ..parsing.headings import Heading, extract_headings
from ..storage.cache import TocCache
from ..storage.positions import PositionStore
from .state import SessionStage, SessionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JumpResult:
    """New window content after a jump, and where to scroll inside it."""

    content: str
    window: LoadedWindow
    heading_index: Optional[int]
    scroll_fraction: float


class ReaderSession:
    """
    Coordinate chunking, windowing and position persistence for a document.

    Usage::

        async with ReaderSession(doc, source, positions) as session:
            text = session.initial_content
            ...
    """

    def __init__(
        self,
        document: DocumentRef,
        source: DocumentSource,
        positions: PositionStore,
        config: Optional[ReaderConfig] = None,
        toc_cache: Optional[TocCache] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize session.

        Args:
            document: Document to open
            source: Where to read the document from
            positions: Reading position persistence
            config: Reader configuration
            toc_cache: Optional heading cache
            clock: Monotonic clock for the window debounce
        """
        self.document = document
        self.source = source
        self.positions = positions
        self.config = config or ReaderConfig()
        self.toc_cache = toc_cache
        self._clock = clock

        self.chunker = Chunker(
            target_size=self.config.target_segment_size,
            heading_split_ratio=self.config.heading_split_ratio,
            force_split_ratio=self.config.force_split_ratio,
        )
        self.state = SessionState(document_id=document.id)

        self.content = ""
        self.segments: list[Segment] = []
        self.headings: list[Heading] = []
        self.window: Optional[WindowManager] = None
        self.initial_content = ""

        self._autosave_task: Optional[asyncio.Task] = None
        self._autosave_stop: Optional[asyncio.Event] = None

    # ── Lifecycle ──────────────────────────────────────────────────────────

    async def open(self) -> str:
        """
        Read, chunk and position the document.

        Returns:
            Text of the initial window

        Raises:
            DocumentLoadError: If the document cannot be read
        """
        if self.state.stage is not SessionStage.INIT:
            raise RuntimeError(
                f"Session for {self.document.id} was already opened (stage: {self.state.stage.value})"
            )

        self.state.advance_to(SessionStage.LOADING)

        try:
            content = await self.source.read_full_content(self.document)
        except DocumentLoadError as e:
            self._fail(str(e))
            raise
        except OSError as e:
            self._fail(f"Failed to load document: {e}")
            raise DocumentLoadError(f"Failed to load document {self.document.id}: {e}") from e

        self.content = content
        self.segments = self.chunker.chunk(content)
        self.headings = await self._load_headings(content)

        resolved = await self.positions.restore(
            self.document.id, self.headings, self.segments, len(content)
        )
        self.state.restored_from = resolved.source.value

        self.window = WindowManager(
            content,
            self.segments,
            window_size=self.config.window_size,
            debounce_ms=self.config.debounce_interval_ms,
            cooldown_ms=self.config.load_cooldown_ms,
            clock=self._clock,
        )
        self.initial_content = self.window.load_initial(resolved.segment_index)
        self.state.current_offset = resolved.offset
        self.state.current_heading = resolved.heading_index

        logger.info(
            f"Opened {self.document.id}: {len(content)} chars, "
            f"{len(self.segments)} segments, {len(self.headings)} headings, "
            f"position from {resolved.source.value} (segment {resolved.segment_index})"
        )

        self.state.advance_to(SessionStage.READY)
        self._start_autosave()
        return self.initial_content

    async def close(self) -> None:
        """Stop autosave and persist the final position."""
        if self.state.stage is not SessionStage.READY:
            return

        await self._stop_autosave()
        await self.save_position()
        self.state.advance_to(SessionStage.CLOSED)

    async def __aenter__(self) -> "ReaderSession":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── Renderer events ────────────────────────────────────────────────────

    def on_scroll(self, scroll_fraction: float) -> Optional[ExtendResult]:
        """
        Extend the window when the reader nears either end of it.

        Args:
            scroll_fraction: Position within the loaded window, 0..1

        Returns:
            ExtendResult when an extension was attempted, else None
        """
        window = self._require_window()

        if scroll_fraction >= self.config.near_bottom_threshold:
            result = window.extend_forward()
        elif scroll_fraction <= self.config.near_top_threshold:
            result = window.extend_backward()
        else:
            return None

        if result.loaded:
            self.state.segments_loaded += 1
        return result

    def update_viewport(
        self,
        scroll_fraction: float,
        visible_heading: Optional[int] = None,
        viewport_chars: int = 0,
    ) -> None:
        """
        Record where the reader is.

        Args:
            scroll_fraction: Position of the viewport top within the loaded window, 0..1
            visible_heading: Heading the renderer reports near the top, if any
            viewport_chars: Approximate number of characters on screen
        """
        window = self._require_window()

        fraction = max(0.0, min(scroll_fraction, 1.0))
        start = window.window_start_offset
        offset = start + int(fraction * (window.window_end_offset - start))

        heading = visible_heading
        if heading is None or not 0 <= heading < len(self.headings):
            heading = offset_to_nearest_heading(
                offset,
                self.headings,
                viewport_length=viewport_chars,
                viewport_fraction=self.config.viewport_heading_fraction,
            )

        self.state.move_to(offset, heading)

    def jump_to_heading(self, heading_index: int) -> JumpResult:
        """
        Re-center the window on a heading (TOC navigation).

        A heading past the end lands on the last heading; a document without
        headings lands at its start.
        """
        window = self._require_window()

        if not self.headings:
            return self._jump(window, 0, None)

        heading_index = max(0, min(heading_index, len(self.headings) - 1))
        offset = self.headings[heading_index].character_offset
        return self._jump(window, offset, heading_index)

    def jump_to_offset(self, offset: int) -> JumpResult:
        """Re-center the window on an absolute character offset."""
        window = self._require_window()
        offset = max(0, min(offset, len(self.content)))
        return self._jump(window, offset, offset_to_nearest_heading(offset, self.headings))

    # ── Persistence ────────────────────────────────────────────────────────

    async def save_position(self) -> None:
        """Persist the current position (failures are logged by the store)."""
        offset = self.state.current_offset
        heading = self.state.current_heading
        await self.positions.save(
            self.document.id,
            heading_index=heading,
            legacy_offset=offset,
            segment_index=segment_for_offset(offset, self.segments),
        )
        # A move during the write leaves the newer position pending
        if (self.state.current_offset, self.state.current_heading) == (offset, heading):
            self.state.dirty = False
        self.state.saves_written += 1

    # ── Internals ──────────────────────────────────────────────────────────

    async def _load_headings(self, content: str) -> list[Heading]:
        if self.toc_cache is not None:
            cached = await self.toc_cache.get(self.document.id, content)
            if cached is not None:
                return cached

        headings = extract_headings(content)
        if self.toc_cache is not None:
            await self.toc_cache.put(self.document.id, content, headings)
        return headings

    def _jump(self, window: WindowManager, offset: int, heading: Optional[int]) -> JumpResult:
        target = segment_for_offset(offset, self.segments)
        previous = window.window
        text = window.jump_to(target)
        self.state.move_to(offset, heading)

        return JumpResult(
            content=text,
            window=window.window,
            heading_index=heading,
            scroll_fraction=jump_scroll_fraction(
                previous,
                target,
                backward=self.config.jump_backward_fraction,
                forward=self.config.jump_forward_fraction,
            ),
        )

    def _require_window(self) -> WindowManager:
        if self.window is None or self.state.stage is not SessionStage.READY:
            raise RuntimeError(f"Session for {self.document.id} is not open")
        return self.window

    def _fail(self, message: str) -> None:
        self.state.add_error(message)
        self.state.advance_to(SessionStage.ERROR)

    def _start_autosave(self) -> None:
        if self.config.autosave_interval_ms <= 0:
            return
        self._autosave_stop = asyncio.Event()
        self._autosave_task = asyncio.create_task(self._autosave_loop(self._autosave_stop))

    async def _stop_autosave(self) -> None:
        """Stop the autosave loop, letting an in-flight save finish first."""
        task, self._autosave_task = self._autosave_task, None
        if task is None:
            return
        self._autosave_stop.set()
        await task

    async def _autosave_loop(self, stop: asyncio.Event) -> None:
        interval = self.config.autosave_interval_ms / 1000
        while True:
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
                return
            except asyncio.TimeoutError:
                pass
            if self.state.dirty:
                await self.save_position()
