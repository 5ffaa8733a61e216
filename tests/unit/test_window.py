"""
Tests for the segment window manager.
"""

import pytest

from mdreader.chunking.chunker import Segment
from mdreader.pagination.window import (
    ExtendStatus,
    LoadedWindow,
    WindowManager,
    WindowState,
    jump_scroll_fraction,
)

CONTENT = "".join(str(i) * 10 for i in range(10))
SEGMENTS = [Segment(index=i, start_offset=i * 10, end_offset=(i + 1) * 10) for i in range(10)]


def create_manager(clock, **kwargs) -> WindowManager:
    """Helper to create a 10-segment window manager."""
    return WindowManager(CONTENT, SEGMENTS, clock=clock, **kwargs)


class TestLoadedWindow:
    """Tests for LoadedWindow."""

    def test_valid_window(self):
        window = LoadedWindow(2, 4, 10)
        assert window.size == 3
        assert window.contains(3)
        assert not window.contains(5)

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            LoadedWindow(5, 4, 10)
        with pytest.raises(ValueError):
            LoadedWindow(0, 10, 10)


class TestInitialLoad:
    """Tests for load_initial."""

    def test_uninitialized(self, clock):
        manager = create_manager(clock)

        assert manager.state is WindowState.UNINITIALIZED
        assert manager.window is None
        assert manager.extend_forward().status is ExtendStatus.NOT_READY
        assert manager.extend_backward().status is ExtendStatus.NOT_READY

    def test_load_initial_window(self, clock):
        """Test loadInitial(5) on 10 segments loads [5, 7]."""
        manager = create_manager(clock)
        text = manager.load_initial(5)

        assert manager.state is WindowState.READY
        assert manager.window == LoadedWindow(5, 7, 10)
        assert text == "5" * 10 + "6" * 10 + "7" * 10

    def test_load_initial_clamps(self, clock):
        manager = create_manager(clock)

        manager.load_initial(42)
        assert manager.window == LoadedWindow(9, 9, 10)

        manager.load_initial(-3)
        assert manager.window == LoadedWindow(0, 2, 10)

    def test_window_size_override(self, clock):
        manager = create_manager(clock)
        manager.load_initial(0, window_size=5)

        assert manager.window == LoadedWindow(0, 4, 10)

    def test_single_segment_document(self, clock):
        manager = WindowManager("", [Segment(0, 0, 0)], clock=clock)

        assert manager.load_initial(3) == ""
        assert manager.window == LoadedWindow(0, 0, 1)
        assert manager.extend_forward().status is ExtendStatus.AT_BOUNDARY


class TestExtend:
    """Tests for extend_forward / extend_backward."""

    def test_extend_forward(self, clock):
        manager = create_manager(clock)
        manager.load_initial(0)

        result = manager.extend_forward()

        assert result.loaded
        assert result.segment_index == 3
        assert result.content == "3" * 10
        assert manager.window == LoadedWindow(0, 3, 10)

    def test_extend_backward(self, clock):
        manager = create_manager(clock)
        manager.load_initial(5)

        result = manager.extend_backward()

        assert result.loaded
        assert result.segment_index == 4
        assert manager.window == LoadedWindow(4, 7, 10)

    def test_debounce(self, clock):
        """Test two extends within the debounce interval advance once."""
        manager = create_manager(clock)
        manager.load_initial(0)

        first = manager.extend_forward()
        clock.advance_ms(1000)
        before = manager.window
        second = manager.extend_forward()

        assert first.loaded
        assert second.status is ExtendStatus.THROTTLED
        assert second.window == before
        assert manager.window == LoadedWindow(0, 3, 10)

    def test_debounce_applies_across_directions(self, clock):
        manager = create_manager(clock)
        manager.load_initial(5)

        assert manager.extend_forward().loaded
        clock.advance_ms(1500)
        assert manager.extend_backward().status is ExtendStatus.THROTTLED

    def test_extend_after_interval(self, clock):
        manager = create_manager(clock)
        manager.load_initial(0)

        manager.extend_forward()
        clock.advance_ms(2000)
        result = manager.extend_forward()

        assert result.loaded
        assert manager.window == LoadedWindow(0, 4, 10)

    def test_cooldown_reports_busy(self, clock):
        """Test the in-flight flag after a load, independent of debounce."""
        manager = create_manager(clock, debounce_ms=0, cooldown_ms=500)
        manager.load_initial(0)

        assert manager.extend_forward().loaded
        assert manager.is_loading
        clock.advance_ms(100)
        assert manager.extend_forward().status is ExtendStatus.BUSY

        clock.advance_ms(500)
        assert not manager.is_loading
        assert manager.extend_forward().loaded

    def test_boundaries(self, clock):
        """Test document edges are no-ops, not errors."""
        manager = create_manager(clock)

        manager.load_initial(0)
        result = manager.extend_backward()
        assert result.status is ExtendStatus.AT_BOUNDARY
        assert result.window == LoadedWindow(0, 2, 10)

        manager.load_initial(7)
        result = manager.extend_forward()
        assert result.status is ExtendStatus.AT_BOUNDARY
        assert not result.loaded
        assert result.content == ""

    def test_noop_does_not_reset_debounce(self, clock):
        manager = create_manager(clock)
        manager.load_initial(0)

        manager.extend_forward()
        clock.advance_ms(1500)
        manager.extend_forward()  # throttled
        clock.advance_ms(500)

        assert manager.extend_forward().loaded


class TestJump:
    """Tests for jump_to."""

    def test_jump_to_last_segment(self, clock):
        """Test jumpTo(9) on 10 segments is clamped to [9, 9]."""
        manager = create_manager(clock)
        manager.load_initial(0)

        text = manager.jump_to(9)

        assert manager.window == LoadedWindow(9, 9, 10)
        assert text == "9" * 10

    def test_jump_bypasses_debounce(self, clock):
        """Test a jump during the cooldown still executes."""
        manager = create_manager(clock)
        manager.load_initial(0)
        manager.extend_forward()

        manager.jump_to(4)

        assert manager.window == LoadedWindow(4, 6, 10)
        # Extends remain throttled by the earlier load
        assert manager.extend_forward().status in (ExtendStatus.BUSY, ExtendStatus.THROTTLED)

    def test_jump_idempotent_with_load_initial(self, clock):
        manager = create_manager(clock)
        manager.load_initial(5)
        after_load = manager.window

        manager.jump_to(5)

        assert manager.window == after_load

    def test_jump_clamps_negative(self, clock):
        manager = create_manager(clock)
        manager.load_initial(5)
        manager.jump_to(-2)

        assert manager.window == LoadedWindow(0, 2, 10)


class TestWindowQueries:
    """Tests for window queries and notifications."""

    def test_offsets_and_text(self, clock):
        manager = create_manager(clock)
        manager.load_initial(2)

        assert manager.window_start_offset == 20
        assert manager.window_end_offset == 50
        assert manager.window_text() == CONTENT[20:50]
        assert manager.is_loaded(4)
        assert not manager.is_loaded(5)
        assert manager.segment_text(99) == "9" * 10

    def test_listeners(self, clock):
        """Test listeners receive only actual window changes."""
        manager = create_manager(clock)
        seen: list[LoadedWindow] = []
        unsubscribe = manager.subscribe(seen.append)

        manager.load_initial(0)
        manager.jump_to(0)  # unchanged
        manager.extend_forward()
        unsubscribe()
        manager.jump_to(5)

        assert seen == [LoadedWindow(0, 2, 10), LoadedWindow(0, 3, 10)]

    def test_rejects_empty_segments(self, clock):
        with pytest.raises(ValueError):
            WindowManager("", [], clock=clock)


class TestJumpScrollFraction:
    def test_directions(self):
        previous = LoadedWindow(4, 6, 10)

        assert jump_scroll_fraction(previous, 1) == 0.28
        assert jump_scroll_fraction(previous, 8) == 0.52
        assert jump_scroll_fraction(None, 0) == 0.52
