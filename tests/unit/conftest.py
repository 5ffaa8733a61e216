"""
Shared fixtures for unit tests.
"""

import pytest


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_document(sections: int = 10, body_chars: int = 3000) -> str:
    """Build a markdown document with `sections` level-2 headings."""
    parts = ["# Title\n\nIntro paragraph.\n"]
    line = "x" * 79 + "\n"
    for i in range(sections):
        parts.append(f"\n## Section {i}\n\n")
        parts.append(line * (body_chars // len(line)))
    return "".join(parts)


@pytest.fixture
def build_document():
    """Factory for synthetic markdown documents."""
    return make_document


@pytest.fixture
def document_text() -> str:
    return make_document()
