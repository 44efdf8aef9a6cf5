"""Spans, code block events, and diagram blocks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Span:
    """Half-open range ``[start, end)`` into a document's original text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end:
            raise ValueError(f"invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        if self.end > len(text):
            raise ValueError(f"span [{self.start}, {self.end}) exceeds text length {len(text)}")
        return text[self.start:self.end]

    def union(self, other: Span) -> Span:
        """Smallest span covering both, gaps included."""
        return Span(min(self.start, other.start), max(self.end, other.end))


class EventKind(str, Enum):
    start = "start"
    text = "text"
    end = "end"


@dataclass(frozen=True)
class CodeBlockEvent:
    """One step of the code block event stream.

    ``start`` and ``end`` carry the enclosing span of the block; ``text``
    carries one payload line, terminator included.
    """

    kind: EventKind
    span: Span
    fenced: bool = True
    info: str | None = None


@dataclass(frozen=True)
class DiagramBlock:
    """A fenced diagram block found by one scan of one document."""

    # Payload only.
    content_span: Span
    # Fences, info string and payload.
    enclosing_span: Span

    def source(self, text: str) -> str:
        return self.content_span.slice(text)
