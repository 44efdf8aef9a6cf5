"""Splices replacements into a document at precomputed spans."""

from __future__ import annotations

from collections.abc import Sequence

from mermaid_ssr.scanner.models import Span


def _check(text: str, replacements: Sequence[tuple[Span, str]]) -> None:
    prev_end = 0
    for span, _ in replacements:
        if span.end > len(text):
            raise ValueError(f"span [{span.start}, {span.end}) exceeds text length {len(text)}")
        if span.start < prev_end:
            raise ValueError(
                f"span [{span.start}, {span.end}) overlaps or precedes an earlier span"
            )
        prev_end = span.end


def compose(text: str, replacements: Sequence[tuple[Span, str]]) -> str:
    """Replace each span of ``text`` with ``"\\n" + replacement``.

    ``replacements`` must be sorted by start and pairwise disjoint, all
    computed against ``text`` itself. Every character outside the spans is
    carried over unchanged. The leading newline makes each replacement
    start a new block-level element.
    """
    _check(text, replacements)

    pieces: list[str] = []
    tail_start = len(text)
    # Back to front, so lower spans are never shifted by an earlier edit.
    for span, replacement in reversed(replacements):
        pieces.append(text[span.end:tail_start])
        pieces.append(replacement)
        pieces.append("\n")
        tail_start = span.start
    pieces.append(text[:tail_start])
    return "".join(reversed(pieces))
