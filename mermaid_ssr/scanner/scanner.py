"""Finds fenced diagram blocks and their exact spans."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from mermaid_ssr.scanner.events import iter_code_block_events
from mermaid_ssr.scanner.models import CodeBlockEvent, DiagramBlock, EventKind, Span

logger = logging.getLogger(__name__)

DIAGRAM_KEYWORD = "mermaid"


@dataclass(frozen=True)
class Outside:
    pass


@dataclass(frozen=True)
class Inside:
    open_span: Span
    # Union of payload spans seen so far; None until the first one.
    content: Span | None = None


ScanState = Outside | Inside

OUTSIDE = Outside()


def step(
    state: ScanState, event: CodeBlockEvent, keyword: str = DIAGRAM_KEYWORD
) -> tuple[ScanState, DiagramBlock | None]:
    """Advance the scan by one event; returns the new state and any finished block."""
    if isinstance(state, Outside):
        if (
            event.kind is EventKind.start
            and event.fenced
            and event.info is not None
            and event.info.strip() == keyword
        ):
            return Inside(open_span=event.span), None
        return state, None

    if event.kind is EventKind.text:
        content = event.span if state.content is None else state.content.union(event.span)
        return Inside(open_span=state.open_span, content=content), None

    if event.kind is EventKind.end:
        content = state.content
        if content is None:
            # Empty payload; anchor it at the opening fence.
            content = Span(state.open_span.start, state.open_span.start)
        return OUTSIDE, DiagramBlock(content_span=content, enclosing_span=event.span)

    return state, None


def scan_events(
    events: Iterable[CodeBlockEvent], keyword: str = DIAGRAM_KEYWORD
) -> list[DiagramBlock]:
    state: ScanState = OUTSIDE
    blocks: list[DiagramBlock] = []
    for event in events:
        state, block = step(state, event, keyword)
        if block is not None:
            blocks.append(block)
    return blocks


def scan(text: str, keyword: str = DIAGRAM_KEYWORD) -> list[DiagramBlock]:
    """Diagram blocks in ``text``, in document order and pairwise disjoint."""
    blocks = scan_events(iter_code_block_events(text), keyword)
    logger.debug("found %d %s block(s)", len(blocks), keyword)
    return blocks
