"""Diagram block scanning over Markdown text."""

from mermaid_ssr.scanner.events import iter_code_block_events, markdown_parser
from mermaid_ssr.scanner.models import CodeBlockEvent, DiagramBlock, EventKind, Span
from mermaid_ssr.scanner.scanner import DIAGRAM_KEYWORD, scan, scan_events

__all__ = [
    "CodeBlockEvent",
    "DIAGRAM_KEYWORD",
    "DiagramBlock",
    "EventKind",
    "Span",
    "iter_code_block_events",
    "markdown_parser",
    "scan",
    "scan_events",
]
