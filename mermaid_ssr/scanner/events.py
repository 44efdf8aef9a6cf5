"""Code block event stream over a Markdown document.

Parsing uses markdown-it-py with the extension set the page renderer
enables (tables, strikethrough, footnotes, task lists); with a different
set, fences inside tables or footnotes would be found where the published
page has none, or missed where it has them.

markdown-it normalizes ``\\r\\n`` and ``\\r`` to ``\\n`` before parsing but
keeps one line per line break, so token line maps index the original text
once line offsets are computed on it directly.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from mermaid_ssr.scanner.models import CodeBlockEvent, EventKind, Span

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_CODE_BLOCK_TYPES = frozenset({"fence", "code_block"})


@lru_cache(maxsize=1)
def markdown_parser() -> MarkdownIt:
    """CommonMark plus tables, strikethrough, footnotes and task lists."""
    return (
        MarkdownIt("commonmark")
        .enable(["table", "strikethrough"])
        .use(footnote_plugin)
        .use(tasklists_plugin)
    )


class _LineIndex:
    """Maps line numbers to offsets in the original text."""

    def __init__(self, text: str) -> None:
        self._length = len(text)
        self._starts = [0]
        self._starts.extend(m.end() for m in _LINE_BREAK_RE.finditer(text))

    def start(self, line: int) -> int:
        if line < len(self._starts):
            return self._starts[line]
        return self._length


def _content_line_count(content: str) -> int:
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


def _prefix_width(line: str, limit: int) -> int:
    """Length of the container prefix (spaces, tabs, ``>``) at the start of ``line``, capped at ``limit``."""
    width = 0
    while width < limit and width < len(line) and line[width] in " \t>":
        width += 1
    return width


def _block_events(token: Token, text: str, lines: _LineIndex) -> Iterator[CodeBlockEvent]:
    first, after = token.map  # type: ignore[misc]
    enclosing_end = lines.start(after)

    if token.type == "fence":
        opening = text[lines.start(first):lines.start(first + 1)]
        marker = max(opening.find(token.markup), 0)
        start = lines.start(first) + marker
        # Lines after the opening fence are payload, plus the closing fence
        # when one was found.
        payload_first = first + 1
        payload_count = _content_line_count(token.content)
        info: str | None = token.info
        fenced = True
    else:
        start = lines.start(first)
        marker = 0
        payload_first = first
        payload_count = after - first
        info = None
        fenced = False

    enclosing = Span(start, enclosing_end)
    yield CodeBlockEvent(EventKind.start, enclosing, fenced=fenced, info=info)
    for line in range(payload_first, payload_first + payload_count):
        line_start = lines.start(line)
        line_end = lines.start(line + 1)
        if line == payload_first:
            # The first payload line starts at the fence column, past any
            # list indent or blockquote marker.
            line_start += _prefix_width(text[line_start:line_end], marker)
        yield CodeBlockEvent(EventKind.text, Span(line_start, line_end), fenced=fenced)
    yield CodeBlockEvent(EventKind.end, enclosing, fenced=fenced, info=info)


def iter_code_block_events(text: str, md: MarkdownIt | None = None) -> Iterator[CodeBlockEvent]:
    """Yield start/text/end events for every code block, in document order."""
    parser = md or markdown_parser()
    tokens = [
        t for t in parser.parse(text) if t.type in _CODE_BLOCK_TYPES and t.map is not None
    ]
    # Footnote bodies are moved to the end of the token stream.
    tokens.sort(key=lambda t: t.map[0])  # type: ignore[index]

    lines = _LineIndex(text)
    for token in tokens:
        yield from _block_events(token, text, lines)
