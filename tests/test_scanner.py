"""Tests for the diagram block scanner."""

import pytest

from mermaid_ssr.scanner import (
    CodeBlockEvent,
    DiagramBlock,
    EventKind,
    Span,
    iter_code_block_events,
    scan,
    scan_events,
)
from mermaid_ssr.scanner.scanner import OUTSIDE, Inside, step


def sources(text):
    return [block.source(text) for block in scan(text)]


# ── Span ───────────────────────────────────────────────────────────


class TestSpan:
    def test_len(self):
        assert len(Span(3, 10)) == 7

    def test_empty_span(self):
        assert len(Span(4, 4)) == 0

    @pytest.mark.parametrize("start, end", [(-1, 2), (5, 4)])
    def test_invalid_bounds(self, start, end):
        with pytest.raises(ValueError):
            Span(start, end)

    def test_slice(self):
        assert Span(1, 4).slice("abcdef") == "bcd"

    def test_slice_past_end_raises(self):
        with pytest.raises(ValueError):
            Span(2, 9).slice("abc")

    def test_union_covers_gap(self):
        assert Span(2, 4).union(Span(8, 10)) == Span(2, 10)


# ── Event stream ───────────────────────────────────────────────────


class TestCodeBlockEvents:
    def test_fenced_block(self, chapter_text):
        events = list(iter_code_block_events(chapter_text))
        assert [e.kind for e in events] == [
            EventKind.start,
            EventKind.text,
            EventKind.text,
            EventKind.end,
        ]
        assert events[0].info == "mermaid"
        assert events[0].fenced
        assert events[1].span.slice(chapter_text) == "graph TD\n"
        assert events[2].span.slice(chapter_text) == "A --> B\n"

    def test_first_payload_line_starts_at_fence_column(self):
        text = "- item\n\n  ```mermaid\n  graph TD\n  A --> B\n  ```\n"
        events = list(iter_code_block_events(text))
        assert events[0].span.start == text.index("```")
        assert events[1].span.slice(text) == "graph TD\n"
        assert events[2].span.slice(text) == "  A --> B\n"

    def test_indented_block_is_not_fenced(self):
        text = "Para\n\n    indented code\n"
        events = list(iter_code_block_events(text))
        assert events[0].kind is EventKind.start
        assert not events[0].fenced
        assert events[0].info is None

    def test_no_code_blocks(self):
        assert list(iter_code_block_events("# Title\n\nJust text.\n")) == []


# ── Scanner state machine ──────────────────────────────────────────


class TestStep:
    def test_enters_on_matching_fence(self):
        event = CodeBlockEvent(EventKind.start, Span(0, 20), info="mermaid")
        state, block = step(OUTSIDE, event)
        assert state == Inside(open_span=Span(0, 20))
        assert block is None

    def test_ignores_other_languages(self):
        event = CodeBlockEvent(EventKind.start, Span(0, 20), info="python")
        assert step(OUTSIDE, event) == (OUTSIDE, None)

    def test_ignores_indented_blocks(self):
        event = CodeBlockEvent(EventKind.start, Span(0, 20), fenced=False)
        assert step(OUTSIDE, event) == (OUTSIDE, None)

    def test_text_outside_is_ignored(self):
        event = CodeBlockEvent(EventKind.text, Span(3, 5))
        assert step(OUTSIDE, event) == (OUTSIDE, None)

    def test_text_extends_content(self):
        state = Inside(open_span=Span(0, 30), content=Span(11, 15))
        state, _ = step(state, CodeBlockEvent(EventKind.text, Span(15, 22)))
        assert state.content == Span(11, 22)

    def test_end_emits_block(self):
        state = Inside(open_span=Span(0, 30), content=Span(11, 22))
        state, block = step(state, CodeBlockEvent(EventKind.end, Span(0, 30), info="mermaid"))
        assert state == OUTSIDE
        assert block == DiagramBlock(content_span=Span(11, 22), enclosing_span=Span(0, 30))

    def test_end_without_text_gives_empty_content(self):
        state = Inside(open_span=Span(7, 22))
        _, block = step(state, CodeBlockEvent(EventKind.end, Span(7, 22)))
        assert block.content_span == Span(7, 7)

    def test_custom_keyword(self):
        events = [
            CodeBlockEvent(EventKind.start, Span(0, 10), info="dot"),
            CodeBlockEvent(EventKind.text, Span(7, 9)),
            CodeBlockEvent(EventKind.end, Span(0, 10), info="dot"),
        ]
        assert scan_events(events, keyword="dot") == [
            DiagramBlock(content_span=Span(7, 9), enclosing_span=Span(0, 10))
        ]
        assert scan_events(events) == []


# ── scan ───────────────────────────────────────────────────────────


class TestScan:
    def test_single_block_spans(self, chapter_text):
        blocks = scan(chapter_text)
        assert blocks == [DiagramBlock(content_span=Span(16, 33), enclosing_span=Span(5, 37))]
        assert blocks[0].source(chapter_text) == "graph TD\nA --> B\n"
        assert blocks[0].enclosing_span.slice(chapter_text) == (
            "```mermaid\ngraph TD\nA --> B\n```\n"
        )

    def test_no_blocks(self):
        assert scan("# Title\n\n```python\nprint(1)\n```\n") == []

    def test_multiple_blocks_in_order(self):
        text = (
            "```mermaid\ngraph TD\n```\n\n"
            "```rust\nfn main() {}\n```\n\n"
            "```mermaid\nsequenceDiagram\n```\n"
        )
        blocks = scan(text)
        assert [b.source(text) for b in blocks] == ["graph TD\n", "sequenceDiagram\n"]
        assert blocks[0].enclosing_span.end <= blocks[1].enclosing_span.start

    def test_info_string_must_match_exactly(self):
        text = (
            "```mermaid theme=dark\ngraph A\n```\n\n"
            "```Mermaid\ngraph B\n```\n\n"
            "```mermaidjs\ngraph C\n```\n"
        )
        assert scan(text) == []

    def test_info_string_surrounding_whitespace_ignored(self):
        assert sources("```   mermaid  \ngraph TD\n```\n") == ["graph TD\n"]

    def test_tilde_fence(self):
        assert sources("~~~mermaid\ngraph TD\n~~~\n") == ["graph TD\n"]

    def test_longer_fence_contains_backticks(self):
        text = "````mermaid\ngraph TD\n```\n````\n"
        assert sources(text) == ["graph TD\n```\n"]

    def test_empty_block(self):
        text = "```mermaid\n```\n"
        blocks = scan(text)
        assert blocks == [DiagramBlock(content_span=Span(0, 0), enclosing_span=Span(0, len(text)))]
        assert blocks[0].source(text) == ""

    def test_unclosed_fence_runs_to_end_of_document(self):
        text = "Intro\n\n```mermaid\ngraph TD\nA --> B\n"
        blocks = scan(text)
        assert len(blocks) == 1
        assert blocks[0].source(text) == "graph TD\nA --> B\n"
        assert blocks[0].enclosing_span.end == len(text)

    def test_indented_code_block_is_ignored(self):
        assert scan("Para\n\n    ```mermaid\n    graph TD\n    ```\n") == []

    def test_fence_inside_html_block_is_ignored(self):
        assert scan("<div>\n```mermaid\ngraph TD\n```\n</div>\n") == []

    def test_crlf_line_endings(self):
        text = "```mermaid\r\ngraph TD\r\n```\r\n"
        blocks = scan(text)
        assert blocks == [DiagramBlock(content_span=Span(12, 22), enclosing_span=Span(0, 27))]
        assert blocks[0].source(text) == "graph TD\r\n"

    def test_multibyte_text_before_block(self):
        text = "Ünïcödé 漢字 🎉\n\n```mermaid\ngraph TD\n```\n\nmehr 🎉\n"
        blocks = scan(text)
        assert blocks[0].source(text) == "graph TD\n"
        assert blocks[0].enclosing_span.slice(text) == "```mermaid\ngraph TD\n```\n"

    def test_block_after_table(self):
        text = "| a | b |\n|---|---|\n| `x` | y |\n\n```mermaid\ngraph TD\n```\n"
        assert sources(text) == ["graph TD\n"]

    def test_block_inside_list_item(self):
        text = "- item\n\n  ```mermaid\n  graph TD\n  ```\n"
        blocks = scan(text)
        assert len(blocks) == 1
        # The opening fence starts at the marker, after the list indent.
        assert blocks[0].enclosing_span.start == text.index("```")
        assert blocks[0].content_span.start == text.index("graph")
        assert blocks[0].source(text) == "graph TD\n"

    def test_block_inside_blockquote(self):
        text = "> ```mermaid\n> graph TD\n> A --> B\n> ```\n"
        blocks = scan(text)
        assert len(blocks) == 1
        assert blocks[0].content_span.start == text.index("graph")
        # Only the first payload line drops its quote marker; later lines
        # are whole lines of the document.
        assert blocks[0].source(text) == "graph TD\n> A --> B\n"

    def test_block_inside_footnote_keeps_document_order(self):
        text = (
            "Text[^1]\n\n"
            "[^1]: Note\n\n"
            "    ```mermaid\n"
            "    graph TD\n"
            "    ```\n\n"
            "After\n\n"
            "```mermaid\ngraph LR\n```\n"
        )
        blocks = scan(text)
        assert len(blocks) == 2
        assert blocks[0].enclosing_span.end <= blocks[1].enclosing_span.start
        assert blocks[0].source(text).strip() == "graph TD"
        assert blocks[1].source(text) == "graph LR\n"

    def test_blocks_are_disjoint_and_inside_text(self):
        text = "\n\n".join(f"```mermaid\ngraph {i}\n```" for i in range(5)) + "\n"
        blocks = scan(text)
        assert len(blocks) == 5
        prev_end = 0
        for block in blocks:
            assert prev_end <= block.enclosing_span.start
            assert block.enclosing_span.start <= block.content_span.start
            assert block.content_span.end <= block.enclosing_span.end <= len(text)
            prev_end = block.enclosing_span.end
