"""Inline admonition written in place of a diagram that failed to render."""

from __future__ import annotations

import re

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _quote_lines(text: str) -> str:
    """Join the lines of ``text`` with ``"\\n> "`` so each continues the quote."""
    lines = _LINE_BREAK_RE.split(text)
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return "\n> ".join(lines)


def neutralize_fences(source: str) -> str:
    """Break up triple-backtick runs so they cannot close the enclosing fence."""
    return source.replace("```", "``\\`")


def comment_annotation(cause: Exception | str, source: str) -> str:
    """Block-quoted ``[!IMPORTANT]`` admonition naming the cause and echoing the source."""
    cause_text = _quote_lines(neutralize_fences(str(cause)))
    source_text = _quote_lines(neutralize_fences(source))
    return f"""> [!IMPORTANT]
> **Mermaid diagram rendering failed during SSR because:**
> ```raw
> {cause_text}
> ```
>
> This is the diagram code that caused the error:
> ```raw
> {source_text}
> ```
>
> To fix this issue, please follow these steps:
> - Check your Mermaid code for any syntax errors by pasting it into the [Mermaid Playground](https://mermaid.live/).
> - Look at the log output of the build for more details
>
> <sub><sub>You are seeing this message because the setting `on-error` is `comment` and not `fail`.</sub></sub>"""
