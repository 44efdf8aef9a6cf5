"""Book builder integration."""

from mermaid_ssr.book.io import (
    PREPROCESSOR_NAME,
    iter_chapters,
    parse_preprocessor_input,
    preprocessor_config,
    run_book,
)

SUPPORTED_RENDERERS = frozenset({"html"})

__all__ = [
    "PREPROCESSOR_NAME",
    "SUPPORTED_RENDERERS",
    "iter_chapters",
    "parse_preprocessor_input",
    "preprocessor_config",
    "run_book",
]
