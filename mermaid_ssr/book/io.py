"""Host exchange: the ``[context, book]`` JSON a book builder sends on stdin."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from mermaid_ssr.pipeline.models import Chapter
from mermaid_ssr.pipeline.orchestrator import DiagramPipeline

logger = logging.getLogger(__name__)

PREPROCESSOR_NAME = "mermaid-ssr"

# Older hosts list top-level items under "sections", newer ones under "items".
_ITEM_KEYS = ("items", "sections")


def parse_preprocessor_input(raw: str | bytes) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split the host payload into (context, book)."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid preprocessor input: {e}") from e
    if (
        not isinstance(data, list)
        or len(data) != 2
        or not isinstance(data[0], dict)
        or not isinstance(data[1], dict)
    ):
        raise ValueError("Invalid preprocessor input: expected a [context, book] array")
    return data[0], data[1]


def preprocessor_config(
    context: Mapping[str, Any], name: str = PREPROCESSOR_NAME
) -> Mapping[str, Any]:
    """The ``[preprocessor.<name>]`` table from the host context, or ``{}``."""
    table = context.get("config", {}).get("preprocessor", {}).get(name)
    if table is None:
        logger.debug("No configuration found for %s. Using defaults.", name)
        return {}
    if not isinstance(table, Mapping):
        raise ValueError(f"Invalid [preprocessor.{name}] table: expected a mapping")
    return table


def _top_level_items(book: Mapping[str, Any]) -> list[Any]:
    for key in _ITEM_KEYS:
        items = book.get(key)
        if isinstance(items, list):
            return items
    return []


def _walk(items: list[Any]) -> Iterator[dict[str, Any]]:
    for item in items:
        # Separators are bare strings; part titles have no "Chapter" key.
        if not isinstance(item, dict):
            continue
        chapter = item.get("Chapter")
        if not isinstance(chapter, dict):
            continue
        yield chapter
        yield from _walk(chapter.get("sub_items") or [])


def iter_chapters(book: Mapping[str, Any]) -> Iterator[dict[str, Any]]:
    """Chapter dicts in reading order, depth first, skipping drafts."""
    for chapter in _walk(_top_level_items(book)):
        if isinstance(chapter.get("content"), str) and chapter.get("path") is not None:
            yield chapter


def _chapter_id(chapter: Mapping[str, Any]) -> str:
    return str(chapter.get("path") or chapter.get("name") or "<unnamed>")


def run_book(book: dict[str, Any], pipeline: DiagramPipeline) -> dict[str, Any]:
    """Render every chapter of ``book`` in place and return it.

    Chapter contents are only replaced once the whole batch has succeeded,
    so a failure leaves the book untouched.
    """
    raw_chapters = list(iter_chapters(book))
    chapters = [Chapter(chapter_id=_chapter_id(c), content=c["content"]) for c in raw_chapters]
    logger.info("Rendering mermaid diagrams with SSR (%d chapters)", len(chapters))

    processed = pipeline.process_chapters(chapters)
    for raw, chapter in zip(raw_chapters, processed):
        raw["content"] = chapter.content
    return book
