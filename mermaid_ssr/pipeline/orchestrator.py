"""DiagramPipeline: scan, render and compose, one document at a time."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mermaid_ssr.compositor import compose
from mermaid_ssr.config.models import Config, ErrorHandling
from mermaid_ssr.pipeline.annotation import comment_annotation
from mermaid_ssr.pipeline.models import Chapter, DiagramRenderError, PipelineState
from mermaid_ssr.renderer.models import Failed
from mermaid_ssr.renderer.renderer import DiagramRenderer
from mermaid_ssr.scanner.models import Span
from mermaid_ssr.scanner.scanner import scan

logger = logging.getLogger(__name__)


class DiagramPipeline:
    """Replaces every diagram block of a document with its rendered artifact.

    Documents are processed strictly one after another against a single
    renderer. Under the ``fail`` policy the first failing block aborts the
    document (and any remaining chapters); under ``comment`` it is replaced
    by an inline admonition and processing continues.
    """

    def __init__(self, renderer: DiagramRenderer, config: Config) -> None:
        self.renderer = renderer
        self.config = config
        self.state = PipelineState.idle

    def process_document(self, text: str, chapter_id: str | None = None) -> str:
        """Return ``text`` with every diagram block substituted.

        Raises DiagramRenderError under the ``fail`` policy.
        """
        self.state = PipelineState.scanning
        blocks = scan(text)
        if not blocks:
            self.state = PipelineState.done
            return text

        self.state = PipelineState.rendering
        replacements: list[tuple[Span, str]] = []
        for block in blocks:
            source = block.source(text)
            outcome = self.renderer.try_render(source)
            if not isinstance(outcome, Failed):
                logger.info("rendered mermaid diagram %s", _where(chapter_id, block.enclosing_span))
                replacements.append((block.enclosing_span, f"{outcome.artifact}\n\n"))
                continue

            logger.error(
                "Failed to render mermaid diagram %s: %s. Content: %s",
                _where(chapter_id, block.enclosing_span),
                outcome.cause,
                source,
            )
            if self.config.on_error is ErrorHandling.fail:
                self.state = PipelineState.failed
                raise DiagramRenderError(outcome.cause, source, chapter_id)
            replacements.append(
                (block.enclosing_span, f"{comment_annotation(outcome.cause, source)}\n\n")
            )

        self.state = PipelineState.composing
        result = compose(text, replacements)
        self.state = PipelineState.done
        return result

    def process_chapters(self, chapters: Iterable[Chapter]) -> list[Chapter]:
        """Process chapters in order; the first failure stops the batch."""
        processed: list[Chapter] = []
        for chapter in chapters:
            content = self.process_document(chapter.content, chapter.chapter_id)
            processed.append(chapter.model_copy(update={"content": content}))
        return processed


def _where(chapter_id: str | None, span: Span) -> str:
    if chapter_id:
        return f"in {chapter_id} at offset {span.start}"
    return f"at offset {span.start}"
