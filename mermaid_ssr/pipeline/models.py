"""Pipeline states, chapter records, and the promoted render error."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from mermaid_ssr.renderer.models import RenderError

_SOURCE_PREVIEW_CHARS = 500


class PipelineState(str, Enum):
    """Where a pipeline is in processing its current document."""

    idle = "idle"
    scanning = "scanning"
    rendering = "rendering"
    composing = "composing"
    done = "done"
    failed = "failed"


class Chapter(BaseModel):
    """One unit of host text: an id for messages and its Markdown content."""

    model_config = ConfigDict(frozen=True)

    chapter_id: str
    content: str


class DiagramRenderError(Exception):
    """A render failure promoted to a build failure by the ``fail`` policy."""

    def __init__(self, cause: RenderError, source: str, chapter_id: str | None = None) -> None:
        self.chapter_id = chapter_id
        self.source = source
        where = f" in chapter {chapter_id!r}" if chapter_id else ""
        preview = source
        if len(preview) > _SOURCE_PREVIEW_CHARS:
            preview = preview[:_SOURCE_PREVIEW_CHARS] + "..."
        super().__init__(f"Failed to render mermaid diagram{where}: {cause}\n{preview}")
        self.__cause__ = cause

    @property
    def cause(self) -> RenderError:
        return self.__cause__  # type: ignore[return-value]
