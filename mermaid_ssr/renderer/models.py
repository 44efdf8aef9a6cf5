"""Render requests, outcomes, and render-level errors."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class RenderRequest(BaseModel):
    """One diagram submitted to the engine."""

    model_config = ConfigDict(frozen=True)

    # Engine-side element id; also used in log lines. Not a cache key.
    identifier: str = Field(min_length=1)
    diagram_source: str


class RenderError(Exception):
    """A single diagram could not be turned into an artifact."""

    reason = "render failed"

    def __init__(self, identifier: str, detail: str | None = None) -> None:
        self.identifier = identifier
        self.detail = detail
        message = f"{self.reason}: {detail}" if detail else self.reason
        super().__init__(message)


class EngineReturnedNull(RenderError):
    reason = "Failed to compile Mermaid diagram: render returned null"


class EmptyArtifact(RenderError):
    reason = "Failed to compile Mermaid diagram: empty result"


class UnexpectedValueShape(RenderError):
    reason = "Unexpected return type from render"


class ChannelFailure(RenderError):
    """The engine round trip itself failed; ``__cause__`` is the EngineError."""

    reason = "Render engine failure"


@dataclass(frozen=True)
class Rendered:
    artifact: str


@dataclass(frozen=True)
class Failed:
    cause: RenderError


RenderOutcome = Rendered | Failed
