"""Diagram rendering through a render channel."""

from mermaid_ssr.renderer.escaping import escape_js_string, unescape_js_string
from mermaid_ssr.renderer.models import (
    ChannelFailure,
    EmptyArtifact,
    EngineReturnedNull,
    Failed,
    Rendered,
    RenderError,
    RenderOutcome,
    RenderRequest,
    UnexpectedValueShape,
)
from mermaid_ssr.renderer.renderer import (
    DiagramRenderer,
    build_render_script,
    build_request,
    stable_hash,
)

__all__ = [
    "ChannelFailure",
    "DiagramRenderer",
    "EmptyArtifact",
    "EngineReturnedNull",
    "Failed",
    "RenderError",
    "RenderOutcome",
    "RenderRequest",
    "Rendered",
    "UnexpectedValueShape",
    "build_render_script",
    "build_request",
    "escape_js_string",
    "stable_hash",
    "unescape_js_string",
]
