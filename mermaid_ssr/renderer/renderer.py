"""DiagramRenderer: one diagram source in, one SVG artifact out."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from mermaid_ssr.config.init_script import RENDER_ENTRY_POINT
from mermaid_ssr.engine.base import RenderChannel
from mermaid_ssr.engine.models import EngineError
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

logger = logging.getLogger(__name__)

_ID_PREFIX = "mermaid-diagram-"


def stable_hash(source: str) -> str:
    """SHA-256 of the UTF-8 source, truncated to the first 12 hex characters."""
    return hashlib.sha256(source.encode("utf-8", "surrogatepass")).hexdigest()[:12]


def build_request(source: str) -> RenderRequest:
    return RenderRequest(identifier=f"{_ID_PREFIX}{stable_hash(source)}", diagram_source=source)


def build_render_script(request: RenderRequest) -> str:
    """The per-diagram invocation script; evaluates to the entry point's promise."""
    return (
        "(async () => { return await "
        f"window.{RENDER_ENTRY_POINT}('{escape_js_string(request.identifier)}', "
        f"'{escape_js_string(request.diagram_source)}'); }})()"
    )


class DiagramRenderer:
    """Renders diagram sources through a RenderChannel.

    No retries: a failure is reported once and the caller decides what to
    do with it.
    """

    def __init__(self, channel: RenderChannel) -> None:
        self.channel = channel

    def render(self, source: str) -> str:
        """Render ``source`` to an SVG string. Raises RenderError."""
        request = build_request(source)
        try:
            value = self.channel.evaluate(build_render_script(request))
        except EngineError as e:
            raise ChannelFailure(request.identifier, str(e)) from e

        artifact = _decode_artifact(request.identifier, value)
        logger.debug("rendered %s (%d chars)", request.identifier, len(artifact))
        return artifact

    def try_render(self, source: str) -> RenderOutcome:
        """Like :meth:`render`, but returns the failure instead of raising it."""
        try:
            return Rendered(self.render(source))
        except RenderError as e:
            return Failed(e)


def _decode_artifact(identifier: str, value: Any) -> str:
    if value is None:
        raise EngineReturnedNull(identifier)
    if not isinstance(value, str):
        raise UnexpectedValueShape(identifier, f"{type(value).__name__}: {value!r:.200}")

    # Some engine builds return the SVG with its text re-escaped; undo that
    # when it parses, keep the raw string when it doesn't.
    try:
        artifact = unescape_js_string(value)
    except ValueError:
        artifact = value

    if not artifact:
        raise EmptyArtifact(identifier)
    return artifact
