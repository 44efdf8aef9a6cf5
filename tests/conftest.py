"""Shared test fixtures for mermaid-ssr."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from mermaid_ssr.config.models import Config, ErrorHandling
from mermaid_ssr.engine.base import RenderChannel
from mermaid_ssr.renderer.renderer import DiagramRenderer

SVG = '<svg id="stub" xmlns="http://www.w3.org/2000/svg"><g></g></svg>'


class StubChannel(RenderChannel):
    """Records every script; answers with ``respond(script)``."""

    def __init__(self, respond: Callable[[str], Any]) -> None:
        self.scripts: list[str] = []
        self.closed = False
        self._respond = respond

    def evaluate(self, script: str) -> Any:
        self.scripts.append(script)
        return self._respond(script)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def svg():
    return SVG


@pytest.fixture
def make_channel():
    """Factory for stub channels.

    ``respond`` answers each script; ``reject`` makes any script containing
    that text return null, as mermaid does for a syntax error.
    """

    def _make(respond: Callable[[str], Any] | None = None, reject: str | None = None):
        if respond is None:
            if reject is None:
                respond = lambda script: SVG  # noqa: E731
            else:
                respond = lambda script: None if reject in script else SVG  # noqa: E731
        return StubChannel(respond)

    return _make


@pytest.fixture
def stub_channel(make_channel):
    return make_channel()


@pytest.fixture
def failing_channel(make_channel):
    """Channel that rejects any diagram mentioning ``grph`` (a typo of ``graph``)."""
    return make_channel(reject="grph")


@pytest.fixture
def stub_renderer(stub_channel):
    return DiagramRenderer(stub_channel)


@pytest.fixture
def sample_config():
    return Config()


@pytest.fixture
def comment_config():
    return Config(on_error=ErrorHandling.comment)


@pytest.fixture
def chapter_text():
    return "# T\n\n```mermaid\ngraph TD\nA --> B\n```\n\nText\n"
