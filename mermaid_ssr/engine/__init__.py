"""Render engine channels."""

from mermaid_ssr.config.models import Config
from mermaid_ssr.engine.base import RenderChannel
from mermaid_ssr.engine.browser import BrowserChannel
from mermaid_ssr.engine.models import EngineError, EngineInitError


def open_channel(config: Config) -> RenderChannel:
    """Open the headless browser channel configured by ``config``.

    Raises EngineInitError if any init step fails.
    """
    return BrowserChannel.open(config)


__all__ = [
    "BrowserChannel",
    "EngineError",
    "EngineInitError",
    "RenderChannel",
    "open_channel",
]
