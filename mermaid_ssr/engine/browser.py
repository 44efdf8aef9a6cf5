"""Headless Chromium render channel driven through Playwright's sync API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from playwright.sync_api import Browser, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from mermaid_ssr.config.init_script import RENDER_ENTRY_POINT, build_init_script
from mermaid_ssr.config.models import Config
from mermaid_ssr.engine.base import RenderChannel
from mermaid_ssr.engine.models import EngineError, EngineInitError

logger = logging.getLogger(__name__)

_PAGE_HTML = """<!doctype html>
<html><head><meta charset="utf-8" /></head>
<body><div id="container"></div></body></html>"""

_TIMEOUT_MARKER = "mermaid-ssr: evaluation timed out"

_URL_PREFIXES = ("http://", "https://", "file://", "data:")


def _race_with_timeout(script: str, timeout_ms: int) -> str:
    """Wrap a promise-valued expression so it rejects after timeout_ms."""
    return (
        "Promise.race([\n"
        f"  ({script}),\n"
        "  new Promise((_, reject) => setTimeout(\n"
        f"    () => reject(new Error('{_TIMEOUT_MARKER} after {timeout_ms} ms')), {timeout_ms})),\n"
        "])"
    )


def _load_library(page: Page, library: str) -> None:
    if library.startswith(_URL_PREFIXES):
        page.add_script_tag(url=library)
        return
    path = Path(library).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"mermaid library not found: {path}")
    page.add_script_tag(path=path)


class BrowserChannel(RenderChannel):
    """Render channel backed by one Chromium page running Mermaid.

    Use ``BrowserChannel.open(config)``; the constructor only wires up
    already-initialized handles.
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        page: Page,
        timeout_ms: int,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self._page = page
        self._timeout_ms = timeout_ms
        self._broken = False
        self._closed = False

    @classmethod
    def open(cls, config: Config) -> BrowserChannel:
        """Launch the browser and run every init step, in order.

        Raises EngineInitError naming the step that failed; nothing is
        left running in that case.
        """
        timeout_ms = int(config.timeout_ms)
        playwright: Playwright | None = None
        browser: Browser | None = None
        step = "launch"
        try:
            playwright = sync_playwright().start()
            launch_kwargs: dict[str, Any] = {"headless": True, "timeout": timeout_ms}
            if config.engine_path is not None:
                launch_kwargs["executable_path"] = str(config.engine_path)
            browser = playwright.chromium.launch(**launch_kwargs)
            logger.debug("launched chromium %s", browser.version)

            step = "context"
            page = browser.new_page()
            page.set_default_timeout(timeout_ms)
            page.set_content(_PAGE_HTML)

            step = "library"
            _load_library(page, config.library)
            if page.evaluate("typeof mermaid") == "undefined":
                raise RuntimeError(f"no mermaid global after loading {config.library}")

            step = "init"
            page.add_script_tag(content=build_init_script(config))
            if page.evaluate(f"typeof window.{RENDER_ENTRY_POINT}") != "function":
                raise RuntimeError(f"init script did not define window.{RENDER_ENTRY_POINT}")
        except Exception as e:
            _shutdown(browser, playwright)
            raise EngineInitError(step, e) from e

        logger.info("render engine ready (timeout %d ms)", timeout_ms)
        return cls(playwright, browser, page, timeout_ms)

    def evaluate(self, script: str) -> Any:
        if self._closed:
            raise EngineError("render channel is closed")
        if self._broken:
            raise EngineError("render channel is unusable after an earlier engine failure")

        try:
            return self._page.evaluate(_race_with_timeout(script, self._timeout_ms))
        except PlaywrightTimeoutError as e:
            self._broken = True
            raise EngineError(f"engine call timed out: {e}", timed_out=True) from e
        except PlaywrightError as e:
            self._broken = True
            timed_out = _TIMEOUT_MARKER in str(e)
            raise EngineError(f"engine call failed: {e}", timed_out=timed_out) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        _shutdown(self._browser, self._playwright)


def _shutdown(browser: Browser | None, playwright: Playwright | None) -> None:
    if browser is not None:
        try:
            browser.close()
        except PlaywrightError:
            logger.debug("browser close failed", exc_info=True)
    if playwright is not None:
        try:
            playwright.stop()
        except PlaywrightError:
            logger.debug("playwright stop failed", exc_info=True)
