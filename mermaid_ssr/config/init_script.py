"""Builds the engine init payload from a Config."""

from __future__ import annotations

import json
from typing import Any

from .models import Config

RENDER_ENTRY_POINT = "render"

_RENDER_FUNCTION = """\
window.render = async function(id, code) {
    try {
        const { svg } = await mermaid.render(id, code);
        return svg;
    } catch (error) {
        console.error('Mermaid rendering error:', error);
        return null;
    }
};"""


def kebab_to_camel(key: str) -> str:
    """Rewrite ``flowchart-curve`` to ``flowchartCurve``.

    Keys without hyphens come back unchanged, so camelCase input is stable.
    """
    first, *rest = key.split("-")
    return first + "".join(part[:1].upper() + part[1:] for part in rest)


def init_options(config: Config) -> dict[str, Any]:
    """Options for ``mermaid.initialize()``.

    ``startOnLoad`` is always false: rendering is driven explicitly, one
    diagram per evaluate call.
    """
    options: dict[str, Any] = {
        "securityLevel": config.security_level.value,
        "startOnLoad": False,
    }
    for key, value in config.engine_options.items():
        name = kebab_to_camel(key)
        if name in ("securityLevel", "startOnLoad"):
            continue
        options[name] = value
    return options


def build_init_script(config: Config) -> str:
    """Script that initializes mermaid and defines ``window.render``."""
    config_json = json.dumps(init_options(config), separators=(",", ":"), ensure_ascii=False)
    return f"mermaid.initialize({config_json});\n\n{_RENDER_FUNCTION}"
