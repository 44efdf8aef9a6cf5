"""Config loading: host key/value tables, YAML files, env var expansion."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import Config

logger = logging.getLogger(__name__)

# Normalized key -> Config field name.
_KNOWN_KEYS: dict[str, str] = {
    "timeout": "timeout",
    "on-error": "on_error",
    "engine-path": "engine_path",
    "chrome-path": "engine_path",
    "security-level": "security_level",
    "library": "library",
    "log-level": "log_level",
}

# camelCase spellings (``securityLevel``) fold onto the same fields.
_COMPACT_KEYS: dict[str, str] = {k.replace("-", ""): v for k, v in _KNOWN_KEYS.items()}

# Keys the host uses to wire up the preprocessor itself.
_HOST_KEYS = frozenset({"command", "renderer", "renderers", "before", "after", "optional"})


class ConfigError(ValueError):
    """Raised when a configuration value cannot be validated."""


def _normalize_key(key: str) -> str:
    return key.strip().lower().replace("_", "-")


def config_from_mapping(raw: Mapping[str, Any] | None) -> Config:
    """Build a Config from a host-supplied key/value table.

    Recognized keys are matched case-insensitively (``on_error`` and
    ``On-Error`` both hit ``on-error``). Host wiring keys are dropped and
    everything else is forwarded verbatim to the engine, in order.
    """
    fields: dict[str, Any] = {}
    engine_options: dict[str, Any] = {}

    for key, value in (raw or {}).items():
        if not isinstance(key, str):
            raise ConfigError(f"Invalid config key {key!r}: keys must be strings")
        normalized = _normalize_key(key)
        if normalized in _HOST_KEYS:
            continue
        field = _KNOWN_KEYS.get(normalized) or _COMPACT_KEYS.get(normalized)
        if field is None:
            engine_options[key] = value
            continue
        if field in fields:
            raise ConfigError(f"Duplicate config key {key!r}")
        fields[field] = value

    try:
        return Config(**fields, engine_options=engine_options)
    except ValidationError as e:
        raise ConfigError(f"Invalid mermaid-ssr config: {e}") from e


def load_config(cli_path: str | None = None) -> Config:
    """Load config with resolution order: CLI > project-local > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./mermaid-ssr.yaml"),
    ]

    if cli_path and not Path(cli_path).exists():
        raise ConfigError(f"Config file not found: {cli_path}")

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            if raw is None:
                continue
            if not isinstance(raw, dict):
                raise ConfigError(f"Invalid config in {path}: expected a mapping")
            logger.debug("loaded config from %s", path)
            try:
                return config_from_mapping(_expand_env_vars(raw))
            except ConfigError as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e

    return Config()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `mermaid-ssr render --config`
DEFAULT_CONFIG_TEMPLATE = """\
# mermaid-ssr.yaml

# Bound on every browser round trip (e.g. 30s, 1m 30s, 1500ms)
timeout: "30s"

# What to do when a diagram fails to render
on-error: "fail"               # fail | comment

# Custom Chrome/Chromium executable
# engine-path: "/usr/bin/chromium"

# Mermaid bundle: URL or local file path
# library: "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.min.js"

# Forwarded to mermaid.initialize()
security-level: "strict"       # strict | loose | antiscript | sandbox
# theme: "forest"
# look: "hand-drawn"

# Logging
log-level: "info"              # debug | info | warn | error
"""
