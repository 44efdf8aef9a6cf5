"""Pydantic models for preprocessor configuration."""

from __future__ import annotations

import re
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMEOUT = timedelta(seconds=30)

# Pinned major version; the render entry point relies on the v10+ promise API.
DEFAULT_LIBRARY = "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.min.js"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)")

_DURATION_UNITS: dict[str, float] = {
    "ms": 0.001,
    "msec": 0.001,
    "s": 1.0,
    "sec": 1.0,
    "secs": 1.0,
    "second": 1.0,
    "seconds": 1.0,
    "m": 60.0,
    "min": 60.0,
    "mins": 60.0,
    "minute": 60.0,
    "minutes": 60.0,
    "h": 3600.0,
    "hr": 3600.0,
    "hour": 3600.0,
    "hours": 3600.0,
}


class ErrorHandling(str, Enum):
    """What to do when a diagram fails to render."""

    fail = "fail"
    comment = "comment"


class SecurityLevel(str, Enum):
    """Mermaid ``securityLevel`` values."""

    # HTML in labels is encoded and click handlers are disabled.
    strict = "strict"
    # HTML in labels is allowed and click handlers are enabled.
    loose = "loose"
    # Like loose, but script elements are removed.
    antiscript = "antiscript"
    # Rendering happens inside a sandboxed iframe.
    sandbox = "sandbox"


def parse_duration(value: str) -> timedelta:
    """Parse a humantime-style duration such as ``"30s"`` or ``"1m 30s"``.

    A bare number is read as seconds.
    """
    text = value.strip().lower()
    if not text:
        raise ValueError("empty duration")
    try:
        return timedelta(seconds=float(text))
    except (ValueError, OverflowError):
        pass

    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if text[pos:match.start()].strip():
            raise ValueError(f"invalid duration {value!r}")
        unit = _DURATION_UNITS.get(match.group(2))
        if unit is None:
            raise ValueError(f"unknown duration unit {match.group(2)!r} in {value!r}")
        total += float(match.group(1)) * unit
        pos = match.end()
    if pos == 0 or text[pos:].strip():
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(seconds=total)


class Config(BaseModel):
    """Validated preprocessor options. Built once per run, never mutated."""

    model_config = ConfigDict(frozen=True)

    timeout: timedelta = DEFAULT_TIMEOUT
    on_error: ErrorHandling = ErrorHandling.fail
    engine_path: Path | None = None
    security_level: SecurityLevel = SecurityLevel.strict
    library: str = DEFAULT_LIBRARY
    log_level: Literal["debug", "info", "warn", "warning", "error"] = "info"
    # Forwarded verbatim to mermaid.initialize(), insertion order preserved.
    engine_options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_duration(v)
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return timedelta(seconds=v)
        return v

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("timeout must be positive")
        return v

    @field_validator("on_error", "security_level", "log_level", mode="before")
    @classmethod
    def _lowercase_choice(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def timeout_ms(self) -> float:
        return self.timeout.total_seconds() * 1000
