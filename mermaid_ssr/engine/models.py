"""Errors raised by render channels."""

from __future__ import annotations


class EngineError(Exception):
    """A single evaluate call failed at the transport level or timed out."""

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        self.timed_out = timed_out
        super().__init__(message)


class EngineInitError(Exception):
    """Wraps the failure of one channel construction step with context."""

    def __init__(self, step: str, cause: Exception) -> None:
        self.step = step
        super().__init__(f"render engine init failed at step {step!r}: {cause}")
        self.__cause__ = cause
