"""Abstract render channel interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RenderChannel(ABC):
    """One live session with a script-evaluating render engine.

    Channels are single-writer: callers must not issue overlapping
    ``evaluate`` calls. A channel is only handed out once every init step
    has completed.
    """

    @abstractmethod
    def evaluate(self, script: str) -> Any:
        """Evaluate a script, await its promise, return the JSON value.

        Raises EngineError on timeout or transport failure.
        """
        ...

    def close(self) -> None:
        """Release the engine session. Safe to call more than once."""

    def __enter__(self) -> RenderChannel:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
