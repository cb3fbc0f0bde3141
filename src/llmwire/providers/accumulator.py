"""Base class for stream accumulators."""
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

E = TypeVar("E", bound=BaseModel)
R = TypeVar("R", bound=BaseModel)


def first_non_empty(current: Optional[str], candidate: Optional[str]) -> Optional[str]:
    """Keep current unless it is still empty."""
    return current if current else (candidate or current)


class StreamAccumulator(ABC, Generic[E, R]):
    """Folds stream events into one response.

    Events are folded strictly in arrival order and never deduplicated:
    text and argument fragments concatenate per index, identifiers are set
    by the first event carrying them, usage is overwritten.
    """

    def __init__(self) -> None:
        self.events_folded = 0

    def add(self, event: E) -> None:
        """Fold one event."""
        self.fold(event)
        self.events_folded += 1

    @abstractmethod
    def fold(self, event: E) -> None:
        """Apply one event to the response under construction."""
        pass

    @abstractmethod
    def finalize(self) -> R:
        """Build the finished response.

        Raises:
            StreamError: If the events received do not describe a response
        """
        pass
