"""
Base class and run context shared by all page analyzers.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class AnalyzerContext:
    """What every analyzer gets to look at: one rendered page."""
    url: str
    html: str
    port: int = 0                                        # browser remote-debugging port
    deep: bool = False
    on_progress: Optional[Callable[[str], None]] = None

    def progress(self, message: str) -> None:
        if self.on_progress:
            self.on_progress(message)


class BaseAnalyzer(ABC):
    """All analyzers inherit from this class."""

    id: str = "base"
    name: str = "Base"

    @abstractmethod
    def run(self, context: AnalyzerContext) -> Any:
        """Analyze the page and return this analyzer's findings dataclass."""
        ...

    @abstractmethod
    def default(self) -> Any:
        """Empty findings of the same shape, used when the analyzer fails."""
        ...
