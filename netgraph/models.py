from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Activity:
    """Represents an activity (arc) between two events of the network."""

    start: int
    end: int
    duration: int

    # Forward pass results
    es: Optional[int] = None  # Early Start
    ef: Optional[int] = None  # Early Finish

    # Backward pass results
    ls: Optional[int] = None  # Late Start
    lf: Optional[int] = None  # Late Finish

    # Float calculations
    total_float: Optional[int] = None  # Total Float (R)
    free_float: Optional[int] = None   # Free Float (r)

    is_critical: bool = False

    @property
    def code(self) -> str:
        return f"{self.start}-{self.end}"

    def reset_calculations(self) -> None:
        """Reset all calculated values."""
        self.es = None
        self.ef = None
        self.ls = None
        self.lf = None
        self.total_float = None
        self.free_float = None
        self.is_critical = False


@dataclass
class CriticalPath:
    """Sequence of events visited while following zero-float activities."""

    events: List[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return False

    def format(self, names: Optional[Dict[int, str]] = None) -> str:
        names = names or {}
        return " -> ".join(names.get(e, str(e)) for e in self.events)

    def __str__(self) -> str:
        return self.format()


@dataclass
class CompletePath(CriticalPath):
    """Critical path that reached the sink event."""

    @property
    def complete(self) -> bool:
        return True


@dataclass
class TruncatedPath(CriticalPath):
    """Critical path that stopped short of the sink event."""

    reached_event: int = 0
