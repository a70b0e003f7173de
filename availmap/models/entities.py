"""
Data structures (entities) for availmap.

Uses dataclasses for clean, typed data structures.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a successful submission."""
    name: str
    dates: Tuple[date, ...]
    created: bool  # False when an existing record was replaced

    @property
    def status(self) -> str:
        return "created" if self.created else "updated"

    @property
    def message(self) -> str:
        if self.created:
            return f"{self.name}: availability registered."
        return f"{self.name}: availability updated."


@dataclass
class DocumentSnapshot:
    """The shared document as last read from storage."""
    participants: Dict[str, List[str]] = field(default_factory=dict)
    version: int = 0
    updated_at: Optional[str] = None

    @property
    def names(self) -> List[str]:
        return list(self.participants)
