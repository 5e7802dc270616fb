from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Position(NamedTuple):
    """Zero-based line and UTF-16 column. Tuple ordering is document order."""

    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def contains(self, position: Position) -> bool:
        # half-open: the end column is exclusive on the end line
        return self.start <= position < self.end


@dataclass(frozen=True)
class Location:
    uri: str
    range: Range
