from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

from oreore.types.location import Range


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str


class Diagnostics:
    """Accumulator for one compilation. A new one is created per compile."""

    def __init__(self):
        self.items: List[Diagnostic] = []

    def report(self, range_: Range, message: str) -> None:
        self.items.append(Diagnostic(range_, message))

    def messages(self) -> List[str]:
        return [d.message for d in self.items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
