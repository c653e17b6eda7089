from __future__ import annotations
from typing import Set
from hllsketch.lib.abstractsketch import AbstractSketch, Element

class ExactCounter(AbstractSketch):
    """Exact distinct counter, used as ground truth for HyperLogLog estimates."""

    def __init__(self):
        """Initialize exact counter."""
        super().__init__()
        self.elements: Set[bytes] = set()

    def add(self, data: Element) -> None:
        """Add an element to the counter."""
        self.elements.add(self._to_bytes(data))

    def cardinality(self) -> float:
        """Return exact cardinality."""
        return float(len(self.elements))

    def merge(self, other: 'ExactCounter') -> None:
        """Merge another counter into this one."""
        if not isinstance(other, ExactCounter):
            raise TypeError("Can only merge with another ExactCounter")
        self.elements.update(other.elements)
