from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, Union
import xxhash # type: ignore

Element = Union[bytes, bytearray, memoryview, str]


class AbstractSketch(ABC):
    """Base class for all distinct-count sketch types."""

    @abstractmethod
    def add(self, data: Element) -> None:
        """Add an element to the sketch."""
        pass

    def add_batch(self, items: Iterable[Element]) -> None:
        """Add multiple elements to the sketch.

        Args:
            items: Iterable of elements to add to the sketch
        """
        for item in items:
            self.add(item)

    @abstractmethod
    def cardinality(self) -> float:
        """Estimate the number of distinct elements added so far."""
        pass

    @abstractmethod
    def merge(self, other) -> None:
        """Merge another sketch into this one."""
        pass

    @staticmethod
    def _to_bytes(data: Element) -> bytes:
        """Convert an element to the bytes that get hashed.

        Text is encoded as UTF-8; bytes-like objects are used as is.

        Raises:
            TypeError: If data is neither text nor bytes-like
        """
        if isinstance(data, str):
            return data.encode('utf-8')
        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data)
        raise TypeError(f"Expected bytes-like object or str, got {type(data).__name__}")

    @staticmethod
    def _hash32(data: bytes, seed: int = 0) -> int:
        """32-bit hash of a byte string.

        Args:
            data: Bytes to hash
            seed: Seed for hashing

        Returns:
            Unsigned 32-bit hash value as integer
        """
        hasher = xxhash.xxh32(seed=seed)
        hasher.update(data)
        return hasher.intdigest()
