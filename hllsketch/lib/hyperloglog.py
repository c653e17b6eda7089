from __future__ import annotations
import math
import operator
from typing import Tuple
import numpy as np # type: ignore
from hllsketch.lib.abstractsketch import AbstractSketch, Element
from hllsketch.lib.bits import leading_zero_count

MIN_K = 2
MAX_K = 16
MAX_RANK = 32
DEFAULT_SEED = 314
TWO_32 = 4294967296.0


class HyperLogLog(AbstractSketch):
    """Classic HyperLogLog cardinality estimator over a 32-bit hash.

    The sketch keeps 2^k one-byte registers. Each element is hashed, the top
    k bits of the hash select a register, and the register keeps the largest
    rank (leading zeros + 1 of the remaining bits) seen so far.

    Instances are not thread-safe. Concurrent writers need external locking,
    and a peer that may change during a merge should be snapshotted with
    registers() first.
    """

    def __init__(self, k: int, seed: int = DEFAULT_SEED, debug: bool = False):
        """Initialize an empty HyperLogLog sketch.

        Args:
            k: Number of index bits, size is 2^k registers (2-16)
            seed: Seed for the 32-bit hash
            debug: Whether to print debug information

        Raises:
            TypeError: If k or seed is not an integer
            ValueError: If k is outside [2, 16] or seed does not fit in 32 bits
        """
        super().__init__()
        k = operator.index(k)
        seed = operator.index(seed)

        if k < MIN_K or k > MAX_K:
            raise ValueError(f"Number of registers must be in the range [2^{MIN_K}, 2^{MAX_K}], got k={k}")
        if seed < 0 or seed > 0xFFFFFFFF:
            raise ValueError(f"Seed must be an unsigned 32-bit integer, got {seed}")

        self.k = k
        self._seed = seed
        self._size = 1 << k
        self._registers = np.zeros(self._size, dtype=np.uint8)
        self.debug = debug

    def __repr__(self) -> str:
        return f"HyperLogLog(k={self.k}, seed={self._seed})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HyperLogLog):
            return NotImplemented
        return (self.k == other.k and self._seed == other._seed
                and np.array_equal(self._registers, other._registers))

    def size(self) -> int:
        """Return the number of registers."""
        return self._size

    def seed(self) -> int:
        """Return the seed used by the hash."""
        return self._seed

    def registers(self) -> bytearray:
        """Return a copy of the registers as a bytearray."""
        return bytearray(self._registers.tobytes())

    def set_register(self, index: int, rank: int) -> None:
        """Set the register at a zero-based index to the given rank.

        Bypasses the max rule; meant for restoring state and for tests.

        Raises:
            IndexError: If index is not below size()
            ValueError: If index is negative or rank is outside [0, 32]
        """
        index = operator.index(index)
        rank = operator.index(rank)
        if index < 0:
            raise ValueError("Index is negative.")
        if index >= self._size:
            raise IndexError(f"Index {index} out of range for {self._size} registers.")
        if rank < 0:
            raise ValueError("Rank is negative.")
        if rank > MAX_RANK:
            raise ValueError(f"Rank {rank} is greater than the maximum possible rank ({MAX_RANK}).")
        self._registers[index] = rank

    def copy(self) -> 'HyperLogLog':
        """Return an independent sketch with the same parameters and registers."""
        clone = HyperLogLog(self.k, self._seed, self.debug)
        clone._registers[:] = self._registers
        return clone

    @classmethod
    def from_registers(cls, registers, seed: int = DEFAULT_SEED) -> 'HyperLogLog':
        """Rebuild a sketch from a raw register dump.

        Args:
            registers: Register values, one per register (bytes or integer sequence)
            seed: Seed the dumped sketch was built with

        Returns:
            HyperLogLog with k derived from the number of registers

        Raises:
            ValueError: If the length is not 2^k for k in [2, 16] or a rank exceeds 32
        """
        values = _as_register_array(registers)
        size = values.shape[0]
        k = size.bit_length() - 1
        if k < MIN_K or k > MAX_K or size != 1 << k:
            raise ValueError(f"Register dump of length {size} is not 2^k for k in [{MIN_K}, {MAX_K}]")
        sketch = cls(k, seed)
        sketch._registers[:] = values
        return sketch

    def hash_of(self, data: Element) -> int:
        """Return the unsigned 32-bit hash of data under this sketch's seed."""
        return self._hash32(self._to_bytes(data), seed=self._seed)

    def _index_rank(self, hash_val: int) -> Tuple[int, int]:
        """Split a 32-bit hash into (register index, rank).

        The index is the top k bits. The rank is the 1-based position of the
        first set bit in the remaining 32 - k bits, or 33 - k if they are all zero.
        """
        index = hash_val >> (32 - self.k)
        remainder = hash_val & ((1 << (32 - self.k)) - 1)
        rank = leading_zero_count(remainder) - self.k + 1
        return index, rank

    def add(self, data: Element) -> None:
        """Add an element to the sketch.

        Args:
            data: Bytes to add; text is encoded as UTF-8
        """
        index, rank = self._index_rank(self.hash_of(data))
        if rank > self._registers[index]:
            self._registers[index] = rank

    def alpha(self) -> float:
        """Get the bias correction constant for the number of registers."""
        if self._size == 16:
            return 0.673
        elif self._size == 32:
            return 0.697
        elif self._size == 64:
            return 0.709
        return 0.7213 / (1.0 + 1.079 / self._size)

    def raw_estimate(self) -> float:
        """Calculate the uncorrected estimate alpha * m^2 / sum(2^-register)."""
        m = float(self._size)
        harmonics = np.exp2(-self._registers.astype(np.float64))
        return self.alpha() * m * m / float(np.sum(harmonics))

    def cardinality(self) -> float:
        """Estimate the number of distinct elements added.

        Uses linear counting while the raw estimate is at most 2.5m and some
        registers are still empty, the raw estimate up to 2^32/30, and the
        large-range correction for hash saturation above that.

        Returns:
            Estimated cardinality, always finite and >= 0
        """
        m = float(self._size)
        raw = self.raw_estimate()

        if raw <= 2.5 * m:
            zeros = int(np.count_nonzero(self._registers == 0))
            if zeros > 0:
                estimate = m * math.log(m / zeros)
                if self.debug:
                    print(f"DEBUG: raw={raw:.3f}, zeros={zeros}, linear counting={estimate:.3f}")
                return estimate
            if self.debug:
                print(f"DEBUG: raw={raw:.3f}, no empty registers, using raw estimate")
            return raw

        if raw <= TWO_32 / 30.0:
            if self.debug:
                print(f"DEBUG: raw={raw:.3f}, no correction")
            return raw

        # Registers saturated past the hash range; cap at the 2^-32 log argument
        log_arg = max(1.0 - raw / TWO_32, 1.0 / TWO_32)
        estimate = -TWO_32 * math.log(log_arg)
        if self.debug:
            print(f"DEBUG: raw={raw:.3f}, large range correction={estimate:.3f}")
        return estimate

    def merge(self, other) -> None:
        """Merge another sketch or register snapshot into this one.

        Takes the element-wise maximum of the registers in place. The other
        sketch is not modified. Seeds are not compared; merging sketches built
        with different seeds gives a meaningless result.

        Args:
            other: HyperLogLog, any object with size() and registers(), or a
                raw register snapshot

        Raises:
            ValueError: If the number of registers differs or a rank exceeds 32
        """
        if isinstance(other, HyperLogLog):
            if other._size != self._size:
                raise ValueError("HyperLogLogs must be the same size")
            peer = other._registers
        elif callable(getattr(other, 'size', None)) and callable(getattr(other, 'registers', None)):
            if other.size() != self._size:
                raise ValueError("HyperLogLogs must be the same size")
            peer = _as_register_array(other.registers())
        else:
            peer = _as_register_array(other)

        if peer.shape[0] != self._size:
            raise ValueError(f"Register snapshot has {peer.shape[0]} registers, expected {self._size}")

        np.maximum(self._registers, peer, out=self._registers)

    def union(self, other) -> 'HyperLogLog':
        """Return a new sketch for the union, leaving both operands untouched."""
        merged = self.copy()
        merged.merge(other)
        return merged

    def is_empty(self) -> bool:
        """Check if sketch is empty."""
        return not self._registers.any()

    def write(self, filepath: str) -> None:
        """Write sketch to file in binary format.

        Args:
            filepath: Path to output file
        """
        np.savez_compressed(
            filepath,
            registers=self._registers,
            k=np.array([self.k]),
            seed=np.array([self._seed], dtype=np.uint32)
        )

    @classmethod
    def load(cls, filepath: str) -> 'HyperLogLog':
        """Load sketch from file in binary format.

        Args:
            filepath: Path to input file

        Returns:
            HyperLogLog object loaded from file

        Raises:
            ValueError: If the stored registers do not match the stored k
        """
        with np.load(filepath) as data:
            k = int(data['k'][0])
            seed = int(data['seed'][0])
            registers = data['registers']
        sketch = cls.from_registers(registers, seed=seed)
        if sketch.k != k:
            raise ValueError(f"Stored k={k} does not match {registers.shape[0]} registers")
        return sketch


def _as_register_array(values) -> np.ndarray:
    """Validate a register snapshot and return it as a uint8 array."""
    if isinstance(values, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(values, dtype=np.uint8)
    else:
        arr = np.asarray(values)
        if arr.ndim != 1:
            raise ValueError("Register snapshot must be one-dimensional")
        if arr.size == 0:
            return arr.astype(np.uint8)
        if arr.dtype.kind not in 'iub':
            raise ValueError(f"Register snapshot must hold integers, got {arr.dtype}")
        if arr.min() < 0:
            raise ValueError("Register snapshot holds a negative rank")
    if arr.size and arr.max() > MAX_RANK:
        raise ValueError(f"Register snapshot holds a rank above {MAX_RANK}")
    return arr.astype(np.uint8)
