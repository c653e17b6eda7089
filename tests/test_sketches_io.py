from __future__ import annotations
import os
import tempfile
import pytest # type: ignore
import numpy as np # type: ignore
from hllsketch.lib.hyperloglog import HyperLogLog

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdirname:
        yield tmpdirname

@pytest.mark.quick
class TestSketchesIOQuick:
    """Quick tests for sketch I/O functionality."""

    def test_hyperloglog_io(self, temp_dir, make_elements):
        """Test HyperLogLog read/write functionality."""
        hll = HyperLogLog(8, seed=1234)
        hll.add_batch(make_elements(300))

        filepath = os.path.join(temp_dir, "test_hll.npz")
        hll.write(filepath)
        hll2 = HyperLogLog.load(filepath)

        assert hll.k == hll2.k
        assert hll.seed() == hll2.seed()
        assert hll.registers() == hll2.registers()
        assert hll.cardinality() == hll2.cardinality()

    def test_empty_sketch_io(self, temp_dir):
        hll = HyperLogLog(2)
        filepath = os.path.join(temp_dir, "empty.npz")
        hll.write(filepath)
        loaded = HyperLogLog.load(filepath)
        assert loaded == hll
        assert loaded.cardinality() == 0.0

    def test_loaded_sketch_keeps_working(self, temp_dir):
        hll = HyperLogLog(6)
        hll.add(b"a")
        filepath = os.path.join(temp_dir, "hll.npz")
        hll.write(filepath)
        loaded = HyperLogLog.load(filepath)
        loaded.add(b"b")
        hll.add(b"b")
        assert loaded == hll

    def test_load_mismatched_k(self, temp_dir):
        filepath = os.path.join(temp_dir, "bad.npz")
        np.savez_compressed(filepath, registers=np.zeros(16, dtype=np.uint8),
                            k=np.array([5]), seed=np.array([314], dtype=np.uint32))
        with pytest.raises(ValueError):
            HyperLogLog.load(filepath)

    def test_load_invalid_rank(self, temp_dir):
        filepath = os.path.join(temp_dir, "bad_rank.npz")
        registers = np.zeros(16, dtype=np.uint8)
        registers[0] = 40
        np.savez_compressed(filepath, registers=registers,
                            k=np.array([4]), seed=np.array([314], dtype=np.uint32))
        with pytest.raises(ValueError):
            HyperLogLog.load(filepath)
