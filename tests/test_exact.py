from __future__ import annotations
import pytest # type: ignore
from hllsketch.lib.exact import ExactCounter
from hllsketch.lib.hyperloglog import HyperLogLog

@pytest.mark.quick
class TestExactCounterQuick:
    """Quick tests for ExactCounter class."""

    def test_counts_distinct(self):
        counter = ExactCounter()
        counter.add_batch([b"a", b"b", b"a", "b", "c"])
        assert counter.cardinality() == 3.0

    def test_empty(self):
        assert ExactCounter().cardinality() == 0.0

    def test_merge(self):
        counter1 = ExactCounter()
        counter2 = ExactCounter()
        counter1.add_batch([b"a", b"b"])
        counter2.add_batch([b"b", b"c"])
        counter1.merge(counter2)
        assert counter1.cardinality() == 3.0
        assert counter2.cardinality() == 2.0

    def test_merge_type(self):
        with pytest.raises(TypeError):
            ExactCounter().merge(HyperLogLog(4))

    def test_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            ExactCounter().add(1.5)
