import pytest # type: ignore
import numpy as np # type: ignore

def pytest_configure(config):
    """Add markers to the pytest configuration."""
    config.addinivalue_line("markers", "quick: mark test as quick to run")
    config.addinivalue_line("markers", "full: mark test as part of the full test suite")
    config.addinivalue_line("markers", "slow: mark test as very slow to run")


def _distinct_elements(n: int, seed: int = 0, width: int = 8):
    """Return n distinct random byte strings of the given width."""
    rng = np.random.default_rng(seed)
    seen = set()
    while len(seen) < n:
        seen.add(rng.bytes(width))
    return sorted(seen)


@pytest.fixture
def make_elements():
    """Factory for lists of distinct random byte strings."""
    return _distinct_elements
