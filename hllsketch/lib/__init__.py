from .hyperloglog import HyperLogLog
from .exact import ExactCounter

__all__ = [
    'HyperLogLog',
    'ExactCounter',
]
