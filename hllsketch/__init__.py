"""
hllsketch - HyperLogLog Cardinality Estimation
"""

from hllsketch.lib.hyperloglog import HyperLogLog, DEFAULT_SEED, MIN_K, MAX_K, MAX_RANK
from hllsketch.lib.exact import ExactCounter

__version__ = '0.1.0'

__all__ = [
    'HyperLogLog',
    'ExactCounter',
    'DEFAULT_SEED',
    'MIN_K',
    'MAX_K',
    'MAX_RANK',
]
