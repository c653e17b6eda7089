"""Bit-twiddling helpers for 32-bit hash words."""

MASK32 = 0xFFFFFFFF


def _check_word(x: int) -> int:
    if x < 0 or x > MASK32:
        raise ValueError(f"Value {x} does not fit in 32 bits")
    return x


def population_count(x: int) -> int:
    """Count the bits set to 1 in a 32-bit word.
    
    Args:
        x: Unsigned 32-bit integer
        
    Returns:
        Number of set bits (0-32)
    """
    x = _check_word(x)
    x -= (x >> 1) & 0x55555555
    x = ((x >> 2) & 0x33333333) + (x & 0x33333333)
    x = ((x >> 4) + x) & 0x0F0F0F0F
    x += x >> 8
    x += x >> 16
    return x & 0x3F


def leading_zero_count(x: int) -> int:
    """Count the leading zero bits of a 32-bit word (32 for zero).
    
    Smears the highest set bit into every lower position, so the number of
    ones left is the bit length of x.
    """
    x = _check_word(x)
    x |= x >> 1
    x |= x >> 2
    x |= x >> 4
    x |= x >> 8
    x |= x >> 16
    return 32 - population_count(x)
