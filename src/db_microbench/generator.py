"""
Synthetic values for the benchmark workload.
"""

import random
import string
from typing import List, Optional

from .constants import MAX_VALUE, MIN_VALUE

ALPHABET = string.ascii_letters + string.digits


def create_values(count: int, rng: Optional[random.Random] = None) -> List[int]:
    """Draw count independent int32 values. Duplicates are possible."""
    rng = rng or random.Random()
    return [rng.randint(MIN_VALUE, MAX_VALUE) for _ in range(count)]


def random_string(length: int, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return "".join(rng.choices(ALPHABET, k=length))


def to_hex(value: int) -> str:
    """Hexadecimal form of the 32-bit two's complement of value (-1 -> 'ffffffff')."""
    return format(value & 0xFFFFFFFF, "x")
