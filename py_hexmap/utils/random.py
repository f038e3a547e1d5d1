"""
Random number generation utilities.

Generation never uses Python's ``random`` module or NumPy's global random
state. Every run gets its own Alea PRNG built from the run seed.
"""

import time
from typing import Optional

from ..core.alea_prng import AleaPRNG

MAX_SEED = 0x7FFFFFFF


def derive_seed(entropy: Optional[AleaPRNG] = None) -> int:
    """
    Derive a fresh 31-bit seed from wall-clock time and a random draw.

    Args:
        entropy: Optional PRNG to draw from. A throwaway one seeded from the
            clock is used when omitted.

    Returns:
        Non-negative seed in [0, 2**31 - 1]
    """
    ticks = time.time_ns()
    if entropy is None:
        entropy = AleaPRNG(ticks)
    seed = int(entropy.random() * MAX_SEED)
    seed ^= ticks & 0xFFFFFFFF
    seed ^= int(time.monotonic()) & 0xFFFFFFFF
    return seed & MAX_SEED


def create_prng(seed: int) -> AleaPRNG:
    """Create the PRNG owned by one generation run."""
    return AleaPRNG(seed)
