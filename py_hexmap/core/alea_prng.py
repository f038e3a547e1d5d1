"""
Python implementation of the Alea PRNG used by every generation stage.

Based on Johannes Baagøe's Alea algorithm. One instance is created per
generation run from the run seed, so a fixed seed always reproduces the same
map and the host program's own random streams are never touched.
"""


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Alea PRNG with the draw helpers the map generator needs.

    ``value()`` returns a float in [0, 1), ``range(lo, hi)`` an integer in
    [lo, hi).
    """

    def __init__(self, seed):
        """Initialize with seed string or number."""
        self.seed = seed
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash_n = 0xEFC8249D  # 4022871197

        def mash(data):
            nonlocal mash_n
            data = str(data)
            for char in data:
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * 0x100000000  # 2^32
            return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self):
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def value(self) -> float:
        """Alias of ``random()`` used for probability checks."""
        return self.random()

    def range(self, min_val: int, max_val: int) -> int:
        """Integer in [min_val, max_val). Returns min_val for an empty range."""
        if max_val <= min_val:
            return min_val
        return min_val + int(self.random() * (max_val - min_val))

    def chance(self, probability: float) -> bool:
        """True with the given probability. Draws even for 0 and 1."""
        return self.random() < probability
