"""
Pinned pseudo-random generator for coordinate selection.

Embedding and extraction must derive the same coordinate sequence from
the seed stored in the image, so selection cannot depend on whatever
generator a given interpreter ships. This module implements SplitMix64
(Steele, Lea and Flood, 2014) exactly:

    state  = (state + 0x9E3779B97F4A7C15) mod 2**64
    z      = state
    z      = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 mod 2**64
    z      = (z ^ (z >> 27)) * 0x94D049BB133111EB mod 2**64
    output = z ^ (z >> 31)

Seeding rule: the initial state is the seed reduced modulo 2**32, so a
signed 32-bit seed and its unsigned twin produce the same stream.
"""

MASK64 = (1 << 64) - 1
MASK32 = (1 << 32) - 1

GOLDEN_GAMMA = 0x9E3779B97F4A7C15
MIX_MULTIPLIER_1 = 0xBF58476D1CE4E5B9
MIX_MULTIPLIER_2 = 0x94D049BB133111EB


class SplitMix64:
    """
    SplitMix64 generator seeded with a 32-bit value.

    Example:
        >>> rng = SplitMix64(12345)
        >>> x = rng.randrange(2, 98)
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int):
        self._state = seed & MASK32

    def next_u64(self) -> int:
        """Advance the state and return the next 64-bit output."""
        self._state = (self._state + GOLDEN_GAMMA) & MASK64
        z = self._state
        z = ((z ^ (z >> 30)) * MIX_MULTIPLIER_1) & MASK64
        z = ((z ^ (z >> 27)) * MIX_MULTIPLIER_2) & MASK64
        return z ^ (z >> 31)

    def below(self, n: int) -> int:
        """
        Return an unbiased integer in [0, n).

        Draws at or above the largest multiple of n that fits in 64 bits
        are rejected before reducing modulo n.
        """
        if n <= 0:
            raise ValueError(f"upper bound must be positive, got {n}")
        limit = (1 << 64) - ((1 << 64) % n)
        while True:
            value = self.next_u64()
            if value < limit:
                return value % n

    def randrange(self, start: int, stop: int) -> int:
        """Return an integer in [start, stop)."""
        return start + self.below(stop - start)
