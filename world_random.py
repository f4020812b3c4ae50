"""Seedable 48-bit linear congruential stream.

The same stream drives noise construction (seeded once from the world seed)
and per-column jitter (reseeded from the chunk coordinates at the start of
every chunk), so the output of a chunk never depends on which chunks were
generated before it.
"""

MULTIPLIER = 0x5DEECE66D
ADDEND = 0xB
MASK = (1 << 48) - 1

CHUNK_X_FACTOR = 341873128712
CHUNK_Z_FACTOR = 132897987541

_DOUBLE_UNIT = 1.0 / (1 << 53)


def chunk_seed(chunk_x, chunk_z):
    """64-bit (wrapping) seed for the per-chunk stream."""
    seed = (int(chunk_x) * CHUNK_X_FACTOR + int(chunk_z) * CHUNK_Z_FACTOR) & ((1 << 64) - 1)
    if seed >= 1 << 63:
        seed -= 1 << 64
    return seed


class WorldRandom(object):
    __slots__ = ('_state',)

    def __init__(self, seed=0):
        self.set_seed(seed)

    @classmethod
    def for_chunk(cls, chunk_x, chunk_z):
        return cls(chunk_seed(chunk_x, chunk_z))

    def set_seed(self, seed):
        self._state = (int(seed) ^ MULTIPLIER) & MASK

    def next_bits(self, bits):
        self._state = (self._state * MULTIPLIER + ADDEND) & MASK
        value = self._state >> (48 - bits)
        # 32 bit draws are signed
        if bits == 32 and value & 0x80000000:
            value -= 1 << 32
        return value

    def next_int(self, bound=None):
        """Signed 32 bit int, or an int in [0, bound) when bound is given."""
        if bound is None:
            return self.next_bits(32)
        bound = int(bound)
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        if bound & -bound == bound:
            return (bound * self.next_bits(31)) >> 31
        while True:
            bits = self.next_bits(31)
            value = bits % bound
            # reject the partial bucket at the top of the 31 bit range
            if bits - value + (bound - 1) < 1 << 31:
                return value

    def next_double(self):
        return ((self.next_bits(26) << 27) + self.next_bits(27)) * _DOUBLE_UNIT
