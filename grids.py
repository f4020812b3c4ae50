"""Grid containers shared by the generator stages.

Axis conventions:

* horizontal grids are indexed ``[x, z]``;
* noise fields and the coarse density grid are indexed ``[x, z, y]``;
* a chunk buffer is indexed ``[x, z, y]`` so each column is contiguous and
  ``to_bytes()`` gives the engine layout ``(x*16 + z)*height + y``.

Providers hand back flat sequences with x varying fastest
(``index = x + z*width``); ``grid_from_rows`` converts them.
"""
import numpy

from terrain_config import CHUNK_SIZE
import materials


def grid_from_rows(values, width, depth, dtype=None, what="values"):
    """Turn an x-fastest flat sequence into a [x, z] array."""
    if width <= 0 or depth <= 0:
        raise ValueError(f"{what}: grid extents must be positive, got {width}x{depth}")
    arr = numpy.asarray(values, dtype=dtype)
    if arr.ndim != 1 or arr.size != width * depth:
        raise ValueError(f"{what}: expected {width * depth} entries, got shape {arr.shape}")
    return arr.reshape(depth, width).T


class ChunkBuffer(object):
    """Material ids of one 16 x height x 16 chunk."""

    def __init__(self, height, blocks=None):
        self.height = height
        if blocks is None:
            blocks = numpy.zeros((CHUNK_SIZE, CHUNK_SIZE, height), dtype=numpy.uint8)
        elif blocks.shape != (CHUNK_SIZE, CHUNK_SIZE, height) or blocks.dtype != numpy.uint8:
            raise ValueError(f"chunk blocks must be uint8 {(CHUNK_SIZE, CHUNK_SIZE, height)}, got {blocks.dtype} {blocks.shape}")
        self.blocks = blocks

    def get(self, x, y, z):
        return int(self.blocks[x, z, y])

    def set(self, x, y, z, material):
        self.blocks[x, z, y] = material

    def column(self, x, z):
        """Column at (x, z) ordered from y = 0 upward (a view)."""
        return self.blocks[x, z]

    def to_bytes(self):
        return self.blocks.tobytes()

    def top_solid(self):
        """Height of the highest solid block per column, -1 where none."""
        solid = materials.MATERIAL_SOLID[self.blocks]
        any_solid = solid.any(axis=2)
        top = (self.height - 1) - numpy.argmax(solid[:, :, ::-1], axis=2)
        return numpy.where(any_solid, top, -1)

    def __eq__(self, other):
        if not isinstance(other, ChunkBuffer):
            return NotImplemented
        return self.height == other.height and numpy.array_equal(self.blocks, other.blocks)

    __hash__ = None


class ChunkBuffers(object):
    """Scratch arrays for one generation call at a time.

    Passing the same instance to consecutive calls reuses the allocations;
    every array is fully overwritten before use, so a fresh instance gives
    identical output. Do not share one instance between threads.
    """

    def __init__(self):
        self.height_noise = None
        self.legacy_noise = None
        self.mixing = None
        self.selector_a = None
        self.selector_b = None
        self.surface = None
        self.density = None
