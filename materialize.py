"""Expand the coarse density to block resolution and stamp stone and water."""
import numpy

from terrain_config import CELL_WIDTH, CELL_HEIGHT
from grids import ChunkBuffer
import materials


def expand(values, axis, steps):
    """Linear interpolation between neighbors along axis, steps per interval.

    An axis of n samples becomes (n - 1)*steps values; the last sample is
    only used as the far end of the final interval.
    """
    values = numpy.moveaxis(values, axis, 0)
    lo = values[:-1, None]
    hi = values[1:, None]
    t = (numpy.arange(steps, dtype=numpy.float64) / steps).reshape((1, steps) + (1,) * (values.ndim - 1))
    out = lo + (hi - lo) * t
    out = out.reshape((-1,) + values.shape[1:])
    return numpy.moveaxis(out, 0, axis)


def expand_density(coarse):
    """Trilinear expansion of a coarse [x, z, y] grid: x, then y, then z."""
    d = expand(coarse, 0, CELL_WIDTH)
    d = expand(d, 2, CELL_HEIGHT)
    return expand(d, 1, CELL_WIDTH)


def expand_water_levels(coarse):
    """Bilinear expansion of coarse [x, z] water levels, truncated to ints."""
    levels = expand(expand(coarse.astype(numpy.float64), 0, CELL_WIDTH), 1, CELL_WIDTH)
    return levels.astype(numpy.int64)


def materialize(density, water_levels, biome_ids, table, height):
    """Initial chunk: stone where density > 0, else biome water between the
    biome's minimum water level and the local water level, else air.

    density is [x, z, y] at block resolution, water_levels and biome_ids are
    [x, z] per block column.
    """
    if density.shape != biome_ids.shape + (height,):
        raise ValueError(f"density shape {density.shape} does not match {biome_ids.shape} x {height}")
    ys = numpy.arange(height)[None, None, :]
    water_block = table.attribute_grid(biome_ids, 'water_block', numpy.uint8)
    water_min = table.attribute_grid(biome_ids, 'water_level_min', numpy.int64)
    wet = (ys < water_levels[:, :, None]) & (ys > water_min[:, :, None])
    blocks = numpy.where(density > 0.0, numpy.uint8(materials.STONE),
        numpy.where(wet, water_block[:, :, None], numpy.uint8(materials.AIR)))
    return ChunkBuffer(height, numpy.ascontiguousarray(blocks, dtype=numpy.uint8))
