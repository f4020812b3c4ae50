"""Coarse density grid: one sample per macro-cell corner.

Positive density is solid. Two selector fields are blended by a slower
mixing field, giving both rolling hills and overhangs from one model; a
depth bias pulls the result toward the column's target height and the top
layers are forced negative so terrain stays below the world ceiling.
"""
import numpy

import terrain_config
from terrain_config import BLEND_RADIUS, CELLS_PER_CHUNK

TOP_TAPER_LAYERS = 3
TOP_DENSITY = -10.0


def noise_height(raw, profile):
    """Map a raw height noise sample to a biome limited height offset."""
    h = raw / 8000.0
    if h < 0.0:
        h = -h * 0.3
    h = h * 3.0 - 2.0
    if h < 0.0:
        h /= 2.0
        if h < -1.0:
            h = -1.0
        h -= profile.max_average_depth
        h /= 1.4
        h /= 2.0
    else:
        if h > 1.0:
            h = 1.0
        h += profile.max_average_height
        h /= 8.0
    return h


def column_density(shape, profile, mixing, selector_a, selector_b, world_height, out):
    """Write the density of one coarse column into out (indexed by y)."""
    cells_y = out.shape[0]
    ys = numpy.arange(cells_y, dtype=numpy.float64)
    if shape.river_found:
        bias = (shape.river_height - ys) * 12.0 * 128.0 / world_height / shape.river_volatility
    else:
        bias = (shape.height - ys) * 12.0 * 128.0 / world_height / shape.volatility
    # steeper above ground than below: cliffs rather than slopes
    bias = numpy.where(bias > 0.0, bias * 4.0, bias)

    low = selector_a / 512.0 * profile.volatility1
    high = selector_b / 512.0 * profile.volatility2
    mix = (mixing / 10.0 + 1.0) / 2.0
    density = numpy.where(mix < profile.volatility_weight1, low,
        numpy.where(mix > profile.volatility_weight2, high, low + (high - low) * mix))

    if not profile.disable_notch_height_control:
        density = density + bias
        t = (ys - (cells_y - 1 - TOP_TAPER_LAYERS)) / TOP_TAPER_LAYERS
        density = numpy.where(t > 0.0, density * (1.0 - t) + TOP_DENSITY * t, density)

    out[:] = density + profile.height_offsets(cells_y)
    return out


class DensitySynthesizer(object):

    def __init__(self, settings, noise, shape):
        self.settings = settings
        self.noise = noise
        self.shape = shape

    def synthesize(self, window, provider, chunk_x, chunk_z, buffers):
        """Coarse density [x, z, y] and coarse water levels [x, z] for a chunk.

        window holds the unzoomed biomes from (chunk*4 - 2) with a 2 tile
        margin around the 5 x 5 sample grid.
        """
        settings = self.settings
        noise = self.noise
        n = CELLS_PER_CHUNK + 1
        cells_y = settings.cells_y
        ox = chunk_x * CELLS_PER_CHUNK
        oz = chunk_z * CELLS_PER_CHUNK
        xz_scale = settings.xz_scale
        y_scale = settings.y_scale
        height_scale = terrain_config.HEIGHT_NOISE_SCALE

        prepared = self.shape.prepare(provider, chunk_x, chunk_z, buffers)
        buffers.height_noise = noise.height.noise_2d(buffers.height_noise,
            ox, oz, n, n, height_scale, height_scale)
        buffers.mixing = noise.mixing.noise_3d(buffers.mixing,
            ox, 0, oz, n, cells_y, n, xz_scale / 80.0, y_scale / 160.0, xz_scale / 80.0)
        buffers.selector_a = noise.selector_a.noise_3d(buffers.selector_a,
            ox, 0, oz, n, cells_y, n, xz_scale, y_scale, xz_scale)
        buffers.selector_b = noise.selector_b.noise_3d(buffers.selector_b,
            ox, 0, oz, n, cells_y, n, xz_scale, y_scale, xz_scale)

        density = buffers.density
        if density is None or density.shape != (n, n, cells_y):
            density = numpy.empty((n, n, cells_y), dtype=numpy.float64)
        water_levels = numpy.empty((n, n), dtype=numpy.int64)

        for x in range(n):
            for z in range(n):
                profile = window.profile(x + BLEND_RADIUS, z + BLEND_RADIUS)
                height = noise_height(buffers.height_noise[x, z], profile)
                shape = self.shape.column(prepared, window, x, z, height, cells_y)
                water_levels[x, z] = shape.water_level
                column_density(shape, profile, buffers.mixing[x, z], buffers.selector_a[x, z],
                    buffers.selector_b[x, z], settings.world_height, density[x, z])

        buffers.density = density
        return density, water_levels
