"""Per-column height and volatility factors.

Two strategies exist and one is chosen per world: the blended shape (the
default) and the legacy shape of the old generator, whose curve differs and
which ignores neighboring biomes and rivers.
"""
import collections

import terrain_config
from terrain_config import BLEND_RADIUS, CELLS_PER_CHUNK, CHUNK_SIZE
from blending import BiomeBlender
from grids import grid_from_rows

# height factors are in coarse y units (one per CELL_HEIGHT blocks)
ColumnShape = collections.namedtuple('ColumnShape',
    'volatility height river_volatility river_height river_found water_level')


class BlendedTerrainShape(object):
    kind = 'blended'

    def __init__(self, blender=None):
        self.blender = blender if blender is not None else BiomeBlender()

    def prepare(self, provider, chunk_x, chunk_z, buffers):
        return None

    def column(self, prepared, window, x, z, noise_height, cells_y):
        s = self.blender.blend(window, x, z)
        return ColumnShape(
            s.volatility, cells_y * (2.0 + s.height + noise_height * 0.2) / 4.0,
            s.river_volatility, cells_y * (2.0 + s.river_height + noise_height * 0.2) / 4.0,
            s.river_found, s.water_level)


class LegacyTerrainShape(object):
    kind = 'legacy'

    def __init__(self, noise, engine_factors=False):
        self.noise = noise
        self.engine_factors = engine_factors

    def prepare(self, provider, chunk_x, chunk_z, buffers):
        cells = CELLS_PER_CHUNK + 1
        scale = terrain_config.LEGACY_NOISE_SCALE
        buffers.legacy_noise = self.noise.legacy_volatility.noise_2d(buffers.legacy_noise,
            chunk_x * CELLS_PER_CHUNK, chunk_z * CELLS_PER_CHUNK, cells, cells, scale, scale)
        factors = None
        if self.engine_factors:
            factors = grid_from_rows(
                provider.get_legacy_biome_factors(chunk_x * CHUNK_SIZE, chunk_z * CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE),
                CHUNK_SIZE, CHUNK_SIZE, dtype=float, what="legacy biome factors")
        return buffers.legacy_noise, factors

    def column(self, prepared, window, x, z, noise_height, cells_y):
        noise, factors = prepared
        profile = window.profile(x + BLEND_RADIUS, z + BLEND_RADIUS)
        if factors is not None:
            # coarse samples 0..4 land on blocks 1, 4, 7, 10, 13
            factor = 1.0 - factors[x * 3 + 1, z * 3 + 1]
        else:
            factor = 1.0 - profile.biome_temperature * profile.biome_wetness
        factor *= factor
        factor = 1.0 - factor * factor

        volatility = (noise[x, z] + 256.0) / 512.0 * factor
        if volatility > 1.0:
            volatility = 1.0
        if volatility < 0.0 or noise_height < 0.0:
            volatility = 0.0
        volatility += 0.5
        height = cells_y * (2.0 + noise_height) / 4.0
        return ColumnShape(volatility, height, volatility, height, False, profile.water_level_max)


def make_terrain_shape(settings, noise):
    """Pick the strategy for a world."""
    if settings.terrain_mode == 'old_generator':
        return LegacyTerrainShape(noise, engine_factors=settings.legacy_biome_factors)
    return BlendedTerrainShape()
