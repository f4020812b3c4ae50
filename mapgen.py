#std/external libs
import collections
import time
import numpy

#local libs
from terrain_config import CHUNK_SIZE, CELLS_PER_CHUNK, BLEND_RADIUS
from world_random import WorldRandom
from octave_noise import TerrainNoise
from biomes import BiomeWindow, BiomeTable, BiomeProfile, StaticBiomeProvider
from grids import ChunkBuffer, ChunkBuffers, grid_from_rows
from terrain_shape import make_terrain_shape
from density import DensitySynthesizer
from materialize import expand_density, expand_water_levels, materialize
from columns import ColumnFinalizer
import terrain_config
import logutil

GeneratedChunk = collections.namedtuple('GeneratedChunk', 'chunk_x chunk_z blocks mostly_dry')

# modes that run the object placement hook after terrain and carvers
PLACEMENT_MODES = ('normal', 'old_generator')


class ChunkGenerator(object):
    """Builds the block columns of one chunk at a time.

    The generator only holds state derived from the world seed, so chunks
    can be requested in any order and from several threads, as long as each
    thread passes its own ChunkBuffers (or none).

    carvers are called as carver(chunk_x, chunk_z, blocks) in order after the
    columns are finished, with blocks the [x, z, y] uint8 array of the chunk.
    object_placer is called as object_placer(chunk_x, chunk_z, chunk, mostly_dry).
    """

    def __init__(self, settings, provider, biome_table, carvers=(), object_placer=None):
        biome_table.validate(settings.world_height)
        self.settings = settings
        self.provider = provider
        self.biome_table = biome_table
        self.carvers = tuple(carvers)
        self.object_placer = object_placer
        self.noise = TerrainNoise(settings.seed)
        self.shape = make_terrain_shape(settings, self.noise)
        self.density = DensitySynthesizer(settings, self.noise, self.shape)
        self.finalizer = ColumnFinalizer(settings, self.noise)
        logutil.log("MAPGEN", f"generator ready {settings!r} shape={self.shape.kind} "
            f"biomes={len(biome_table)} carvers={len(self.carvers)}")

    def generate(self, chunk_x, chunk_z, buffers=None):
        settings = self.settings
        height = settings.world_height
        if settings.terrain_mode == 'not_generate':
            return GeneratedChunk(chunk_x, chunk_z, ChunkBuffer(height), True)
        if buffers is None:
            buffers = ChunkBuffers()
        logutil.set_chunk((chunk_x, chunk_z))
        t0 = time.perf_counter()
        try:
            chunk, dry = self._terrain(chunk_x, chunk_z, buffers)
            t1 = time.perf_counter()
            for carver in self.carvers:
                carver(chunk_x, chunk_z, chunk.blocks)
            if self.object_placer is not None and settings.terrain_mode in PLACEMENT_MODES:
                self.object_placer(chunk_x, chunk_z, chunk, dry)
            t2 = time.perf_counter()
        except Exception as e:
            logutil.log("MAPGEN", f"chunk generation failed: {e!r}", level="ERROR")
            raise
        finally:
            logutil.set_chunk(None)
        if logutil.enabled("MAPGEN", "DEBUG"):
            logutil.log("MAPGEN",
                f"chunk {chunk_x},{chunk_z} terrain_ms={(t1 - t0) * 1000.0:.1f} "
                f"hooks_ms={(t2 - t1) * 1000.0:.1f} dry={dry}", level="DEBUG")
        return GeneratedChunk(chunk_x, chunk_z, chunk, dry)

    def _terrain(self, chunk_x, chunk_z, buffers):
        settings = self.settings
        provider = self.provider
        table = self.biome_table
        rand = WorldRandom.for_chunk(chunk_x, chunk_z)

        span = CELLS_PER_CHUNK + 1 + 2 * BLEND_RADIUS
        window = BiomeWindow.sample(provider, table,
            chunk_x * CELLS_PER_CHUNK - BLEND_RADIUS, chunk_z * CELLS_PER_CHUNK - BLEND_RADIUS, span, span)
        coarse, coarse_water = self.density.synthesize(window, provider, chunk_x, chunk_z, buffers)

        bx = chunk_x * CHUNK_SIZE
        bz = chunk_z * CHUNK_SIZE
        biome_ids = grid_from_rows(provider.get_biomes(bx, bz, CHUNK_SIZE, CHUNK_SIZE),
            CHUNK_SIZE, CHUNK_SIZE, dtype=numpy.int64, what="biomes")
        temperatures = grid_from_rows(provider.get_temperatures(bx, bz, CHUNK_SIZE, CHUNK_SIZE),
            CHUNK_SIZE, CHUNK_SIZE, dtype=numpy.float64, what="temperatures")

        water_levels = expand_water_levels(coarse_water)
        chunk = materialize(expand_density(coarse), water_levels, biome_ids, table, settings.world_height)
        dry = self.finalizer.finalize(chunk, chunk_x, chunk_z, rand,
            biome_ids, temperatures, water_levels, table, buffers)
        return chunk, dry


chunk_generator = None

def initialize_chunk_generator(seed=None, provider=None, biome_table=None, **overrides):
    """Set up the module level generator: one plains biome everywhere unless
    a provider and table are given."""
    global chunk_generator
    if seed is None:
        seed = int(time.time())
    if provider is None:
        provider = StaticBiomeProvider()
    if biome_table is None:
        biome_table = BiomeTable({0: BiomeProfile()})
    chunk_generator = ChunkGenerator(terrain_config.WorldSettings(seed, **overrides), provider, biome_table)
    return chunk_generator


def generate_chunk(chunk_x, chunk_z):
    global chunk_generator
    if chunk_generator is None:
        initialize_chunk_generator()
    return chunk_generator.generate(chunk_x, chunk_z)
