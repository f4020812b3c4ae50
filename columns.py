"""Turn stamped stone/water/air columns into layered terrain.

Each column is scanned from the top down. Reaching stone after air starts a
run: the first block gets the surface material, the next ``stone_depth``
blocks get the ground material, and a ground run of sand ends in a short run
of sandstone. Bedrock is sprinkled over the bottom five layers.
"""
import terrain_config
from terrain_config import CHUNK_SIZE
import materials

BEDROCK_LAYERS = 5
FREEZE_TEMPERATURE = 0.15
# run counter value above any surface
NO_RUN = -1


class ColumnFinalizer(object):

    def __init__(self, settings, noise):
        self.settings = settings
        self.noise = noise

    def finalize(self, chunk, chunk_x, chunk_z, rand, biome_ids, temperatures, water_levels, table, buffers):
        """Finish every column of chunk in place; returns the mostly-dry flag.

        rand is the chunk's own stream; columns draw from it in x-major order.
        """
        scale = terrain_config.SURFACE_NOISE_SCALE
        buffers.surface = self.noise.surface.noise_2d(buffers.surface,
            chunk_x * CHUNK_SIZE, chunk_z * CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE, scale, scale)
        surface_noise = buffers.surface

        dry = CHUNK_SIZE * CHUNK_SIZE
        for x in range(CHUNK_SIZE):
            for z in range(CHUNK_SIZE):
                profile = table[biome_ids[x, z]]
                column = chunk.column(x, z)
                cells = column.tolist()
                self.finish_column(cells, profile, surface_noise[x, z], rand,
                    temperatures[x, z], int(water_levels[x, z]))
                column[:] = cells
                if cells[profile.water_level_max] == profile.water_block:
                    dry -= 1
        return dry > terrain_config.DRY_COLUMN_THRESHOLD

    def finish_column(self, cells, profile, surface_noise, rand, temperature, water_level):
        """Rewrite one column (a list of material ids, y = 0 first)."""
        settings = self.settings
        bedrock = settings.bedrock_block
        top = len(cells) - 1

        stone_depth = int(surface_noise / 3.0 + 3.0 + rand.next_double() * 0.25)
        stony = stone_depth <= 0 and not settings.remove_surface_stone
        run = NO_RUN
        surface = profile.surface_block
        ground = profile.ground_block

        if settings.ceiling_bedrock:
            # one below the top: a bedrock top layer breaks engine lighting
            cells[top - 1] = bedrock

        for y in range(top, -1, -1):
            if y < BEDROCK_LAYERS and settings.create_bedrock(y) and y <= rand.next_int(BEDROCK_LAYERS):
                cells[y] = bedrock
                continue
            block = cells[y]
            if block == materials.AIR:
                run = NO_RUN
            elif block != materials.STONE:
                continue
            elif run == NO_RUN:
                if stony:
                    surface = materials.AIR
                    ground = materials.STONE
                else:
                    # each run starts from the biome layers, so sandstone
                    # never carries into the next run and banks near water
                    # keep the biome surface
                    surface = profile.surface_block
                    ground = profile.ground_block
                if water_level > y > profile.water_level_min and surface == materials.AIR:
                    # frozen or open lake surface
                    if temperature < FREEZE_TEMPERATURE:
                        surface = profile.ice_block
                    else:
                        surface = profile.water_block
                run = stone_depth
                cells[y] = surface if y >= water_level - 1 else ground
            elif run > 0:
                run -= 1
                cells[y] = ground
                if run == 0 and ground == materials.SAND:
                    run = 1 + rand.next_int(4)
                    ground = materials.SANDSTONE
