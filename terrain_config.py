import math

# Size of a chunk in blocks (x and z).
CHUNK_SIZE = 16
# Default world height (y). Must be a power of two.
WORLD_HEIGHT = 128
MIN_WORLD_HEIGHT = 16
MAX_WORLD_HEIGHT = 256

# Macro-cell subdivision used by the density field.
CELL_WIDTH = 4
CELL_HEIGHT = 8
CELLS_PER_CHUNK = CHUNK_SIZE // CELL_WIDTH

# Biome blend kernel reaches this many coarse samples in every direction.
BLEND_RADIUS = 2

# Base frequency of the selector noise. Tuned together with the 80/160
# mixing divisors and the 12*128 depth bias; change none of them alone.
FRACTURE_SCALE = 684.412
FRACTURE_HORIZONTAL = 0.0
FRACTURE_VERTICAL = 0.0
HEIGHT_NOISE_SCALE = 200.0
LEGACY_NOISE_SCALE = 1.121
SURFACE_NOISE_SCALE = 0.0625

# Water table defaults.
WATER_LEVEL_MAX = 63
WATER_LEVEL_MIN = 0
RIVER_WATER_LEVEL = 63

# Terrain modes: normal, old_generator, terrain_test, not_generate
TERRAIN_MODE = 'normal'
# With old_generator, take volatility from engine supplied factors
# instead of the biome temperature/wetness pair.
LEGACY_BIOME_FACTORS = False

# Bedrock (material id, see materials.py)
BEDROCK_BLOCK = 7
CEILING_BEDROCK = False
DISABLE_BEDROCK = False
FLAT_BEDROCK = False
REMOVE_SURFACE_STONE = False

# Chunks with more dry columns than this (out of 256) are reported mostly dry.
DRY_COLUMN_THRESHOLD = 250

# Enable ANSI colors in logs.
LOG_COLOR = True
# Drop log messages below this level (DEBUG, INFO, WARN, ERROR).
LOG_LEVEL = 'INFO'
# Log per-chunk generator activity.
LOG_MAPGEN = True


TERRAIN_MODES = ('normal', 'old_generator', 'terrain_test', 'not_generate')

# settings attribute -> module constant providing its default
_OPTIONS = {
    'world_height': 'WORLD_HEIGHT',
    'terrain_mode': 'TERRAIN_MODE',
    'legacy_biome_factors': 'LEGACY_BIOME_FACTORS',
    'fracture_horizontal': 'FRACTURE_HORIZONTAL',
    'fracture_vertical': 'FRACTURE_VERTICAL',
    'ceiling_bedrock': 'CEILING_BEDROCK',
    'disable_bedrock': 'DISABLE_BEDROCK',
    'flat_bedrock': 'FLAT_BEDROCK',
    'remove_surface_stone': 'REMOVE_SURFACE_STONE',
    'bedrock_block': 'BEDROCK_BLOCK',
}


class TerrainConfigError(ValueError):
    pass


def _fracture(value):
    if value < 0.0:
        return 1.0 / (abs(value) + 1.0)
    return value + 1.0


class WorldSettings(object):
    """World-wide generation switches.

    Options that are not overridden fall back to the module constants above
    at construction time, so a tool can retune the module before building
    settings.
    """

    def __init__(self, seed, **overrides):
        unknown = set(overrides) - set(_OPTIONS)
        if unknown:
            raise TerrainConfigError(f"unknown world settings: {sorted(unknown)}")
        self.seed = int(seed)
        module = globals()
        for name, const in _OPTIONS.items():
            setattr(self, name, overrides.get(name, module[const]))
        self._validate()

    def _validate(self):
        h = self.world_height
        if not isinstance(h, int) or h < MIN_WORLD_HEIGHT or h > MAX_WORLD_HEIGHT or h & (h - 1):
            raise TerrainConfigError(
                f"world height must be a power of two in [{MIN_WORLD_HEIGHT}, {MAX_WORLD_HEIGHT}], got {h!r}")
        if self.terrain_mode not in TERRAIN_MODES:
            raise TerrainConfigError(f"unknown terrain mode {self.terrain_mode!r}")
        for name in ('fracture_horizontal', 'fracture_vertical'):
            if not math.isfinite(getattr(self, name)):
                raise TerrainConfigError(f"{name} must be finite")
        if not 0 <= self.bedrock_block <= 255:
            raise TerrainConfigError(f"bedrock block id out of range: {self.bedrock_block}")

    @property
    def height_bits(self):
        return self.world_height.bit_length() - 1

    @property
    def cells_y(self):
        """Coarse density samples along y, including the extra top layer."""
        return self.world_height // CELL_HEIGHT + 1

    @property
    def xz_scale(self):
        return FRACTURE_SCALE * _fracture(self.fracture_horizontal)

    @property
    def y_scale(self):
        return FRACTURE_SCALE * _fracture(self.fracture_vertical)

    def create_bedrock(self, y):
        """Whether the bottom bedrock floor may be placed at height y."""
        return not (self.disable_bedrock and (not self.flat_bedrock or y != 0))

    def __repr__(self):
        return f"WorldSettings(seed={self.seed}, height={self.world_height}, mode={self.terrain_mode})"
