"""Biome configuration and the interface to the engine's biome lookup."""
import math
import numpy

import terrain_config
import materials
from grids import grid_from_rows


class BiomeConfigError(ValueError):
    pass


class UnknownBiomeError(KeyError):
    pass


class BiomeProfile(object):
    """Static configuration of one biome.

    Class attributes are the defaults; keyword arguments override them per
    instance. Profiles are validated on construction and treated as
    immutable afterwards.
    """
    name = 'Plains'
    surface_block = materials.GRASS
    ground_block = materials.DIRT
    water_block = materials.WATER
    ice_block = materials.ICE
    water_level_min = terrain_config.WATER_LEVEL_MIN
    water_level_max = terrain_config.WATER_LEVEL_MAX
    biome_height = 0.1
    biome_volatility = 0.3
    river_height = -1.0
    river_volatility = 0.3
    river_water_level = terrain_config.RIVER_WATER_LEVEL
    # selector noise weights and the mixing thresholds between them
    volatility1 = 1.0
    volatility2 = 1.0
    volatility_weight1 = 0.0
    volatility_weight2 = 1.0
    max_average_height = 0.0
    max_average_depth = 0.0
    # legacy terrain shape only
    biome_temperature = 0.5
    biome_wetness = 0.5
    disable_notch_height_control = False
    # per coarse y layer density offsets; None means all zero
    height_matrix = None

    BLOCK_FIELDS = ('surface_block', 'ground_block', 'water_block', 'ice_block')
    LEVEL_FIELDS = ('water_level_min', 'water_level_max', 'river_water_level')
    FLOAT_FIELDS = ('biome_height', 'biome_volatility', 'river_height', 'river_volatility',
        'volatility1', 'volatility2', 'volatility_weight1', 'volatility_weight2',
        'max_average_height', 'max_average_depth', 'biome_temperature', 'biome_wetness')

    OTHER_FIELDS = ('name', 'disable_notch_height_control', 'height_matrix')

    def __init__(self, **overrides):
        allowed = self.BLOCK_FIELDS + self.LEVEL_FIELDS + self.FLOAT_FIELDS + self.OTHER_FIELDS
        for key, value in overrides.items():
            if key not in allowed:
                raise BiomeConfigError(f"unknown biome option {key!r}")
            setattr(self, key, value)
        self._check()

    def _check(self):
        for key in self.BLOCK_FIELDS:
            value = getattr(self, key)
            if not isinstance(value, (int, numpy.integer)) or not 0 <= value <= 255:
                raise BiomeConfigError(f"{self.name}: {key} must be a material id in [0, 255], got {value!r}")
        for key in self.LEVEL_FIELDS:
            if not isinstance(getattr(self, key), (int, numpy.integer)):
                raise BiomeConfigError(f"{self.name}: {key} must be an integer")
        for key in self.FLOAT_FIELDS:
            value = getattr(self, key)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise BiomeConfigError(f"{self.name}: {key} must be a finite number, got {value!r}")
        if self.height_matrix is not None:
            matrix = tuple(float(v) for v in self.height_matrix)
            if not all(math.isfinite(v) for v in matrix):
                raise BiomeConfigError(f"{self.name}: height matrix must be finite")
            self.height_matrix = matrix

    def validate(self, world_height):
        """Check the world dependent limits."""
        if not 0 <= self.water_level_min < world_height:
            raise BiomeConfigError(f"{self.name}: water_level_min {self.water_level_min} outside [0, {world_height})")
        if not 0 <= self.water_level_max < world_height:
            raise BiomeConfigError(f"{self.name}: water_level_max {self.water_level_max} outside [0, {world_height})")
        if not 0 <= self.river_water_level < world_height:
            raise BiomeConfigError(f"{self.name}: river_water_level {self.river_water_level} outside [0, {world_height})")
        cells_y = world_height // terrain_config.CELL_HEIGHT + 1
        if self.height_matrix is not None and len(self.height_matrix) != cells_y:
            raise BiomeConfigError(
                f"{self.name}: height matrix needs {cells_y} entries for height {world_height}, got {len(self.height_matrix)}")

    def height_offsets(self, cells_y):
        if self.height_matrix is None:
            return numpy.zeros(cells_y)
        if len(self.height_matrix) != cells_y:
            raise BiomeConfigError(f"{self.name}: height matrix needs {cells_y} entries, got {len(self.height_matrix)}")
        return numpy.array(self.height_matrix, dtype=numpy.float64)

    def __repr__(self):
        return f"BiomeProfile({self.name!r})"


class BiomeTable(object):
    """Biome id -> BiomeProfile."""

    def __init__(self, profiles):
        self._profiles = dict((int(k), v) for k, v in profiles.items())
        for biome_id, profile in self._profiles.items():
            if not isinstance(profile, BiomeProfile):
                raise BiomeConfigError(f"biome {biome_id}: expected a BiomeProfile, got {type(profile).__name__}")

    def __getitem__(self, biome_id):
        try:
            return self._profiles[int(biome_id)]
        except KeyError:
            raise UnknownBiomeError(f"no configuration for biome id {int(biome_id)}") from None

    def __contains__(self, biome_id):
        return int(biome_id) in self._profiles

    def __len__(self):
        return len(self._profiles)

    def validate(self, world_height):
        for profile in self._profiles.values():
            profile.validate(world_height)

    def attribute_grid(self, ids, name, dtype):
        """Array shaped like ids holding the named profile attribute."""
        out = numpy.empty(ids.shape, dtype=dtype)
        for biome_id in numpy.unique(ids):
            out[ids == biome_id] = getattr(self[biome_id], name)
        return out


class BiomeContextProvider(object):
    """Biome lookups supplied by the engine.

    Every method returns a flat sequence with x varying fastest
    (index = x + z*width). Unzoomed lookups are in coarse (4 block) units,
    the others in block units.
    """

    def get_biomes_unzoomed(self, x, z, width, depth):
        raise NotImplementedError

    def get_rivers_unzoomed(self, x, z, width, depth):
        """Truthy where the coarse tile is a river."""
        return [0] * (width * depth)

    def get_biomes(self, x, z, width, depth):
        raise NotImplementedError

    def get_temperatures(self, x, z, width, depth):
        raise NotImplementedError

    def get_legacy_biome_factors(self, x, z, width, depth):
        """Temperature * rainfall per block, for the legacy terrain shape."""
        raise NotImplementedError


class StaticBiomeProvider(BiomeContextProvider):
    """One biome everywhere, no rivers."""

    def __init__(self, biome_id=0, temperature=0.8, legacy_factor=0.5):
        self.biome_id = biome_id
        self.temperature = temperature
        self.legacy_factor = legacy_factor

    def get_biomes_unzoomed(self, x, z, width, depth):
        return [self.biome_id] * (width * depth)

    def get_biomes(self, x, z, width, depth):
        return [self.biome_id] * (width * depth)

    def get_temperatures(self, x, z, width, depth):
        return [self.temperature] * (width * depth)

    def get_legacy_biome_factors(self, x, z, width, depth):
        return [self.legacy_factor] * (width * depth)


class BiomeWindow(object):
    """Coarse biome ids and river flags around a chunk, indexed [x, z]."""

    def __init__(self, table, ids, rivers):
        if ids.shape != rivers.shape:
            raise ValueError(f"biome and river grids differ in shape: {ids.shape} vs {rivers.shape}")
        self.table = table
        self.ids = ids
        self.rivers = rivers

    @classmethod
    def sample(cls, provider, table, x, z, width, depth):
        ids = grid_from_rows(provider.get_biomes_unzoomed(x, z, width, depth), width, depth,
            dtype=numpy.int64, what="unzoomed biomes")
        rivers = grid_from_rows(provider.get_rivers_unzoomed(x, z, width, depth), width, depth,
            dtype=bool, what="unzoomed rivers")
        return cls(table, ids, rivers)

    @property
    def shape(self):
        return self.ids.shape

    def profile(self, x, z):
        return self.table[self.ids[x, z]]

    def is_river(self, x, z):
        return bool(self.rivers[x, z])
