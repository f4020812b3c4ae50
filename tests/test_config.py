import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import terrain_config
from terrain_config import WorldSettings, TerrainConfigError, FRACTURE_SCALE
from biomes import (BiomeProfile, BiomeTable, BiomeWindow, BiomeConfigError, UnknownBiomeError,
    StaticBiomeProvider, BiomeContextProvider)
import materials


def test_defaults_come_from_module(monkeypatch):
    s = WorldSettings("42")
    assert s.seed == 42
    assert s.world_height == 128
    assert s.terrain_mode == 'normal'
    monkeypatch.setattr(terrain_config, "WORLD_HEIGHT", 256)
    assert WorldSettings(1).world_height == 256


def test_derived_values():
    s = WorldSettings(0)
    assert s.height_bits == 7
    assert s.cells_y == 17
    assert s.xz_scale == FRACTURE_SCALE
    assert WorldSettings(0, world_height=16).cells_y == 3


@pytest.mark.parametrize("fracture, factor", [(0.0, 1.0), (1.0, 2.0), (-1.0, 0.5), (-3.0, 0.25)])
def test_fracture_scaling(fracture, factor):
    s = WorldSettings(0, fracture_horizontal=fracture, fracture_vertical=fracture)
    assert s.xz_scale == pytest.approx(FRACTURE_SCALE * factor)
    assert s.y_scale == pytest.approx(FRACTURE_SCALE * factor)


def test_bedrock_switches():
    assert all(WorldSettings(0).create_bedrock(y) for y in range(5))
    disabled = WorldSettings(0, disable_bedrock=True)
    assert not any(disabled.create_bedrock(y) for y in range(5))
    flat = WorldSettings(0, disable_bedrock=True, flat_bedrock=True)
    assert [flat.create_bedrock(y) for y in range(5)] == [True, False, False, False, False]


def test_settings_errors_are_value_errors():
    with pytest.raises(ValueError):
        WorldSettings(0, world_height=8)
    with pytest.raises(TerrainConfigError):
        WorldSettings(0, bedrock_block=300)


def test_profile_overrides_and_defaults():
    p = BiomeProfile(name='Desert', surface_block=materials.SAND)
    assert p.surface_block == materials.SAND
    assert p.ground_block == materials.DIRT
    assert BiomeProfile().surface_block == materials.GRASS


@pytest.mark.parametrize("kwargs", [
    {'surface_block': 256},
    {'ground_block': -1},
    {'water_level_max': 62.5},
    {'biome_height': float('inf')},
    {'height_matrix': [0.0, float('nan')]},
    {'sea_level': 40},
])
def test_profile_rejects_bad_values(kwargs):
    with pytest.raises(BiomeConfigError):
        BiomeProfile(**kwargs)


def test_profile_checked_against_world_height():
    BiomeProfile(water_level_max=100).validate(128)
    with pytest.raises(BiomeConfigError):
        BiomeProfile(water_level_max=100).validate(64)
    with pytest.raises(BiomeConfigError):
        BiomeProfile(height_matrix=[0.0] * 9).validate(128)
    BiomeProfile(height_matrix=[0.0] * 17).validate(128)


def test_table_lookup():
    table = BiomeTable({0: BiomeProfile(), 3: BiomeProfile(name='Hills')})
    assert len(table) == 2
    assert 3 in table and 4 not in table
    assert table[np.int64(3)].name == 'Hills'
    with pytest.raises(UnknownBiomeError):
        table[4]
    with pytest.raises(KeyError):
        table[4]
    with pytest.raises(BiomeConfigError):
        BiomeTable({0: object()})


def test_attribute_grid():
    table = BiomeTable({0: BiomeProfile(), 1: BiomeProfile(water_level_max=40)})
    ids = np.array([[0, 1], [1, 1]])
    grid = table.attribute_grid(ids, 'water_level_max', np.int64)
    assert grid.tolist() == [[63, 40], [40, 40]]


def test_window_from_provider():
    table = BiomeTable({0: BiomeProfile()})
    window = BiomeWindow.sample(StaticBiomeProvider(), table, -2, -2, 9, 9)
    assert window.shape == (9, 9)
    assert window.profile(4, 4) is table[0]
    assert window.is_river(4, 4) is False


def test_provider_interface_must_be_implemented():
    provider = BiomeContextProvider()
    assert provider.get_rivers_unzoomed(0, 0, 2, 2) == [0, 0, 0, 0]
    with pytest.raises(NotImplementedError):
        provider.get_biomes(0, 0, 16, 16)
