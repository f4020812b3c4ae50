import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from biomes import BiomeProfile, BiomeTable, BiomeWindow, StaticBiomeProvider
from density import DensitySynthesizer, column_density, noise_height, TOP_DENSITY
from grids import ChunkBuffers
from octave_noise import TerrainNoise
from terrain_config import WorldSettings
from terrain_shape import ColumnShape, make_terrain_shape

CELLS_Y = 17
ZEROS = np.zeros(CELLS_Y)


def _flat_shape(height=8.0, volatility=1.0, river_found=False, river_height=8.0, river_volatility=1.0):
    return ColumnShape(volatility, height, river_volatility, river_height, river_found, 63)


def _density(shape, profile=None, mixing=ZEROS, selector_a=ZEROS, selector_b=ZEROS, world_height=128):
    out = np.empty(CELLS_Y)
    return column_density(shape, profile or BiomeProfile(), mixing, selector_a, selector_b, world_height, out)


@pytest.mark.parametrize("raw, expected", [
    (0.0, -1.0 / 2.8),
    (8000.0, 0.125),
    (16000.0, 0.125),
    (-8000.0, -0.55 / 2.8),
])
def test_noise_height(raw, expected):
    assert noise_height(raw, BiomeProfile()) == pytest.approx(expected)


def test_noise_height_biome_limits():
    assert noise_height(8000.0, BiomeProfile(max_average_height=1.0)) == pytest.approx(0.25)
    assert noise_height(0.0, BiomeProfile(max_average_depth=1.0)) == pytest.approx(-2.0 / 2.8)


def test_depth_bias_is_steeper_above_ground():
    d = _density(_flat_shape())
    # (height - y) * 12 for 128 blocks, times 4 where positive
    assert d[0] == pytest.approx(8.0 * 12.0 * 4.0)
    assert d[7] == pytest.approx(12.0 * 4.0)
    assert d[8] == pytest.approx(0.0)
    assert d[10] == pytest.approx(-24.0)


def test_bias_scales_with_world_height():
    d = _density(_flat_shape(), world_height=256)
    assert d[10] == pytest.approx(-12.0)


def test_top_layers_taper_to_fixed_density():
    d = _density(_flat_shape())
    assert d[16] == pytest.approx(TOP_DENSITY)
    assert d[15] == pytest.approx((8.0 - 15.0) * 12.0 / 3.0 + TOP_DENSITY * 2.0 / 3.0)
    assert d[13] == pytest.approx((8.0 - 13.0) * 12.0)


def test_rivers_use_river_factors():
    d = _density(_flat_shape(river_found=True, river_height=4.0, river_volatility=2.0))
    assert d[10] == pytest.approx((4.0 - 10.0) * 12.0 / 2.0)


def test_selector_mixing():
    a = np.full(CELLS_Y, 512.0)
    b = np.full(CELLS_Y, -512.0)
    shape = _flat_shape()
    base = _density(shape)
    low = _density(shape, mixing=np.full(CELLS_Y, -20.0), selector_a=a, selector_b=b)
    high = _density(shape, mixing=np.full(CELLS_Y, 20.0), selector_a=a, selector_b=b)
    mid = _density(shape, mixing=np.full(CELLS_Y, 0.0), selector_a=a, selector_b=b)
    np.testing.assert_allclose(low[:13] - base[:13], 1.0)
    np.testing.assert_allclose(high[:13] - base[:13], -1.0)
    np.testing.assert_allclose(mid[:13] - base[:13], 0.0, atol=1e-12)


def test_selector_weights_from_profile():
    a = np.full(CELLS_Y, 512.0)
    profile = BiomeProfile(volatility1=3.0)
    d = _density(_flat_shape(), profile=profile, mixing=np.full(CELLS_Y, -20.0), selector_a=a)
    assert d[8] == pytest.approx(3.0)


def test_height_control_can_be_disabled():
    a = np.full(CELLS_Y, 256.0)
    profile = BiomeProfile(disable_notch_height_control=True)
    d = _density(_flat_shape(), profile=profile, mixing=np.full(CELLS_Y, -20.0), selector_a=a)
    np.testing.assert_allclose(d, 0.5)


def test_height_matrix_is_added_per_layer():
    matrix = [float(i) for i in range(CELLS_Y)]
    d = _density(_flat_shape(), profile=BiomeProfile(height_matrix=matrix))
    base = _density(_flat_shape())
    np.testing.assert_allclose(d - base, matrix)


def test_synthesize_shapes_and_buffer_reuse():
    settings = WorldSettings(99)
    noise = TerrainNoise(settings.seed)
    provider = StaticBiomeProvider()
    table = BiomeTable({0: BiomeProfile()})
    window = BiomeWindow.sample(provider, table, -2, -2, 9, 9)
    synth = DensitySynthesizer(settings, noise, make_terrain_shape(settings, noise))

    buffers = ChunkBuffers()
    density, water = synth.synthesize(window, provider, 0, 0, buffers)
    assert density.shape == (5, 5, settings.cells_y)
    assert water.shape == (5, 5)
    assert np.all(water == 63)
    first = density.copy()

    synth.synthesize(BiomeWindow.sample(provider, table, 10, 2, 9, 9), provider, 3, 1, buffers)
    again, _ = synth.synthesize(window, provider, 0, 0, buffers)
    assert again is buffers.density
    assert np.array_equal(again, first)
    # bottom is solid and the ceiling is open
    assert np.all(first[:, :, 0] > 0.0)
    assert np.all(first[:, :, -1] < 0.0)
