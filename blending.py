"""Area weighted biome blending.

Each coarse sample looks at the (2r+1) x (2r+1) biome tiles around it and
averages their height and volatility with a distance falloff kernel. Tiles
taller than the center count half, so mountains do not bleed height into
neighboring valleys. A second, river aware pass substitutes river values
on river tiles. Sums are float32 and the neighbor scan order is fixed
(x outer, z inner, ascending) because it decides the rounding.
"""
import collections
import numpy

from terrain_config import BLEND_RADIUS

BlendSample = collections.namedtuple('BlendSample',
    'volatility height river_volatility river_height river_found water_level')

_F32 = numpy.float32
_ZERO = _F32(0.0)
_TWO = _F32(2.0)
_EPSILON = numpy.finfo(numpy.float32).eps


def near_biome_kernel(radius=BLEND_RADIUS):
    """K[dx + r, dz + r] = 10 / sqrt(dx^2 + dz^2 + 0.2), peak at the center."""
    size = 2 * radius + 1
    kernel = numpy.zeros((size, size), dtype=numpy.float32)
    for dx in range(-radius, radius + 1):
        for dz in range(-radius, radius + 1):
            kernel[dx + radius, dz + radius] = _F32(10.0) / numpy.sqrt(_F32(dx * dx + dz * dz) + _F32(0.2))
    kernel.flags.writeable = False
    return kernel


def _weight(k, height):
    denom = height + _TWO
    if denom == 0:
        denom = _EPSILON
    return abs(k / denom)


def _normalize(total, weight):
    if weight == 0:
        return _ZERO
    return total / weight


def _finish(volatility, height):
    # volatility must never reach zero: it divides the depth bias
    if volatility < 0:
        volatility = _ZERO
    volatility = volatility * _F32(0.9) + _F32(0.1)
    height = (height * _F32(4.0) - _F32(1.0)) / _F32(8.0)
    return float(volatility), float(height)


class BiomeBlender(object):

    def __init__(self, radius=BLEND_RADIUS):
        self.radius = radius
        self.kernel = near_biome_kernel(radius)

    def blend(self, window, x, z):
        """Blend around coarse sample (x, z).

        The window must extend radius tiles beyond the sample grid on every
        side; sample (0, 0) sits at window tile (radius, radius).
        """
        r = self.radius
        cx, cz = x + r, z + r
        if cx - r < 0 or cz - r < 0 or cx + r >= window.shape[0] or cz + r >= window.shape[1]:
            raise ValueError(f"blend sample ({x}, {z}) needs a {r} tile margin inside window {window.shape}")
        center = window.profile(cx, cz)
        center_height = _F32(center.biome_height)
        river_found = window.is_river(cx, cz)
        if river_found:
            river_center_height = _F32(center.river_height)
            water_level = center.river_water_level
        else:
            river_center_height = center_height
            water_level = center.water_level_max

        volatility_sum = height_sum = weight_sum = _ZERO
        river_volatility_sum = river_height_sum = river_weight_sum = _ZERO

        for dx in range(-r, r + 1):
            for dz in range(-r, r + 1):
                k = self.kernel[dx + r, dz + r]
                neighbor = window.profile(cx + dx, cz + dz)
                height = _F32(neighbor.biome_height)
                volatility = _F32(neighbor.biome_volatility)

                weight = _weight(k, height)
                if height > center_height:
                    weight /= _TWO
                volatility_sum += volatility * weight
                height_sum += height * weight
                weight_sum += weight

                if window.is_river(cx + dx, cz + dz):
                    river_found = True
                    height = _F32(neighbor.river_height)
                    volatility = _F32(neighbor.river_volatility)
                    level = neighbor.river_water_level
                else:
                    level = neighbor.water_level_max

                weight = _weight(k, height)
                if height > river_center_height:
                    height /= _TWO
                river_volatility_sum += volatility * weight
                river_height_sum += height * weight
                river_weight_sum += weight

                # plain minimum, never averaged
                if level < water_level:
                    water_level = level

        volatility, height = _finish(_normalize(volatility_sum, weight_sum),
            _normalize(height_sum, weight_sum))
        river_volatility, river_height = _finish(_normalize(river_volatility_sum, river_weight_sum),
            _normalize(river_height_sum, river_weight_sum))
        return BlendSample(volatility, height, river_volatility, river_height, river_found, int(water_level))
