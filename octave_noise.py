#
# Improved gradient noise (Ken Perlin, 2002) summed over octaves.
#
# Each layer owns a shuffled permutation table and a random lattice offset
# drawn from a WorldRandom stream at construction time. After that a field is
# a pure function of the sample grid: nothing is drawn while sampling.
#
# Sampled fields are numpy float64 arrays with axes (x, z, y), i.e. the flat
# index of a sample is (x*size_z + z)*size_y + y.
#
import math
import numpy

from world_random import WorldRandom

# Horizontal lattice origins are folded into +-WRAP cells to keep precision.
WRAP = 16777216

SELECTOR_OCTAVES = 16
MIXING_OCTAVES = 8
SURFACE_OCTAVES = 4
LEGACY_OCTAVES = 10
HEIGHT_OCTAVES = 16


def fade(t):
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(t, a, b):
    return a + t * (b - a)


def grad(h, x, y, z):
    h = h & 15
    u = numpy.where(h < 8, x, y)
    v = numpy.where(h < 4, y, numpy.where((h == 12) | (h == 14), x, z))
    return numpy.where(h & 1, -u, u) + numpy.where(h & 2, -v, v)


def _wrap(value):
    cell = math.floor(value)
    frac = value - cell
    # truncated remainder: keeps the sign of the cell
    cell = cell % WRAP if cell >= 0 else -((-cell) % WRAP)
    return frac + cell


def _axis(origin, size, scale, shift):
    coord = origin + numpy.arange(size, dtype=numpy.float64) * scale + shift
    cell = numpy.floor(coord)
    frac = coord - cell
    return cell.astype(numpy.int64) & 255, frac, fade(frac)


def _prepare(out, shape):
    if min(shape) <= 0:
        raise ValueError(f"noise extents must be positive, got {shape}")
    if out is None:
        return numpy.zeros(shape, dtype=numpy.float64)
    if out.size != math.prod(shape):
        raise ValueError(f"noise buffer holds {out.size} samples, expected {math.prod(shape)} for {shape}")
    if out.dtype != numpy.float64 or not out.flags.c_contiguous:
        raise ValueError("noise buffer must be a contiguous float64 array")
    if out.shape != shape:
        out = out.reshape(shape)
    out.fill(0.0)
    return out


class ImprovedNoise(object):
    """One noise layer. Draws 3 doubles then 256 bounded ints from rand."""

    def __init__(self, rand):
        self.x_shift = rand.next_double() * 256.0
        self.y_shift = rand.next_double() * 256.0
        self.z_shift = rand.next_double() * 256.0
        perm = list(range(256))
        for i in range(256):
            j = rand.next_int(256 - i) + i
            perm[i], perm[j] = perm[j], perm[i]
        # doubled so corner lookups never need wrapping
        self.perm = numpy.array(perm + perm, dtype=numpy.int64)
        self.perm.flags.writeable = False

    def add_to(self, out, x, y, z, scale_x, scale_y, scale_z, step):
        """Add this layer, weighted 1/step, onto out's (x, z, y) grid."""
        size_x, size_z, size_y = out.shape
        xi, xf, u = _axis(x, size_x, scale_x, self.x_shift)
        yi, yf, v = _axis(y, size_y, scale_y, self.y_shift)
        zi, zf, w = _axis(z, size_z, scale_z, self.z_shift)
        xi, xf, u = xi[:, None, None], xf[:, None, None], u[:, None, None]
        zi, zf, w = zi[None, :, None], zf[None, :, None], w[None, :, None]
        yi, yf, v = yi[None, None, :], yf[None, None, :], v[None, None, :]

        p = self.perm
        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        near = lerp(v,
            lerp(u, grad(p[aa], xf, yf, zf), grad(p[ba], xf - 1.0, yf, zf)),
            lerp(u, grad(p[ab], xf, yf - 1.0, zf), grad(p[bb], xf - 1.0, yf - 1.0, zf)))
        far = lerp(v,
            lerp(u, grad(p[aa + 1], xf, yf, zf - 1.0), grad(p[ba + 1], xf - 1.0, yf, zf - 1.0)),
            lerp(u, grad(p[ab + 1], xf, yf - 1.0, zf - 1.0), grad(p[bb + 1], xf - 1.0, yf - 1.0, zf - 1.0)))
        out += lerp(w, near, far) * (1.0 / step)


class OctaveNoise(object):
    """Sum of layers; octave k samples at scale/2**k with amplitude 2**k."""

    def __init__(self, rand, octaves):
        if octaves <= 0:
            raise ValueError(f"octave count must be positive, got {octaves}")
        self.layers = [ImprovedNoise(rand) for _ in range(octaves)]

    def __len__(self):
        return len(self.layers)

    def noise_3d(self, out, x, y, z, size_x, size_y, size_z, scale_x, scale_y, scale_z):
        """Fill out (allocated when None) with the field over the given grid.

        x, y, z are the integer grid origin; the returned array has shape
        (size_x, size_z, size_y) and shares memory with out when one is given.
        """
        out = _prepare(out, (size_x, size_z, size_y))
        step = 1.0
        for layer in self.layers:
            layer.add_to(out,
                _wrap(x * step * scale_x), y * step * scale_y, _wrap(z * step * scale_z),
                scale_x * step, scale_y * step, scale_z * step, step)
            step /= 2.0
        return out

    def noise_2d(self, out, x, z, size_x, size_z, scale_x, scale_z):
        """Horizontal field at y = 0, shape (size_x, size_z)."""
        out = _prepare(out, (size_x, size_z))
        self.noise_3d(out.reshape(size_x, size_z, 1), x, 0, z, size_x, 1, size_z, scale_x, 1.0, scale_z)
        return out


class TerrainNoise(object):
    """The six octave generators of a world.

    Built in this fixed order from one stream seeded with the world seed:
    selector_a (16), selector_b (16), mixing (8), surface (4),
    legacy_volatility (10), height (16). Every layer consumes 3 doubles and
    256 bounded ints, so each generator's draws follow the previous one's
    without overlap, and the legacy field is drawn even when unused so both
    terrain modes share the same streams.
    """

    def __init__(self, seed):
        self.seed = int(seed)
        rand = WorldRandom(self.seed)
        self.selector_a = OctaveNoise(rand, SELECTOR_OCTAVES)
        self.selector_b = OctaveNoise(rand, SELECTOR_OCTAVES)
        self.mixing = OctaveNoise(rand, MIXING_OCTAVES)
        self.surface = OctaveNoise(rand, SURFACE_OCTAVES)
        self.legacy_volatility = OctaveNoise(rand, LEGACY_OCTAVES)
        self.height = OctaveNoise(rand, HEIGHT_OCTAVES)
