"""Noise kernels for heightfield generation.

Provides Perlin, value, Worley (cellular) and simplex noise. Every kernel is
a pure function of its coordinates and accepts scalars or numpy arrays, which
are broadcast together. No kernel reads global mutable state, so identical
inputs always give identical outputs.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Ken Perlin's reference permutation, doubled to avoid index wrapping
_PERMUTATION = np.array([
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
], dtype=np.int64)
_PERM = np.concatenate([_PERMUTATION, _PERMUTATION])

# Simplex skew/unskew factors
F2 = 0.5 * (np.sqrt(3.0) - 1.0)
G2 = (3.0 - np.sqrt(3.0)) / 6.0

_MASK_31 = 0x7FFFFFFF
_MASK_32 = 0xFFFFFFFF


def _coords(x: ArrayLike, y: ArrayLike) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    x_arr, y_arr = np.broadcast_arrays(
        np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)
    )
    return x_arr, y_arr


def lerp(a: ArrayLike, b: ArrayLike, t: ArrayLike) -> NDArray[np.float64]:
    """Linear interpolation from a to b."""
    a = np.asarray(a, dtype=np.float64)
    return a + (np.asarray(b, dtype=np.float64) - a) * t


def hermite(t: ArrayLike) -> NDArray[np.float64]:
    """Cubic Hermite easing 3t^2 - 2t^3."""
    t = np.asarray(t, dtype=np.float64)
    return t * t * (3.0 - 2.0 * t)


def smoothstep(edge0: float, edge1: float, x: ArrayLike) -> NDArray[np.float64]:
    """Smooth Hermite interpolation between 0 and 1.

    Args:
        edge0: Lower edge of transition.
        edge1: Upper edge of transition.
        x: Input values.

    Returns:
        Smoothly interpolated values in [0, 1].
    """
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return hermite(t)


def random01(ix: ArrayLike, iy: ArrayLike) -> NDArray[np.float64]:
    """Deterministic pseudo-random value in [0, 1) for an integer lattice point.

    Uses the sine scramble frac(sin(ix * 12.9898 + iy * 78.233) * 43758.5453).
    """
    ix = np.asarray(ix, dtype=np.float64)
    iy = np.asarray(iy, dtype=np.float64)
    return np.mod(np.sin(ix * 12.9898 + iy * 78.233) * 43758.5453, 1.0)


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic fade 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


# Perlin gradients: four diagonals then four axes, selected by hash & 7
PERLIN_GRADIENTS = np.array([
    [1.0, 1.0], [-1.0, 1.0], [1.0, -1.0], [-1.0, -1.0],
    [1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0],
])


def _perlin_gradient(h: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
    """Dot product of one of the eight PERLIN_GRADIENTS with (x, y)."""
    gradient = PERLIN_GRADIENTS[h & 7]
    return gradient[..., 0] * x + gradient[..., 1] * y


def _gradient(h: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
    """Signed u + v gradient term of the simplex hash.

    The u/v swap for h >= 4 only reorders the sum, so this selects among
    the four diagonals (+-1, +-1).
    """
    h = h & 7
    u = np.where(h < 4, x, y)
    v = np.where(h < 4, y, x)
    return np.where(h & 1, -u, u) + np.where(h & 2, -v, v)


def perlin_noise(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """2D gradient noise.

    Args:
        x: X coordinates.
        y: Y coordinates.

    Returns:
        Noise values in [0, 1].
    """
    x, y = _coords(x, y)
    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xf = x - x_floor
    yf = y - y_floor
    xi = x_floor.astype(np.int64) & 255
    yi = y_floor.astype(np.int64) & 255

    u = _fade(xf)
    v = _fade(yf)

    aa = _PERM[_PERM[xi] + yi]
    ab = _PERM[_PERM[xi] + yi + 1]
    ba = _PERM[_PERM[xi + 1] + yi]
    bb = _PERM[_PERM[xi + 1] + yi + 1]

    x1 = lerp(_perlin_gradient(aa, xf, yf), _perlin_gradient(ba, xf - 1.0, yf), u)
    x2 = lerp(_perlin_gradient(ab, xf, yf - 1.0), _perlin_gradient(bb, xf - 1.0, yf - 1.0), u)
    noise = lerp(x1, x2, v)

    return np.clip((noise + 1.0) * 0.5, 0.0, 1.0)


def value_noise(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Bilinearly interpolated lattice noise with Hermite smoothing.

    Args:
        x: X coordinates.
        y: Y coordinates.

    Returns:
        Noise values in [0, 1).
    """
    x, y = _coords(x, y)
    x0 = np.floor(x)
    y0 = np.floor(y)
    tx = hermite(x - x0)
    ty = hermite(y - y0)

    v00 = random01(x0, y0)
    v10 = random01(x0 + 1.0, y0)
    v01 = random01(x0, y0 + 1.0)
    v11 = random01(x0 + 1.0, y0 + 1.0)

    top = lerp(v00, v10, tx)
    bottom = lerp(v01, v11, tx)
    return lerp(top, bottom, ty)


def feature_point(cell_x: ArrayLike, cell_y: ArrayLike) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Jittered feature point owned by an integer cell.

    Args:
        cell_x: Integer cell x coordinate.
        cell_y: Integer cell y coordinate.

    Returns:
        Tuple of (x, y) feature point coordinates inside the cell.
    """
    cell_x = np.asarray(cell_x, dtype=np.float64)
    cell_y = np.asarray(cell_y, dtype=np.float64)
    return cell_x + random01(cell_x, cell_y), cell_y + random01(cell_y, cell_x)


def worley_noise(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Cellular noise: distance to the nearest feature point.

    Searches the cell containing each sample and its 8 neighbours.

    Args:
        x: X coordinates.
        y: Y coordinates.

    Returns:
        Distances clamped to [0, 1].
    """
    x, y = _coords(x, y)
    xi = np.floor(x)
    yi = np.floor(y)

    min_dist = np.ones_like(x)
    for i in (-1, 0, 1):
        for j in (-1, 0, 1):
            px, py = feature_point(xi + i, yi + j)
            min_dist = np.minimum(min_dist, np.hypot(x - px, y - py))

    return min_dist


def _hash_coord(i: NDArray[np.int64], j: NDArray[np.int64]) -> NDArray[np.int64]:
    """Integer avalanche hash with 32-bit wrapping arithmetic."""
    h = (i * 1619 + j * 31337) & _MASK_31
    h2 = (h * h) & _MASK_32
    h3 = (h2 * h) & _MASK_32
    return (h3 * 60493 + h2 * 19990303 + h * 1376312589) & _MASK_31


def _simplex_corner(
    i: NDArray[np.int64],
    j: NDArray[np.int64],
    dx: NDArray[np.float64],
    dy: NDArray[np.float64],
) -> NDArray[np.float64]:
    t = 0.5 - dx * dx - dy * dy
    t2 = t * t
    contribution = t2 * t2 * _gradient(_hash_coord(i, j), dx, dy)
    # Exactly zero outside the kernel radius
    return np.where(t < 0.0, 0.0, contribution)


def simplex_noise(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """2D simplex noise.

    Args:
        x: X coordinates.
        y: Y coordinates.

    Returns:
        Noise values, roughly in [-1, 1].
    """
    x, y = _coords(x, y)

    # Skew input space to find the simplex cell
    s = (x + y) * F2
    i = np.floor(x + s)
    j = np.floor(y + s)

    t = (i + j) * G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the cell
    i1 = np.where(x0 > y0, 1, 0)
    j1 = 1 - i1

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 - 1.0 + 2.0 * G2
    y2 = y0 - 1.0 + 2.0 * G2

    ii = i.astype(np.int64)
    jj = j.astype(np.int64)

    n0 = _simplex_corner(ii, jj, x0, y0)
    n1 = _simplex_corner(ii + i1, jj + j1, x1, y1)
    n2 = _simplex_corner(ii + 1, jj + 1, x2, y2)

    return 32.0 * (n0 + n1 + n2)
