# terrain_engine/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides functions for generating seeded 2D simplex noise and a
fractal (multi-octave) composition built on top of it. It is designed to be a
pure, stateless utility.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array, length 512).
    - x, y: Scalars or 2D NumPy arrays of noise-space coordinates.
    - channel: Integer layer id. Each channel samples the same field at a
      fixed coordinate offset, yielding an uncorrelated signal.
    - octaves, persistence, lacunarity, amplitude: Standard fractal
      parameters. base_frequency converts world units to noise units.
- Outputs:
    - Noise values in the range [-1, 1].
- Side Effects: None.
- Invariants: Deterministic for a given table. The shape of array outputs
  matches the shape of the input x and y.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Skew / unskew factors for the 2D simplex lattice.
_F2 = 0.5 * (3.0 ** 0.5 - 1.0)
_G2 = (3.0 - 3.0 ** 0.5) / 6.0

# Twelve gradient directions (edges of a cube projected to 2D).
_GRADIENT_VECTORS = np.array([
    [1.0, 1.0], [-1.0, 1.0], [1.0, -1.0], [-1.0, -1.0],
    [1.0, 0.0], [-1.0, 0.0], [1.0, 0.0], [-1.0, 0.0],
    [0.0, 1.0], [0.0, -1.0], [0.0, 1.0], [0.0, -1.0],
])


def create_permutation_table(seed: int) -> np.ndarray:
    """Builds the doubled 512-entry permutation table for a seed."""
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


@njit
def _corner(gi, x, y):
    "Radial falloff contribution of one simplex corner."
    t = 0.5 - x * x - y * y
    if t < 0.0:
        return 0.0
    t *= t
    g = _GRADIENT_VECTORS[gi]
    return t * t * (g[0] * x + g[1] * y)


@njit
def simplex_noise_2d(p, x, y):
    """
    Single-octave 2D simplex noise, clamped to [-1, 1].
    Gradients live on the lattice points of a skewed triangular grid and are
    picked by hashing the lattice coordinates through the permutation table.
    """
    s = (x + y) * _F2
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))

    t = (i + j) * _G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the skewed cell
    if x0 > y0:
        i1 = 1
        j1 = 0
    else:
        i1 = 0
        j1 = 1

    x1 = x0 - i1 + _G2
    y1 = y0 - j1 + _G2
    x2 = x0 - 1.0 + 2.0 * _G2
    y2 = y0 - 1.0 + 2.0 * _G2

    ii = i & 255
    jj = j & 255
    gi0 = p[ii + p[jj]] % 12
    gi1 = p[ii + i1 + p[jj + j1]] % 12
    gi2 = p[ii + 1 + p[jj + 1]] % 12

    value = 70.0 * (_corner(gi0, x0, y0) + _corner(gi1, x1, y1) + _corner(gi2, x2, y2))
    return min(1.0, max(-1.0, value))


@njit
def _fractal_point(p, x, y, offset_x, offset_y, octaves, persistence, lacunarity, amplitude, base_frequency):
    value = 0.0
    max_value = 0.0
    current_amplitude = amplitude
    current_frequency = base_frequency

    for _ in range(octaves):
        value += simplex_noise_2d(
            p, x * current_frequency + offset_x, y * current_frequency + offset_y
        ) * current_amplitude
        max_value += current_amplitude
        current_amplitude *= persistence
        current_frequency *= lacunarity

    if max_value == 0.0:
        return 0.0
    return min(1.0, max(-1.0, value / max_value))


@njit
def _noise_grid(p, x, y, offset_x, offset_y):
    rows, cols = x.shape
    out = np.empty((rows, cols))
    for i in range(rows):
        for j in range(cols):
            out[i, j] = simplex_noise_2d(p, x[i, j] + offset_x, y[i, j] + offset_y)
    return out


@njit
def _fractal_grid(p, x, y, offset_x, offset_y, octaves, persistence, lacunarity, amplitude, base_frequency):
    rows, cols = x.shape
    out = np.empty((rows, cols))
    for i in range(rows):
        for j in range(cols):
            out[i, j] = _fractal_point(
                p, x[i, j], y[i, j], offset_x, offset_y,
                octaves, persistence, lacunarity, amplitude, base_frequency
            )
    return out


def channel_offset(channel: int) -> tuple[float, float]:
    """Returns the noise-space offset used for a channel."""
    return channel * DEFAULTS.CHANNEL_OFFSET_X, channel * DEFAULTS.CHANNEL_OFFSET_Y


def sample(p: np.ndarray, x: float, y: float, channel: int = 0) -> float:
    """Samples the noise field at a single noise-space coordinate."""
    ox, oy = channel_offset(channel)
    return float(simplex_noise_2d(p, float(x) + ox, float(y) + oy))


def sample_grid(p: np.ndarray, x: np.ndarray, y: np.ndarray, channel: int = 0) -> np.ndarray:
    """Samples the noise field over 2D coordinate arrays."""
    ox, oy = channel_offset(channel)
    return _noise_grid(p, np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64), ox, oy)


def fractal(
    p: np.ndarray, x: float, y: float,
    octaves: int = DEFAULTS.DEFAULT_OCTAVES,
    persistence: float = DEFAULTS.DEFAULT_PERSISTENCE,
    lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY,
    amplitude: float = DEFAULTS.DEFAULT_AMPLITUDE,
    base_frequency: float = DEFAULTS.DEFAULT_SCALE,
    channel: int = 0,
) -> float:
    """
    Fractal noise at a single world coordinate: the weighted mean of `octaves`
    simplex samples, each octave at `lacunarity` times the frequency and
    `persistence` times the weight of the previous one.
    """
    ox, oy = channel_offset(channel)
    return float(_fractal_point(
        p, float(x), float(y), ox, oy,
        max(1, int(octaves)), float(persistence), float(lacunarity),
        float(amplitude), float(base_frequency)
    ))


def fractal_noise_2d(
    p: np.ndarray, x: np.ndarray, y: np.ndarray,
    octaves: int = DEFAULTS.DEFAULT_OCTAVES,
    persistence: float = DEFAULTS.DEFAULT_PERSISTENCE,
    lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY,
    amplitude: float = DEFAULTS.DEFAULT_AMPLITUDE,
    base_frequency: float = DEFAULTS.DEFAULT_SCALE,
    channel: int = 0,
) -> np.ndarray:
    """
    Generate 2D fractal noise over world coordinate arrays.
    The per-pixel loop is JIT-compiled with Numba.
    """
    ox, oy = channel_offset(channel)
    return _fractal_grid(
        p,
        np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64),
        ox, oy,
        max(1, int(octaves)), float(persistence), float(lacunarity),
        float(amplitude), float(base_frequency)
    )
