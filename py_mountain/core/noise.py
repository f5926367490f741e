"""
Seeded 2D gradient noise.

Classic Perlin scheme: a shuffled 256-entry permutation table (duplicated
to 512 entries so corner hashes never wrap), quintic fade, bilinear lerp of
the four corner gradient dot-products. Works on scalars or NumPy arrays.
"""

from typing import Iterable, Tuple, Union

import numpy as np

from .alea_prng import AleaPRNG

ArrayLike = Union[float, np.ndarray]

# Gradient directions indexed by hash & 7
GRADIENTS = np.array(
    [
        (1.0, 1.0),
        (-1.0, 1.0),
        (1.0, -1.0),
        (-1.0, -1.0),
        (1.0, 0.0),
        (-1.0, 0.0),
        (0.0, 1.0),
        (0.0, -1.0),
    ],
    dtype=np.float64,
)


def fade(t: ArrayLike) -> ArrayLike:
    """Quintic smoothstep t^3 (t (6t - 15) + 10)."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(t: ArrayLike, a: ArrayLike, b: ArrayLike) -> ArrayLike:
    """Linear interpolation between a and b."""
    return a + t * (b - a)


def grad(hash_value: ArrayLike, x: ArrayLike, y: ArrayLike) -> ArrayLike:
    """Dot product of the hashed gradient direction with (x, y)."""
    g = GRADIENTS[np.asarray(hash_value) & 7]
    return g[..., 0] * x + g[..., 1] * y


class NoiseField:
    """
    Deterministic gradient noise sampler.

    The permutation table is built once, eagerly, from the injected PRNG.
    Sampling never touches the PRNG again, so ``sample`` is a pure function
    of its arguments for a given field.
    """

    def __init__(self, prng: AleaPRNG):
        """
        Initialize the noise field.

        Args:
            prng: Random source used to shuffle the permutation table
        """
        base = np.array(prng.permutation(256), dtype=np.int64)
        self.perm = np.concatenate([base, base])

    @classmethod
    def from_permutation(cls, permutation: Iterable[int]) -> "NoiseField":
        """Build a field from an explicit 256-entry permutation."""
        base = np.array(list(permutation), dtype=np.int64)
        if base.shape != (256,):
            raise ValueError(f"Permutation must have 256 entries, got {base.size}")
        field = cls.__new__(cls)
        field.perm = np.concatenate([base, base])
        return field

    def sample(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """
        Sample noise at (x, y).

        Args:
            x: X coordinate(s)
            y: Y coordinate(s), broadcastable against x

        Returns:
            Noise value(s), roughly in [-1, 1]; float for scalar input
        """
        scalar = np.isscalar(x) and np.isscalar(y)
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        x_floor = np.floor(x)
        y_floor = np.floor(y)
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255
        xf = x - x_floor
        yf = y - y_floor

        u = fade(xf)
        v = fade(yf)

        p = self.perm
        a = p[xi] + yi
        aa = p[a]
        ab = p[a + 1]
        b = p[xi + 1] + yi
        ba = p[b]
        bb = p[b + 1]

        value = lerp(
            v,
            lerp(u, grad(p[aa], xf, yf), grad(p[ba], xf - 1, yf)),
            lerp(u, grad(p[ab], xf, yf - 1), grad(p[bb], xf - 1, yf - 1)),
        )

        if scalar:
            return float(value)
        return value

    def octaves(
        self, x: ArrayLike, y: ArrayLike, layers: Iterable[Tuple[float, float]]
    ) -> ArrayLike:
        """
        Sum noise layers.

        Args:
            x: X coordinate(s)
            y: Y coordinate(s)
            layers: (frequency, amplitude) pairs

        Returns:
            Weighted sum of the layer samples
        """
        total = 0.0
        for frequency, amplitude in layers:
            total = total + self.sample(x * frequency, y * frequency) * amplitude
        return total
