"""
corruption.py - Gaussian Noise and Sparse Outliers

This module perturbs non-negative matrices to build robust-NMF test cases:
- add_gaussian_noise: dense N(0, sigma^2) noise, optionally clipped at zero
- add_sparse_outliers: additive Uniform(0, magnitude) spikes at random entries
- replace_with_outliers: overwrite random entries with max(X) * scale
- add_noise_and_outliers: copy-returning noise + clip + outliers pipeline
- Corruptor: the same operations bound to one random source

In-place vs Copy:
----------------
``add_gaussian_noise``, ``add_sparse_outliers`` and ``replace_with_outliers``
mutate their argument and return it for chaining. ``add_noise_and_outliers``
and ``Corruptor.apply`` work on a copy and leave the input untouched.

Outlier Semantics:
-----------------
Two behaviours exist and are kept apart by name:

    ADDITIVE (add_sparse_outliers)
        k = max(1, round(fraction * T)) positions, drawn with replacement;
        each gets += Uniform(0, magnitude). Repeated positions accumulate.
        fraction == 0 corrupts nothing.

    REPLACE (replace_with_outliers)
        k = round(fraction * T) positions, drawn with replacement; each is
        set to max(X) * scale. k == 0 corrupts nothing.

Example Usage:
-------------
    >>> from robust_nmf import generate_synthetic_data, Corruptor
    >>>
    >>> X, W, H = generate_synthetic_data(50, 40, rank=5, rng=0)
    >>> corruptor = Corruptor(rng=42)
    >>> corruptor.add_gaussian_noise(X, sigma=0.05)
    >>> corruptor.add_sparse_outliers(X, fraction=0.02, magnitude=10.0)
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from .random_source import RandomSource, RandomLike
from .types import (
    CorruptionConfig,
    InvalidArgumentError,
    OutlierMode,
    check_inplace_matrix,
    check_matrix,
)


# =============================================================================
# VALIDATION
# =============================================================================

def _check_fraction(fraction: float) -> None:
    if not 0.0 <= fraction <= 1.0:
        logger.error(f"Outlier fraction out of range: {fraction}")
        raise InvalidArgumentError(f"fraction must be in [0, 1], got {fraction}")


def _check_positive(value: float, name: str) -> None:
    if not value > 0:
        logger.error(f"Non-positive {name}: {value}")
        raise InvalidArgumentError(f"{name} must be positive, got {value}")


# =============================================================================
# IN-PLACE OPERATIONS
# =============================================================================

def add_gaussian_noise(
    X: np.ndarray,
    sigma: float = 0.1,
    clip_at_zero: bool = True,
    rng: RandomLike = None,
) -> np.ndarray:
    """
    Add N(0, sigma^2) noise to every entry of X, in place.

    Parameters
    ----------
    X : np.ndarray
        Float64 matrix, modified in place.
    sigma : float, default=0.1
        Noise standard deviation. ``sigma == 0`` leaves values unchanged.
    clip_at_zero : bool, default=True
        Replace negative entries with zero afterward. When False, negative
        entries may appear.
    rng : int, np.random.Generator or RandomSource, optional
        Source of the noise.

    Returns
    -------
    np.ndarray
        X itself.

    Raises
    ------
    InvalidArgumentError
        If X is not a 2D float64 array or sigma is negative.
    """
    check_inplace_matrix(X)
    if sigma < 0:
        logger.error(f"Negative noise level: {sigma}")
        raise InvalidArgumentError(f"sigma must be >= 0, got {sigma}")

    source = RandomSource.resolve(rng)
    logger.debug(f"Gaussian noise: sigma={sigma}, clip_at_zero={clip_at_zero}, shape={X.shape}")

    X += sigma * source.standard_normal(X.shape)
    if clip_at_zero:
        np.maximum(X, 0.0, out=X)
    return X


def add_sparse_outliers(
    X: np.ndarray,
    fraction: float = 0.01,
    magnitude: float = 10.0,
    rng: RandomLike = None,
) -> np.ndarray:
    """
    Add large positive spikes to randomly chosen entries of X, in place.

    ``k = max(1, round(fraction * X.size))`` linear positions are drawn
    uniformly with replacement, then each receives an independent
    Uniform(0, magnitude) increment. Duplicate positions accumulate their
    increments. No clipping is applied, so a non-negative X stays non-negative.

    Parameters
    ----------
    X : np.ndarray
        Float64 matrix, modified in place.
    fraction : float, default=0.01
        Fraction of entries to corrupt, in [0, 1]. Zero corrupts nothing;
        any positive fraction corrupts at least one entry.
    magnitude : float, default=10.0
        Upper bound of the increment distribution. Must be positive.
    rng : int, np.random.Generator or RandomSource, optional
        Source of positions and increments.

    Returns
    -------
    np.ndarray
        X itself.

    Examples
    --------
    >>> X = np.zeros((10, 10))
    >>> add_sparse_outliers(X, fraction=0.05, magnitude=5.0, rng=42)
    >>> int((X > 0).sum()) <= 5
    True
    """
    check_inplace_matrix(X)
    _check_fraction(fraction)
    _check_positive(magnitude, "magnitude")

    total = X.size
    if fraction == 0 or total == 0:
        logger.debug("Outlier fraction is zero; nothing to corrupt")
        return X

    k = max(1, round(fraction * total))
    source = RandomSource.resolve(rng)

    positions = source.integers(total, size=k)
    increments = source.uniform(k, low=0.0, high=magnitude)

    # np.add.at accumulates on repeated indices, plain fancy-index += does not
    np.add.at(X, np.unravel_index(positions, X.shape), increments)

    logger.debug(
        f"Added {k} sparse outliers ({len(np.unique(positions))} distinct entries), "
        f"magnitude <= {magnitude}"
    )
    return X


def replace_with_outliers(
    X: np.ndarray,
    fraction: float = 0.0,
    scale: float = 10.0,
    rng: RandomLike = None,
) -> np.ndarray:
    """
    Overwrite randomly chosen entries of X with ``max(X) * scale``, in place.

    ``k = round(fraction * X.size)`` (row, col) positions are drawn with
    replacement. There is no minimum of one: when ``k == 0`` X is left as is.
    The maximum is read once, before any entry is overwritten.

    Parameters
    ----------
    X : np.ndarray
        Float64 matrix, modified in place.
    fraction : float, default=0.0
        Fraction of entries to overwrite, in [0, 1].
    scale : float, default=10.0
        Outlier value as a multiple of the current maximum. Must be positive.
    rng : int, np.random.Generator or RandomSource, optional
        Source of positions.

    Returns
    -------
    np.ndarray
        X itself.
    """
    check_inplace_matrix(X)
    _check_fraction(fraction)
    _check_positive(scale, "scale")

    k = round(fraction * X.size)
    if k == 0:
        logger.debug(f"round({fraction} * {X.size}) == 0; no outliers placed")
        return X

    source = RandomSource.resolve(rng)
    m, n = X.shape
    rows = source.integers(m, size=k)
    cols = source.integers(n, size=k)

    outlier_value = X.max() * scale
    X[rows, cols] = outlier_value

    logger.debug(f"Replaced {k} entries with outlier value {outlier_value:.4f}")
    return X


# =============================================================================
# COPY-RETURNING PIPELINE
# =============================================================================

def add_noise_and_outliers(
    X: np.ndarray,
    noise_std: float = 0.0,
    outlier_fraction: float = 0.0,
    outlier_scale: float = 10.0,
    rng: RandomLike = None,
    outlier_mode: OutlierMode = OutlierMode.REPLACE,
) -> np.ndarray:
    """
    Return a corrupted copy of X: Gaussian noise, clip at zero, then outliers.

    Parameters
    ----------
    X : np.ndarray
        Input matrix. Never modified.
    noise_std : float, default=0.0
        Gaussian noise level. Zero disables the noise step.
    outlier_fraction : float, default=0.0
        Fraction of entries hit by outliers. Zero disables the outlier step.
    outlier_scale : float, default=10.0
        Multiplier of max(X) (REPLACE) or increment bound (ADDITIVE).
    rng : int, np.random.Generator or RandomSource, optional
        Source shared by the noise and outlier steps.
    outlier_mode : OutlierMode or str, default="replace"
        Outlier semantics, see module docstring.

    Returns
    -------
    np.ndarray
        A new non-negative float64 matrix of X's shape.

    Examples
    --------
    >>> noisy = add_noise_and_outliers(X, noise_std=0.05, outlier_fraction=0.01, rng=42)
    >>> (noisy >= 0).all()
    True
    """
    config = CorruptionConfig(
        noise_std=noise_std,
        outlier_fraction=outlier_fraction,
        outlier_scale=outlier_scale,
        outlier_mode=outlier_mode,
    )
    return Corruptor(rng=rng).apply(X, config)


# =============================================================================
# CORRUPTOR
# =============================================================================

class Corruptor:
    """
    Corruption operations sharing one random source.

    Consecutive calls continue the same stream, so a seeded Corruptor
    reproduces an entire sequence of corruptions.

    Parameters
    ----------
    rng : int, np.random.Generator or RandomSource, optional
        Seed or source for every operation of this instance.

    Examples
    --------
    >>> corruptor = Corruptor(rng=42)
    >>> config = CorruptionConfig(noise_std=0.1, outlier_fraction=0.02,
    ...                           outlier_mode="additive")
    >>> corrupted = corruptor.apply(X, config)
    """

    def __init__(self, rng: RandomLike = None):
        self._source = RandomSource.resolve(rng)

    @property
    def source(self) -> RandomSource:
        """The random source used by this corruptor."""
        return self._source

    def add_gaussian_noise(
        self, X: np.ndarray, sigma: float = 0.1, clip_at_zero: bool = True
    ) -> np.ndarray:
        """In-place Gaussian noise; see :func:`add_gaussian_noise`."""
        return add_gaussian_noise(X, sigma=sigma, clip_at_zero=clip_at_zero, rng=self._source)

    def add_sparse_outliers(
        self, X: np.ndarray, fraction: float = 0.01, magnitude: float = 10.0
    ) -> np.ndarray:
        """In-place additive outliers; see :func:`add_sparse_outliers`."""
        return add_sparse_outliers(X, fraction=fraction, magnitude=magnitude, rng=self._source)

    def replace_with_outliers(
        self, X: np.ndarray, fraction: float = 0.0, scale: float = 10.0
    ) -> np.ndarray:
        """In-place overwriting outliers; see :func:`replace_with_outliers`."""
        return replace_with_outliers(X, fraction=fraction, scale=scale, rng=self._source)

    def apply(self, X: np.ndarray, config: CorruptionConfig) -> np.ndarray:
        """
        Return a corrupted copy of X according to ``config``.

        Steps: copy, Gaussian noise if ``noise_std > 0``, clip at zero if
        ``clip_at_zero``, outliers if ``outlier_fraction > 0``.
        """
        check_matrix(X)
        logger.info(f"Corrupting {X.shape[0]}x{X.shape[1]} matrix: {config.to_dict()}")

        corrupted = np.array(X, dtype=np.float64, copy=True)

        if config.noise_std > 0:
            self.add_gaussian_noise(corrupted, sigma=config.noise_std, clip_at_zero=False)

        if config.clip_at_zero:
            np.maximum(corrupted, 0.0, out=corrupted)

        if config.outlier_fraction > 0:
            if config.outlier_mode == OutlierMode.ADDITIVE:
                self.add_sparse_outliers(
                    corrupted, fraction=config.outlier_fraction, magnitude=config.outlier_scale
                )
            else:
                self.replace_with_outliers(
                    corrupted, fraction=config.outlier_fraction, scale=config.outlier_scale
                )

        return corrupted
