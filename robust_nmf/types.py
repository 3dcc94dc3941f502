"""
types.py - Core Data Structures and Error Types for robust_nmf

This module defines the containers and value objects used throughout robust_nmf:
- SyntheticData: A generated matrix X together with its factors W and H
- ImageFolderData: A matrix of flattened images plus their shape and names
- CorruptionConfig: Validated parameters for the corruption pipeline
- NormalizationMode / OutlierMode: String enums selecting a strategy
- RobustNMFError and subclasses: The error taxonomy

Design Principles:
-----------------
1. Immutability where practical (frozen dataclasses for value objects)
2. Validation at construction time (fail-fast)
3. Errors subclass builtins so callers may catch either form
4. Numpy-style docstrings throughout

Example Usage:
-------------
    >>> from robust_nmf import generate_synthetic_data
    >>>
    >>> data = generate_synthetic_data(20, 10, rank=5, rng=123)
    >>> X, W, H = data
    >>> print(f"X: {data.rows} x {data.cols}, rank {data.rank}")
    X: 20 x 10, rank 5
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple, Union
from enum import Enum


# =============================================================================
# ERRORS
# =============================================================================

class RobustNMFError(Exception):
    """Base class for all errors raised by robust_nmf."""


class InvalidArgumentError(RobustNMFError, ValueError):
    """An argument is outside its domain (dimension, rank, mode, fraction...)."""


class NotFoundError(RobustNMFError, FileNotFoundError):
    """A folder is missing or contains no files matching the pattern."""


class ShapeMismatchError(RobustNMFError, ValueError):
    """Images in a folder do not share the same (height, width)."""


# =============================================================================
# STRATEGY ENUMS
# =============================================================================

class NormalizationMode(str, Enum):
    """Scaling strategies for ``normalize_data``."""
    NONE = "none"
    GLOBAL_MAX = "global_max"
    COLUMN_MAX = "column_max"

    @classmethod
    def parse(cls, mode: Union[str, "NormalizationMode"]) -> "NormalizationMode":
        """
        Convert a string or enum member into a NormalizationMode.

        Raises
        ------
        InvalidArgumentError
            If ``mode`` does not name a known strategy.
        """
        if isinstance(mode, cls):
            return mode
        if not isinstance(mode, str):
            raise InvalidArgumentError(
                f"Normalization mode must be a string, got {type(mode).__name__}"
            )
        try:
            return cls(str(mode).lower())
        except ValueError:
            valid = [m.value for m in cls]
            raise InvalidArgumentError(
                f"Unknown normalization mode: '{mode}'. Valid modes are: {valid}"
            ) from None


class OutlierMode(str, Enum):
    """
    How sparse outliers are injected.

    ADDITIVE: increment ``max(1, round(fraction * T))`` positions by
              Uniform(0, magnitude) draws (duplicates accumulate).
    REPLACE:  overwrite ``round(fraction * T)`` positions with
              ``max(X) * scale`` (no minimum of one).
    """
    ADDITIVE = "additive"
    REPLACE = "replace"

    @classmethod
    def parse(cls, mode: Union[str, "OutlierMode"]) -> "OutlierMode":
        """Convert a string or enum member into an OutlierMode."""
        if isinstance(mode, cls):
            return mode
        if not isinstance(mode, str):
            raise InvalidArgumentError(
                f"Outlier mode must be a string, got {type(mode).__name__}"
            )
        try:
            return cls(str(mode).lower())
        except ValueError:
            valid = [m.value for m in cls]
            raise InvalidArgumentError(
                f"Unknown outlier mode: '{mode}'. Valid modes are: {valid}"
            ) from None


# =============================================================================
# SYNTHETIC DATA
# =============================================================================

@dataclass
class SyntheticData:
    """
    A non-negative matrix together with the factors it was built from.

    Parameters
    ----------
    X : np.ndarray
        Data matrix with shape (rows, cols). Equal to ``W @ H`` unless
        noise was added during generation.
    W : np.ndarray
        Left factor with shape (rows, rank).
    H : np.ndarray
        Right factor with shape (rank, cols).

    Notes
    -----
    Instances unpack like a tuple, so both styles work:

    >>> data = generate_synthetic_data(5, 4, rank=2, rng=0)
    >>> X, W, H = data
    """
    X: np.ndarray  # (rows, cols)
    W: np.ndarray  # (rows, rank)
    H: np.ndarray  # (rank, cols)

    def __post_init__(self):
        """Validate dimensions on construction."""
        if self.W.ndim != 2 or self.H.ndim != 2 or self.X.ndim != 2:
            raise InvalidArgumentError("X, W and H must all be 2D arrays")

        rows, rank = self.W.shape
        if self.H.shape[0] != rank:
            raise InvalidArgumentError(
                f"Inner dimension mismatch: W is {self.W.shape}, H is {self.H.shape}"
            )
        if self.X.shape != (rows, self.H.shape[1]):
            raise InvalidArgumentError(
                f"X shape mismatch: expected ({rows}, {self.H.shape[1]}), "
                f"got {self.X.shape}"
            )

    @property
    def rows(self) -> int:
        """Number of rows of X."""
        return self.X.shape[0]

    @property
    def cols(self) -> int:
        """Number of columns of X."""
        return self.X.shape[1]

    @property
    def rank(self) -> int:
        """Shared inner dimension of W and H."""
        return self.W.shape[1]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter((self.X, self.W, self.H))


# =============================================================================
# IMAGE FOLDER DATA
# =============================================================================

@dataclass
class ImageFolderData:
    """
    Images from one folder stacked as the columns of a matrix.

    Parameters
    ----------
    X : np.ndarray
        Matrix with shape (height * width, n_images). Column ``j`` is image
        ``j`` flattened in row-major (C) order.
    shape : Tuple[int, int]
        Common (height, width) of every image.
    filenames : List[str]
        Base file names, in column order.
    """
    X: np.ndarray
    shape: Tuple[int, int]
    filenames: List[str] = field(default_factory=list)

    def __post_init__(self):
        height, width = self.shape
        if self.X.shape != (height * width, len(self.filenames)):
            raise ShapeMismatchError(
                f"X shape {self.X.shape} does not match {len(self.filenames)} "
                f"images of size {height}x{width}"
            )

    @property
    def n_images(self) -> int:
        """Number of images (columns of X)."""
        return self.X.shape[1]

    def image(self, index: int) -> np.ndarray:
        """
        Reshape column ``index`` back into a (height, width) image.

        Returns a view into X, so edits to the image write through.
        """
        return self.X[:, index].reshape(self.shape)

    def __iter__(self) -> Iterator:
        return iter((self.X, self.shape, self.filenames))


# =============================================================================
# CORRUPTION CONFIG
# =============================================================================

@dataclass(frozen=True)
class CorruptionConfig:
    """
    Parameters for the copy-returning corruption pipeline.

    Parameters
    ----------
    noise_std : float, default=0.0
        Standard deviation of additive Gaussian noise. Zero disables noise.
    outlier_fraction : float, default=0.0
        Fraction of entries hit by outliers, in [0, 1].
    outlier_scale : float, default=10.0
        REPLACE mode: multiplier of the current maximum.
        ADDITIVE mode: upper bound of the Uniform(0, scale) increment.
    outlier_mode : OutlierMode, default=OutlierMode.REPLACE
        Which outlier semantics to apply.
    clip_at_zero : bool, default=True
        Clip negative entries after the noise step.

    Examples
    --------
    >>> config = CorruptionConfig(noise_std=0.05, outlier_fraction=0.02)
    >>> corrupted = Corruptor(rng=42).apply(X, config)
    """
    noise_std: float = 0.0
    outlier_fraction: float = 0.0
    outlier_scale: float = 10.0
    outlier_mode: OutlierMode = OutlierMode.REPLACE
    clip_at_zero: bool = True

    def __post_init__(self):
        if self.noise_std < 0:
            raise InvalidArgumentError(f"noise_std must be >= 0, got {self.noise_std}")
        if not 0.0 <= self.outlier_fraction <= 1.0:
            raise InvalidArgumentError(
                f"outlier_fraction must be in [0, 1], got {self.outlier_fraction}"
            )
        if self.outlier_scale <= 0:
            raise InvalidArgumentError(
                f"outlier_scale must be positive, got {self.outlier_scale}"
            )
        # Frozen dataclass: bypass __setattr__ to store the parsed enum
        object.__setattr__(self, "outlier_mode", OutlierMode.parse(self.outlier_mode))

    def to_dict(self) -> dict:
        """Plain-dict view, suitable for logging or CLI display."""
        return {
            "noise_std": self.noise_std,
            "outlier_fraction": self.outlier_fraction,
            "outlier_scale": self.outlier_scale,
            "outlier_mode": self.outlier_mode.value,
            "clip_at_zero": self.clip_at_zero,
        }


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

def check_matrix(X: np.ndarray, name: str = "X") -> None:
    """Raise InvalidArgumentError unless X is a 2D numpy array."""
    if not isinstance(X, np.ndarray) or X.ndim != 2:
        shape = getattr(X, "shape", type(X).__name__)
        raise InvalidArgumentError(f"{name} must be a 2D numpy array, got {shape}")


def check_inplace_matrix(X: np.ndarray, name: str = "X") -> None:
    """In-place operations additionally need a float64 array to write into."""
    check_matrix(X, name)
    if X.dtype != np.float64:
        raise InvalidArgumentError(
            f"{name} must have dtype float64 for in-place operations, got {X.dtype}"
        )
