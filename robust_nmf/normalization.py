"""
normalization.py - Non-Negative Scaling of Data Matrices

Two families of normalizers:

normalize_data / normalize_data_inplace
    Optionally clip negatives to zero, then scale by the maximum:
    - "none":       no scaling
    - "global_max": divide every entry by the global maximum
    - "column_max": divide each column by its own maximum
    A maximum <= 0 leaves the matrix (or column) unchanged.

normalize_nonnegative / normalized_nonnegative
    Shift by the minimum when it is negative, then optionally divide by the
    new maximum. Negative values are moved, not discarded, and the result
    lies in [0, 1] when rescaled.

The ``*_inplace`` / ``normalize_nonnegative`` forms mutate and return their
argument; ``normalize_data`` / ``normalized_nonnegative`` return new arrays.
"""

from __future__ import annotations

from typing import Union

import numpy as np
from loguru import logger

from .types import NormalizationMode, check_inplace_matrix, check_matrix


# =============================================================================
# CLIP + MAX SCALING
# =============================================================================

def normalize_data_inplace(
    X: np.ndarray,
    clip_at_zero: bool = True,
    mode: Union[str, NormalizationMode] = NormalizationMode.NONE,
) -> np.ndarray:
    """
    Clip and scale X in place.

    Parameters
    ----------
    X : np.ndarray
        Float64 matrix, modified in place.
    clip_at_zero : bool, default=True
        Replace negative entries with zero before scaling.
    mode : str or NormalizationMode, default="none"
        One of "none", "global_max", "column_max".

    Returns
    -------
    np.ndarray
        X itself.

    Raises
    ------
    InvalidArgumentError
        If ``mode`` is unknown or X is not a 2D float64 array.
    """
    check_inplace_matrix(X)
    try:
        mode = NormalizationMode.parse(mode)
    except ValueError:
        logger.error(f"Invalid normalization mode: {mode}")
        raise

    if clip_at_zero:
        np.maximum(X, 0.0, out=X)

    if mode == NormalizationMode.NONE or X.size == 0:
        return X

    if mode == NormalizationMode.GLOBAL_MAX:
        max_val = X.max()
        if max_val > 0:
            X /= max_val
        else:
            logger.warning(f"Global maximum is {max_val}; matrix left unscaled")
        return X

    # COLUMN_MAX
    col_max = X.max(axis=0)
    positive = col_max > 0
    if not positive.all():
        logger.warning(f"{int((~positive).sum())} column(s) with maximum <= 0 left unscaled")
    X[:, positive] /= col_max[positive]
    return X


def normalize_data(
    X: np.ndarray,
    clip_at_zero: bool = True,
    mode: Union[str, NormalizationMode] = NormalizationMode.NONE,
) -> np.ndarray:
    """
    Return a clipped and scaled copy of X.

    Same semantics as :func:`normalize_data_inplace`; the input is not
    modified and any numeric dtype is accepted.

    Examples
    --------
    >>> X = np.array([[1.0, -2.0], [4.0, 2.0]])
    >>> normalize_data(X, mode="column_max")
    array([[0.25, 0.  ],
           [1.  , 1.  ]])
    """
    check_matrix(X)
    return normalize_data_inplace(
        np.array(X, dtype=np.float64, copy=True), clip_at_zero=clip_at_zero, mode=mode
    )


# =============================================================================
# SHIFT + RESCALE
# =============================================================================

def normalize_nonnegative(X: np.ndarray, rescale: bool = True) -> np.ndarray:
    """
    Shift X to be non-negative and optionally rescale it to [0, 1], in place.

    If ``min(X) < 0`` the minimum is subtracted from every entry, so the new
    minimum is exactly zero. With ``rescale`` the result is then divided by
    its maximum when that maximum is positive.

    Parameters
    ----------
    X : np.ndarray
        Float64 matrix, modified in place.
    rescale : bool, default=True
        Divide by the (shifted) maximum.

    Returns
    -------
    np.ndarray
        X itself.

    Examples
    --------
    >>> Y = np.array([[-2.5, 0.0, 3.0], [-1.0, 7.0, 1.0]])
    >>> normalize_nonnegative(Y)
    >>> Y.min(), Y.max()
    (0.0, 1.0)
    """
    check_inplace_matrix(X)
    if X.size == 0:
        return X

    min_val = X.min()
    if min_val < 0:
        logger.debug(f"Shifting by minimum {min_val:.4f}")
        X -= min_val

    if rescale:
        max_val = X.max()
        if max_val > 0:
            X /= max_val
    return X


def normalized_nonnegative(X: np.ndarray, rescale: bool = True) -> np.ndarray:
    """Copy-returning form of :func:`normalize_nonnegative`."""
    check_matrix(X)
    return normalize_nonnegative(np.array(X, dtype=np.float64, copy=True), rescale=rescale)
