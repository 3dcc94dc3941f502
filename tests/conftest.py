"""
conftest.py - Pytest Configuration and Shared Fixtures

This file contains fixtures used across all test modules. Fixtures are
organized by category:
- Random number generators (for reproducibility)
- Small matrices with known structure
- Image folders written with Pillow
"""

import pytest
import numpy as np
from PIL import Image

from robust_nmf import RandomSource, generate_synthetic_data


# =============================================================================
# RANDOM NUMBER GENERATORS
# =============================================================================

@pytest.fixture
def rng():
    """
    Provide a seeded numpy generator for reproducible tests.
    """
    return np.random.default_rng(seed=42)


@pytest.fixture
def source():
    """A seeded RandomSource."""
    return RandomSource(42)


# =============================================================================
# MATRICES
# =============================================================================

@pytest.fixture
def synthetic():
    """A 20x10 rank-5 synthetic dataset without noise."""
    return generate_synthetic_data(20, 10, rank=5, rng=123)


@pytest.fixture
def signed_matrix():
    """Small matrix with negative entries (minimum -2.5, maximum 7.0)."""
    return np.array([
        [-2.5, 0.0, 3.0],
        [-1.0, 7.0, 1.0],
    ])


@pytest.fixture
def column_matrix():
    """
    Columns with distinct maxima, one all-zero column.

    Column maxima: 4.0, 0.5, 0.0
    """
    return np.array([
        [1.0, 0.5, 0.0],
        [4.0, 0.25, 0.0],
        [2.0, 0.1, 0.0],
    ])


# =============================================================================
# IMAGE FOLDERS
# =============================================================================

def _write_gray(path, values):
    """Write a uint8 array as an 8-bit grayscale PNG."""
    Image.fromarray(np.asarray(values, dtype=np.uint8)).save(path)


@pytest.fixture
def write_gray():
    """Helper that writes a grayscale PNG: write_gray(path, values)."""
    return _write_gray


@pytest.fixture
def image_folder(tmp_path):
    """
    Folder with two 4x4 grayscale PNGs (intensity 0.2 and 0.8) and a
    non-matching text file.
    """
    _write_gray(tmp_path / "img1.png", np.full((4, 4), 51))
    _write_gray(tmp_path / "img2.png", np.full((4, 4), 204))
    (tmp_path / "notes.txt").write_text("not an image")
    return tmp_path


@pytest.fixture
def gradient_folder(tmp_path):
    """Folder with two 3x5 images whose pixels are all distinct."""
    base = np.arange(15, dtype=np.uint8).reshape(3, 5) * 10
    _write_gray(tmp_path / "a.png", base)
    _write_gray(tmp_path / "b.png", base[::-1])
    return tmp_path


@pytest.fixture
def tolerance():
    """Standard numerical tolerance for float comparisons."""
    return {"rtol": 1e-12, "atol": 1e-12}
