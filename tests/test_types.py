"""
test_types.py - Tests for Core Data Structures

Tests cover:
- SyntheticData validation and unpacking
- ImageFolderData reshaping
- CorruptionConfig validation
- Mode parsing
- Error hierarchy
"""

import pytest
import numpy as np

from robust_nmf import (
    SyntheticData,
    ImageFolderData,
    CorruptionConfig,
    NormalizationMode,
    OutlierMode,
    RobustNMFError,
    InvalidArgumentError,
    NotFoundError,
    ShapeMismatchError,
)


class TestSyntheticData:
    """Tests for SyntheticData."""

    def test_valid_construction(self):
        W = np.ones((4, 2))
        H = np.ones((2, 3))
        data = SyntheticData(X=W @ H, W=W, H=H)

        assert (data.rows, data.cols, data.rank) == (4, 3, 2)

    def test_unpacking(self, synthetic):
        X, W, H = synthetic

        assert X is synthetic.X
        assert W is synthetic.W
        assert H is synthetic.H

    def test_inner_dimension_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="Inner dimension"):
            SyntheticData(X=np.ones((4, 3)), W=np.ones((4, 2)), H=np.ones((3, 3)))

    def test_x_shape_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="X shape"):
            SyntheticData(X=np.ones((4, 4)), W=np.ones((4, 2)), H=np.ones((2, 3)))


class TestImageFolderData:
    """Tests for ImageFolderData."""

    def test_image_reshape(self):
        images = [np.arange(6.0).reshape(2, 3), np.arange(6.0, 12.0).reshape(2, 3)]
        X = np.column_stack([img.ravel() for img in images])

        data = ImageFolderData(X=X, shape=(2, 3), filenames=["a.png", "b.png"])

        np.testing.assert_array_equal(data.image(0), images[0])
        np.testing.assert_array_equal(data.image(1), images[1])
        assert data.n_images == 2

    def test_unpacking(self):
        data = ImageFolderData(X=np.zeros((4, 1)), shape=(2, 2), filenames=["a.png"])
        X, shape, filenames = data

        assert shape == (2, 2)
        assert filenames == ["a.png"]

    def test_shape_validation(self):
        with pytest.raises(ShapeMismatchError):
            ImageFolderData(X=np.zeros((5, 1)), shape=(2, 2), filenames=["a.png"])


class TestCorruptionConfig:
    """Tests for CorruptionConfig."""

    def test_defaults(self):
        config = CorruptionConfig()

        assert config.noise_std == 0.0
        assert config.outlier_fraction == 0.0
        assert config.outlier_scale == 10.0
        assert config.outlier_mode == OutlierMode.REPLACE
        assert config.clip_at_zero is True

    def test_mode_string_parsed(self):
        config = CorruptionConfig(outlier_mode="additive")

        assert config.outlier_mode is OutlierMode.ADDITIVE

    def test_frozen(self):
        config = CorruptionConfig()

        with pytest.raises(Exception):
            config.noise_std = 1.0

    @pytest.mark.parametrize("kwargs,match", [
        ({"noise_std": -0.1}, "noise_std"),
        ({"outlier_fraction": 1.1}, "outlier_fraction"),
        ({"outlier_fraction": -0.1}, "outlier_fraction"),
        ({"outlier_scale": 0.0}, "outlier_scale"),
    ])
    def test_validation(self, kwargs, match):
        with pytest.raises(InvalidArgumentError, match=match):
            CorruptionConfig(**kwargs)

    def test_to_dict(self):
        info = CorruptionConfig(noise_std=0.5).to_dict()

        assert info["noise_std"] == 0.5
        assert info["outlier_mode"] == "replace"


class TestModes:
    """Tests for mode parsing."""

    def test_normalization_mode_case_insensitive(self):
        assert NormalizationMode.parse("GLOBAL_MAX") is NormalizationMode.GLOBAL_MAX

    def test_normalization_mode_unknown(self):
        with pytest.raises(InvalidArgumentError, match="Unknown normalization mode: 'row_max'"):
            NormalizationMode.parse("row_max")

    def test_outlier_mode_passthrough(self):
        assert OutlierMode.parse(OutlierMode.ADDITIVE) is OutlierMode.ADDITIVE

    @pytest.mark.parametrize("mode", [None, 0, 1.5])
    def test_normalization_mode_non_string_rejected(self, mode):
        with pytest.raises(InvalidArgumentError, match="must be a string"):
            NormalizationMode.parse(mode)

    def test_outlier_mode_none_rejected(self):
        with pytest.raises(InvalidArgumentError, match="must be a string"):
            OutlierMode.parse(None)


class TestErrorHierarchy:
    """Errors subclass both the package base and a builtin."""

    def test_invalid_argument(self):
        assert issubclass(InvalidArgumentError, RobustNMFError)
        assert issubclass(InvalidArgumentError, ValueError)

    def test_not_found(self):
        assert issubclass(NotFoundError, RobustNMFError)
        assert issubclass(NotFoundError, FileNotFoundError)

    def test_shape_mismatch(self):
        assert issubclass(ShapeMismatchError, RobustNMFError)
        assert issubclass(ShapeMismatchError, ValueError)
