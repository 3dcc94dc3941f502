"""
robust_nmf - Test Data Preparation for Non-Negative Matrix Factorization
"""

__version__ = "0.3.0"

# =============================================================================
# CORE TYPES
# =============================================================================
from .types import (
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

# =============================================================================
# RANDOMNESS
# =============================================================================
from .random_source import RandomSource

# =============================================================================
# SYNTHETIC DATA
# =============================================================================
from .synthetic import (
    SyntheticGenerator,
    generate_synthetic_data,
)

# =============================================================================
# CORRUPTION
# =============================================================================
from .corruption import (
    Corruptor,
    add_gaussian_noise,
    add_sparse_outliers,
    replace_with_outliers,
    add_noise_and_outliers,
)

# =============================================================================
# NORMALIZATION
# =============================================================================
from .normalization import (
    normalize_data,
    normalize_data_inplace,
    normalize_nonnegative,
    normalized_nonnegative,
)

# =============================================================================
# I/O
# =============================================================================
from .io import (
    load_image_folder,
    decode_grayscale,
)

# PUBLIC API
# =============================================================================
__all__ = [
    "__version__",
    "SyntheticData",
    "ImageFolderData",
    "CorruptionConfig",
    "NormalizationMode",
    "OutlierMode",
    "RobustNMFError",
    "InvalidArgumentError",
    "NotFoundError",
    "ShapeMismatchError",
    "RandomSource",
    "SyntheticGenerator",
    "generate_synthetic_data",
    "Corruptor",
    "add_gaussian_noise",
    "add_sparse_outliers",
    "replace_with_outliers",
    "add_noise_and_outliers",
    "normalize_data",
    "normalize_data_inplace",
    "normalize_nonnegative",
    "normalized_nonnegative",
    "load_image_folder",
    "decode_grayscale",
]
