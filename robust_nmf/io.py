"""
io.py - Loading Image Folders into Data Matrices

Reads every file in a folder whose name contains ``pattern``, decodes it to a
grayscale intensity array with Pillow and stacks the flattened images as the
columns of one matrix:

    X[:, j] = image_j.ravel()        # row-major (C) order

so ``X[:, j].reshape(height, width)`` recovers image ``j``.

Example Usage:
-------------
    >>> from robust_nmf.io import load_image_folder
    >>>
    >>> data = load_image_folder("faces/", pattern=".png")
    >>> X, (h, w), filenames = data
    >>> first = data.image(0)   # (h, w) view of column 0
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Union

import numpy as np
from loguru import logger
from PIL import Image

from .normalization import normalize_nonnegative
from .types import ImageFolderData, NotFoundError, ShapeMismatchError

ImageDecoder = Callable[[Path], np.ndarray]


def decode_grayscale(path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into a float64 grayscale array in [0, 1].

    Color and 8-bit images are converted with Pillow's "L" mode
    (ITU-R 601-2 luma transform) and divided by 255. 16-bit and 32-bit
    integer images are divided by the maximum of their bit depth instead,
    so no intensities are clipped. Float ("F") images are returned as is.

    Parameters
    ----------
    path : str or Path
        Image file.

    Returns
    -------
    np.ndarray
        Array of shape (height, width).
    """
    with Image.open(path) as img:
        if img.mode.startswith("I"):
            return _scale_integer_intensities(np.asarray(img))
        if img.mode == "F":
            return np.asarray(img, dtype=np.float64)
        gray = img.convert("L")
        return np.asarray(gray, dtype=np.float64) / 255.0


def _scale_integer_intensities(arr: np.ndarray) -> np.ndarray:
    """
    Scale a high bit-depth integer image to [0, 1] by its native range.

    Pillow may open 16-bit files as 32-bit "I"; those are scaled as 16-bit
    whenever every value fits in uint16.
    """
    if arr.dtype.kind == "i" and arr.min() >= 0 and arr.max() <= np.iinfo(np.uint16).max:
        max_val = np.iinfo(np.uint16).max
    else:
        max_val = np.iinfo(arr.dtype).max
    return arr.astype(np.float64) / max_val


def list_matching_files(folder: Union[str, Path], pattern: str = ".png") -> List[Path]:
    """
    Sorted regular files in ``folder`` whose name contains ``pattern``.

    Raises
    ------
    NotFoundError
        If the folder does not exist or nothing matches.
    """
    folder = Path(folder)
    if not folder.is_dir():
        logger.error(f"Image folder not found: {folder}")
        raise NotFoundError(f"Image folder not found: {folder}")

    files = sorted(
        (p for p in folder.iterdir() if p.is_file() and pattern in p.name),
        key=lambda p: p.name,
    )
    if not files:
        logger.error(f"No files matching '{pattern}' in {folder}")
        raise NotFoundError(f"No files matching pattern '{pattern}' in {folder}")
    return files


def load_image_folder(
    folder: Union[str, Path],
    pattern: str = ".png",
    normalize: bool = True,
    decoder: Optional[ImageDecoder] = None,
) -> ImageFolderData:
    """
    Load same-sized grayscale images from a folder as matrix columns.

    Parameters
    ----------
    folder : str or Path
        Directory to scan (not recursive).
    pattern : str, default=".png"
        Substring a file name must contain to be loaded.
    normalize : bool, default=True
        Apply :func:`normalize_nonnegative` (shift, rescale to [0, 1]) to the
        whole matrix.
    decoder : callable, optional
        ``decoder(path) -> 2D array``. Defaults to :func:`decode_grayscale`.

    Returns
    -------
    ImageFolderData
        Unpacks as ``X, (height, width), filenames`` with X of shape
        (height * width, n_images) and filenames in sorted order.

    Raises
    ------
    NotFoundError
        If the folder is missing or no file matches ``pattern``.
    ShapeMismatchError
        If an image is not 2D or its shape differs from the first image.
    """
    decoder = decoder or decode_grayscale
    files = list_matching_files(folder, pattern)

    logger.info(f"Loading {len(files)} image(s) matching '{pattern}' from {folder}")

    images: List[np.ndarray] = []
    shape = None
    for path in files:
        try:
            img = np.asarray(decoder(path), dtype=np.float64)
        except Exception:
            logger.exception(f"Failed to decode image: {path}")
            raise

        if img.ndim != 2:
            logger.error(f"{path.name} decoded to shape {img.shape}, expected 2D")
            raise ShapeMismatchError(
                f"Image {path.name} is not grayscale 2D: shape {img.shape}"
            )
        if shape is None:
            shape = img.shape
        elif img.shape != shape:
            logger.error(f"Image size mismatch: {path.name} is {img.shape}, expected {shape}")
            raise ShapeMismatchError(
                f"Image {path.name} has shape {img.shape}, expected {shape}"
            )
        images.append(img)

    height, width = shape
    X = np.empty((height * width, len(images)), dtype=np.float64)
    for j, img in enumerate(images):
        X[:, j] = img.ravel()

    if normalize:
        normalize_nonnegative(X, rescale=True)

    logger.success(f"Loaded image matrix {X.shape} ({height}x{width} pixels per image)")
    return ImageFolderData(X=X, shape=(height, width), filenames=[p.name for p in files])
