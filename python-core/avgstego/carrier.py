"""
Loading and saving carrier images with Pillow.

The codec itself only sees numpy pixel grids. Output must go through a
lossless format (PNG, BMP, TIFF): lossy re-encoding changes the pixel
values the hidden bytes are measured against, and extraction then
returns wrong bytes without any error.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from .errors import BoundsError


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

LOSSY_SUFFIXES = {".jpg", ".jpeg", ".jpe", ".jfif", ".webp"}
DEFAULT_OUTPUT_SUFFIX = ".png"


def is_lossy_path(path: PathLike) -> bool:
    """Return True if the file extension implies a lossy image format."""
    return Path(path).suffix.lower() in LOSSY_SUFFIXES


def default_output_path(carrier_path: PathLike) -> Path:
    """Return ``<stem>.stego.png`` next to the carrier."""
    path = Path(carrier_path)
    return path.with_name(f"{path.stem}.stego{DEFAULT_OUTPUT_SUFFIX}")


def to_pixels(image: Image.Image) -> np.ndarray:
    """Convert a Pillow image to a writable (height, width, 4) uint8 array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def to_image(pixels: np.ndarray) -> Image.Image:
    """Wrap a pixel grid in a Pillow RGBA image."""
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))


def load_image(path: PathLike) -> np.ndarray:
    """
    Decode an image file into an RGBA pixel grid.

    Args:
        path: Any file Pillow can open

    Returns:
        Array of shape (height, width, 4), dtype uint8
    """
    with Image.open(path) as img:
        logger.debug(f"Loaded {path}: format={img.format}, mode={img.mode}, size={img.size}")
        return to_pixels(img)


def save_image(pixels: np.ndarray, path: PathLike) -> Path:
    """
    Encode a pixel grid to a file; the format follows the extension.

    Lossy extensions are written as asked but logged as a warning, since
    the hidden payload will not survive them.

    Returns:
        The output path
    """
    path = Path(path)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise BoundsError(
            f"Expected a (height, width, 4) pixel grid, got shape {pixels.shape}",
            details={"shape": tuple(pixels.shape)},
        )

    image = to_image(pixels)
    if is_lossy_path(path):
        logger.warning(f"Saving to lossy format {path.suffix}; embedded data will not survive")
        image = image.convert("RGB")

    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path)
    logger.debug(f"Saved {pixels.shape[1]}x{pixels.shape[0]} image to {path}")
    return path
