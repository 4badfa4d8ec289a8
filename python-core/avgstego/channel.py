"""
Channel perturbation codec.

One byte is hidden in one pixel by offsetting its R, G and B channels
from a baseline: the average color of the pixel's 4-connected
neighbors. Before averaging, every neighbor channel is rescaled from
[0, 255] into [h, 255 - h] with h = size / 2, which leaves room for the
offsets on both sides so written channels never wrap.

Bit layout of the hidden byte:

    bits 6-7 -> R offset (0..3), stored as average.R + offset - 2
    bits 3-5 -> G offset (0..7), stored as average.G + offset - 4
    bits 0-2 -> B offset (0..7), stored as average.B + offset - 4

Alpha is never touched.

Reading only works while the neighbors are bit-identical to what they
were when the byte was written. The batched functions compute every
baseline before writing anything, so no coordinate in a batch may be a
4-connected neighbor of another.
"""

from typing import Sequence, Union

import numpy as np

from .selector import NEIGHBOR_OFFSETS


DEFAULT_SCALE_SIZE = 8

# Subtracted from the R, G and B offsets to center them on the baseline.
CHANNEL_BIAS = np.array([2, 4, 4], dtype=np.int64)

IntArray = Union[Sequence[int], np.ndarray]


def scale_channels(values: np.ndarray, size: int = DEFAULT_SCALE_SIZE) -> np.ndarray:
    """Rescale channel values from [0, 255] into [size/2, 255 - size/2], truncating."""
    half = size // 2
    values = np.asarray(values, dtype=np.int64)
    return values * (255 - 2 * half) // 255 + half


def neighbor_average(
    image: np.ndarray,
    xs: IntArray,
    ys: IntArray,
    size: int = DEFAULT_SCALE_SIZE,
) -> np.ndarray:
    """
    Compute the rescaled RGB neighbor average for each coordinate.

    Neighbors outside the image are skipped, so edge pixels average
    over 2 or 3 neighbors instead of 4.

    Args:
        image: Pixel grid of shape (height, width, 4)
        xs: Column of each coordinate
        ys: Row of each coordinate
        size: Headroom parameter, see scale_channels

    Returns:
        Array of shape (n, 3) with the floored per-channel averages
    """
    xs = np.asarray(xs, dtype=np.int64)
    ys = np.asarray(ys, dtype=np.int64)
    height, width = image.shape[:2]

    total = np.zeros((xs.size, 3), dtype=np.int64)
    count = np.zeros(xs.size, dtype=np.int64)
    for dx, dy in NEIGHBOR_OFFSETS:
        nx = xs + dx
        ny = ys + dy
        inside = (nx >= 0) & (nx < width) & (ny >= 0) & (ny < height)
        rgb = image[np.clip(ny, 0, height - 1), np.clip(nx, 0, width - 1), :3]
        total += np.where(inside[:, None], scale_channels(rgb, size), 0)
        count += inside

    return total // count[:, None]


def write_bytes(
    image: np.ndarray,
    xs: IntArray,
    ys: IntArray,
    values: IntArray,
    size: int = DEFAULT_SCALE_SIZE,
) -> None:
    """Hide ``values[i]`` in pixel ``(xs[i], ys[i])`` for every i, in place."""
    values = np.asarray(values, dtype=np.int64)
    if values.size == 0:
        return

    average = neighbor_average(image, xs, ys, size)
    offsets = np.stack([(values >> 6) & 3, (values >> 3) & 7, values & 7], axis=1)
    image[np.asarray(ys), np.asarray(xs), :3] = (average + offsets - CHANNEL_BIAS).astype(np.uint8)


def read_bytes(
    image: np.ndarray,
    xs: IntArray,
    ys: IntArray,
    size: int = DEFAULT_SCALE_SIZE,
) -> bytes:
    """Recover the bytes hidden in pixels ``(xs[i], ys[i])``."""
    xs = np.asarray(xs, dtype=np.int64)
    if xs.size == 0:
        return b""

    average = neighbor_average(image, xs, ys, size)
    offsets = image[np.asarray(ys), xs, :3].astype(np.int64) - average + CHANNEL_BIAS
    values = (offsets[:, 0] << 6) | (offsets[:, 1] << 3) | offsets[:, 2]
    return (values & 0xFF).astype(np.uint8).tobytes()


def write_byte(image: np.ndarray, x: int, y: int, value: int, size: int = DEFAULT_SCALE_SIZE) -> None:
    """Hide one byte in pixel (x, y)."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"byte value out of range: {value}")
    write_bytes(image, [x], [y], [value], size)


def read_byte(image: np.ndarray, x: int, y: int, size: int = DEFAULT_SCALE_SIZE) -> int:
    """Recover the byte hidden in pixel (x, y)."""
    return read_bytes(image, [x], [y], size)[0]
