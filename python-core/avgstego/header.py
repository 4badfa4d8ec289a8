"""
Fixed-position header blocks.

A header block stores one 32-bit integer in the four diagonal corners
around an anchor pixel, one byte per corner, using the channel codec:

    byte 0 (least significant) -> (x - 1, y - 1)
    byte 1                     -> (x - 1, y + 1)
    byte 2                     -> (x + 1, y - 1)
    byte 3 (most significant)  -> (x + 1, y + 1)

The corner order is part of the stored format and must not change.
Two anchors sit on the second-to-last row: the payload length at
(1, height - 2) and the selection seed at (width - 2, height - 2).
"""

import struct
import logging
from typing import List, Tuple

import numpy as np

from . import channel
from .errors import HeaderError
from .selector import Coordinate


logger = logging.getLogger(__name__)

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
UINT32_MAX = (1 << 32) - 1

# Corner offsets in byte order, least significant first.
CORNER_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def length_anchor(width: int, height: int) -> Coordinate:
    """Anchor of the block holding the payload length."""
    return Coordinate(1, height - 2)


def seed_anchor(width: int, height: int) -> Coordinate:
    """Anchor of the block holding the selection seed."""
    return Coordinate(width - 2, height - 2)


def block_corners(x: int, y: int) -> List[Coordinate]:
    """Return the four corner pixels of the block anchored at (x, y), in byte order."""
    return [Coordinate(x + dx, y + dy) for dx, dy in CORNER_OFFSETS]


def reserved_pixels(width: int, height: int) -> List[Coordinate]:
    """All eight header corner pixels of an image of the given size."""
    return block_corners(*length_anchor(width, height)) + block_corners(*seed_anchor(width, height))


def write_int32_block(image: np.ndarray, value: int, x: int, y: int, size: int = channel.DEFAULT_SCALE_SIZE) -> None:
    """
    Store a 32-bit integer in the block anchored at (x, y).

    Args:
        image: Pixel grid, modified in place
        value: Integer in [-2**31, 2**32); negative values are stored in
            two's complement
        x: Anchor column
        y: Anchor row
        size: Headroom parameter of the channel codec

    Raises:
        HeaderError: If value does not fit in 32 bits
    """
    if not INT32_MIN <= value <= UINT32_MAX:
        raise HeaderError(
            f"Header value {value} does not fit in 32 bits",
            details={"value": value, "anchor": (x, y)},
        )

    corners = block_corners(x, y)
    data = struct.pack("<I", value & UINT32_MAX)
    channel.write_bytes(
        image,
        [c.x for c in corners],
        [c.y for c in corners],
        list(data),
        size,
    )
    logger.debug(f"Header block at ({x}, {y}) <- {value} ({data.hex()})")


def read_int32_block(image: np.ndarray, x: int, y: int, size: int = channel.DEFAULT_SCALE_SIZE) -> int:
    """Read the signed 32-bit integer stored in the block anchored at (x, y)."""
    corners = block_corners(x, y)
    data = channel.read_bytes(image, [c.x for c in corners], [c.y for c in corners], size)
    value = struct.unpack("<i", data)[0]
    logger.debug(f"Header block at ({x}, {y}) -> {value} ({data.hex()})")
    return value
