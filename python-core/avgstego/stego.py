"""
Neighbor-average image steganography.

This module ties the pieces together. Embedding stores the payload
length and a selection seed in two fixed header blocks near the bottom
edge, derives a non-adjacent coordinate sequence from the seed, and
hides one payload byte per selected pixel. Extraction reads the two
headers back, re-derives the same sequence and reads the bytes in
order.

This is steganography, not cryptography. Nothing is encrypted or
authenticated, and no checksum is stored: a carrier that was altered
after embedding (recompression, cropping, filtering) yields wrong bytes
silently. Stego images must be saved in a lossless format.

Layout of the data inside an image of size (width, height):

    length block: corners around (1, height - 2)
    seed block:   corners around (width - 2, height - 2)
    payload:      one byte per selected pixel in
                  [bound_offset, width - bound_offset) x
                  [bound_offset, height - bound_offset)
"""

import struct
import logging
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from . import carrier, channel, header, selector
from .config import StegoConfig
from .errors import BoundsError, CapacityError, HeaderError
from .selector import Coordinate


logger = logging.getLogger(__name__)

CarrierImage = Union[np.ndarray, Image.Image]

# Smallest width that keeps the two header blocks apart: corners of the
# length block sit at x = 0 and 2, those of the seed block at width - 3
# and width - 1, and x = 2 and x = width - 3 must not be neighbors.
MIN_HEADER_WIDTH = 7
MIN_HEADER_HEIGHT = 3


def generate_seed() -> int:
    """Return a fresh signed 32-bit seed from the system CSPRNG."""
    return struct.unpack("<i", secrets.token_bytes(4))[0]


@dataclass
class EmbeddingResult:
    """
    Result of an embedding operation.

    Attributes:
        pixels: Stego pixel grid (the caller's array when one was passed)
        seed: Seed written to the seed header
        capacity_used: Number of payload bytes embedded
        capacity_total: Capacity of the carrier in bytes
        coordinates: Payload pixels, in payload order
    """

    pixels: np.ndarray
    seed: int
    capacity_used: int
    capacity_total: int
    coordinates: List[Coordinate] = field(default_factory=list)

    def to_image(self) -> Image.Image:
        """Return the stego pixels as a Pillow RGBA image."""
        return carrier.to_image(self.pixels)


@dataclass
class ExtractionResult:
    """
    Result of an extraction operation.

    Attributes:
        data: Recovered payload
        seed: Seed read from the seed header
        original_size: Payload length read from the length header
    """

    data: bytes
    seed: int
    original_size: int


class AverageStego:
    """
    Embeds and extracts byte payloads using neighbor-average perturbation.

    Example:
        >>> stego = AverageStego()
        >>> result = stego.embed(b"Secret message", pixels)
        >>> stego.extract(result.pixels).data
        b'Secret message'
    """

    def __init__(self, config: Optional[StegoConfig] = None):
        """
        Initialize the codec.

        Args:
            config: Codec configuration; defaults to StegoConfig.default().
                Extraction must use the configuration used for embedding.

        Raises:
            ConfigError: If the configuration is invalid
        """
        self._config = config or StegoConfig.default()
        self._config.validate()
        logger.debug(f"AverageStego initialized with {self._config}")

    @property
    def config(self) -> StegoConfig:
        """Get the codec configuration."""
        return self._config

    def min_size(self) -> Tuple[int, int]:
        """Return the smallest (width, height) this configuration can work with."""
        interior = 2 * self._config.bound_offset + 1
        return max(MIN_HEADER_WIDTH, interior), max(MIN_HEADER_HEIGHT, interior)

    def calculate_capacity(self, image: CarrierImage) -> int:
        """
        Calculate the maximum number of payload bytes for an image.

        Header pixels and their neighbors are not available for payload
        bytes, so a payload of exactly this size always fits.

        Args:
            image: Pixel grid or Pillow image

        Returns:
            Capacity in bytes, 0 if the image is too small
        """
        if isinstance(image, Image.Image):
            width, height = image.size
        else:
            height, width = image.shape[:2]
        min_width, min_height = self.min_size()
        if width < min_width or height < min_height:
            return 0
        return selector.capacity(
            width,
            height,
            self._config.bound_offset,
            self._config.density_factor,
            reserved=header.reserved_pixels(width, height),
        )

    def embed(self, data: bytes, image: CarrierImage, seed: Optional[int] = None) -> EmbeddingResult:
        """
        Hide a payload inside an image.

        A numpy pixel grid is modified in place; a Pillow image is
        converted to RGBA and copied first. Coordinates are selected
        before any pixel is written, so a CapacityError leaves the
        carrier untouched.

        Args:
            data: Payload bytes
            image: Carrier as a (height, width, 4) uint8 array or Pillow image
            seed: Selection seed in [-2**31, 2**32); a random one when omitted

        Returns:
            EmbeddingResult with the stego pixels and the seed used

        Raises:
            BoundsError: If the carrier is malformed or too small
            CapacityError: If the payload does not fit
            HeaderError: If the seed does not fit in 32 bits
        """
        pixels = self._pixels_for(image)
        height, width = pixels.shape[:2]
        size = self._config.scale_size

        if seed is None:
            seed = generate_seed()
        if not header.INT32_MIN <= seed <= header.UINT32_MAX:
            raise HeaderError(f"Seed {seed} does not fit in 32 bits", details={"seed": seed})

        capacity_total = self.calculate_capacity(pixels)
        logger.info(f"Embedding {len(data)} bytes into {width}x{height} image, capacity={capacity_total}")

        coordinates = self._select(seed, width, height, len(data))

        length_at = header.length_anchor(width, height)
        seed_at = header.seed_anchor(width, height)
        header.write_int32_block(pixels, len(data), length_at.x, length_at.y, size)
        header.write_int32_block(pixels, seed, seed_at.x, seed_at.y, size)
        logger.debug(f"Wrote headers: length={len(data)} at {length_at}, seed={seed} at {seed_at}")

        channel.write_bytes(
            pixels,
            [c.x for c in coordinates],
            [c.y for c in coordinates],
            np.frombuffer(bytes(data), dtype=np.uint8),
            size,
        )

        return EmbeddingResult(
            pixels=pixels,
            seed=seed,
            capacity_used=len(data),
            capacity_total=capacity_total,
            coordinates=coordinates,
        )

    def extract(self, image: CarrierImage) -> ExtractionResult:
        """
        Recover the payload hidden in an image.

        Args:
            image: Stego image as a pixel grid or Pillow image

        Returns:
            ExtractionResult with the recovered bytes

        Raises:
            BoundsError: If the image is malformed or too small
            HeaderError: If the length header is negative
            CapacityError: If the length header exceeds the capacity, which
                usually means the image carries no payload
        """
        pixels = self._pixels_for(image)
        height, width = pixels.shape[:2]
        size = self._config.scale_size

        seed_at = header.seed_anchor(width, height)
        length_at = header.length_anchor(width, height)
        seed = header.read_int32_block(pixels, seed_at.x, seed_at.y, size)
        length = header.read_int32_block(pixels, length_at.x, length_at.y, size)
        logger.debug(f"Read headers: length={length}, seed={seed}")

        if length < 0:
            raise HeaderError(
                f"Length header holds a negative value ({length}); no payload present",
                details={"length": length, "seed": seed},
            )

        coordinates = self._select(seed, width, height, length)
        data = channel.read_bytes(
            pixels,
            [c.x for c in coordinates],
            [c.y for c in coordinates],
            size,
        )

        logger.info(f"Extracted {len(data)} bytes from {width}x{height} image")
        return ExtractionResult(data=data, seed=seed, original_size=length)

    def embed_file(
        self,
        carrier_path: Union[str, Path],
        data: bytes,
        output_path: Optional[Union[str, Path]] = None,
        seed: Optional[int] = None,
    ) -> Tuple[Path, EmbeddingResult]:
        """
        Load a carrier file, embed the payload and save the stego image.

        Args:
            carrier_path: Path to any image Pillow can read
            data: Payload bytes
            output_path: Destination; defaults to ``<stem>.stego.png``.
                Must be a lossless format.
            seed: Optional selection seed

        Returns:
            Tuple of (output_path, EmbeddingResult)
        """
        pixels = carrier.load_image(carrier_path)
        result = self.embed(data, pixels, seed=seed)
        output_path = carrier.save_image(
            result.pixels,
            output_path if output_path is not None else carrier.default_output_path(carrier_path),
        )
        logger.info(f"Stego image written to {output_path}")
        return output_path, result

    def extract_file(self, carrier_path: Union[str, Path]) -> ExtractionResult:
        """Load a stego image file and recover its payload."""
        return self.extract(carrier.load_image(carrier_path))

    def _select(self, seed: int, width: int, height: int, count: int) -> List[Coordinate]:
        try:
            return selector.select(
                seed,
                (width, height),
                count,
                bound_offset=self._config.bound_offset,
                density_factor=self._config.density_factor,
                reserved=header.reserved_pixels(width, height),
            )
        except CapacityError:
            logger.error(f"Cannot place {count} bytes in {width}x{height} image")
            raise

    def _pixels_for(self, image: CarrierImage) -> np.ndarray:
        """Return a validated pixel grid for a Pillow image or numpy array."""
        if isinstance(image, Image.Image):
            pixels = carrier.to_pixels(image)
        else:
            pixels = image
            if not isinstance(pixels, np.ndarray) or pixels.ndim != 3 or pixels.shape[2] != 4:
                raise BoundsError(
                    "Expected a (height, width, 4) pixel grid",
                    details={"shape": getattr(pixels, "shape", None)},
                )
            if pixels.dtype != np.uint8:
                raise BoundsError(
                    f"Expected 8-bit channels, got dtype {pixels.dtype}",
                    details={"dtype": str(pixels.dtype)},
                )

        height, width = pixels.shape[:2]
        min_width, min_height = self.min_size()
        if width < min_width or height < min_height:
            raise BoundsError(
                f"Image {width}x{height} is smaller than the minimum {min_width}x{min_height}",
                details={"size": (width, height), "min_size": (min_width, min_height)},
            )
        return pixels
