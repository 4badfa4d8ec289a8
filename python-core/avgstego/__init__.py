"""
avgstego - Neighbor-average image steganography.

Hides an arbitrary byte payload in an RGBA image by nudging the color
channels of pseudo-randomly chosen pixels away from the average of
their neighbors. The payload length and the selection seed travel in
two fixed header blocks inside the image, so extraction needs nothing
but the stego image itself.

Modules:
    stego: Embed/extract orchestration (AverageStego)
    selector: Seeded, non-adjacent coordinate selection
    channel: One byte per pixel channel perturbation codec
    header: 32-bit header blocks
    prng: Pinned SplitMix64 generator
    carrier: Pillow-based image loading and saving
    config: Codec configuration
    cli: Command line interface

Usage:
    >>> from avgstego import AverageStego
    >>> stego = AverageStego()
    >>> path, result = stego.embed_file("photo.png", b"secret", "out.png")
    >>> stego.extract_file("out.png").data
    b'secret'
"""

from .config import StegoConfig
from .errors import BoundsError, CapacityError, ConfigError, HeaderError, StegoError
from .stego import AverageStego, EmbeddingResult, ExtractionResult

__all__ = [
    "AverageStego",
    "EmbeddingResult",
    "ExtractionResult",
    "StegoConfig",
    "StegoError",
    "CapacityError",
    "BoundsError",
    "HeaderError",
    "ConfigError",
]

__version__ = "1.0.0"
