"""
Exception hierarchy for the neighbor-average codec.

Every failure the codec raises on purpose is a StegoError, so callers
can catch a single type at the boundary. Subclasses carry a numeric
code and a details dict for programmatic handling.

Note:
    There is no integrity check on recovered payloads. A carrier that
    was recompressed, cropped or filtered after embedding decodes to
    wrong bytes without raising anything.
"""

from typing import Any, Dict, Optional


class StegoError(Exception):
    """Base exception raised for steganography errors."""

    default_code: Optional[int] = None

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class CapacityError(StegoError):
    """The payload needs more carrier pixels than the image can offer."""

    default_code = 2001


class BoundsError(StegoError):
    """The pixel grid is malformed or too small to hold the header blocks."""

    default_code = 2002


class HeaderError(StegoError):
    """A header value cannot be stored, or a stored one is invalid."""

    default_code = 2003


class ConfigError(StegoError):
    """Invalid codec configuration."""

    default_code = 2004
