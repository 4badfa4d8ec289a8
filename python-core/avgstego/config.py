"""
Codec configuration.

The values here change where payload pixels land and how baselines are
computed, so an image must be extracted with the same configuration it
was embedded with.
"""

import os
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "AVGSTEGO_"


@dataclass(frozen=True)
class StegoConfig:
    """
    Configuration for embedding and extraction.

    Attributes:
        bound_offset: Margin, in pixels, between the image edge and the
            rectangle payload pixels are drawn from
        density_factor: Fraction of the inset rectangle usable for payload
        scale_size: Headroom kept at both ends of the channel range; baselines
            are rescaled into [scale_size/2, 255 - scale_size/2]
    """

    bound_offset: int = 2
    density_factor: float = 0.35
    scale_size: int = 8

    @classmethod
    def default(cls) -> 'StegoConfig':
        """Get default configuration."""
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'StegoConfig':
        """Create a configuration from a mapping, ignoring unknown keys."""
        known = {k: data[k] for k in ("bound_offset", "density_factor", "scale_size") if k in data}
        try:
            config = cls(
                bound_offset=int(known.get("bound_offset", cls.bound_offset)),
                density_factor=float(known.get("density_factor", cls.density_factor)),
                scale_size=int(known.get("scale_size", cls.scale_size)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}", details=dict(known))
        config.validate()
        return config

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'StegoConfig':
        """
        Build a configuration from AVGSTEGO_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Validated configuration, defaults for unset variables
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in ("bound_offset", "density_factor", "scale_size"):
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        if values:
            logger.debug(f"Configuration overrides from environment: {values}")
        return cls.from_dict(values)

    def validate(self) -> None:
        """Raise ConfigError if any field is out of range."""
        if self.bound_offset < 1:
            raise ConfigError(
                f"bound_offset must be at least 1, got {self.bound_offset}",
                details={"bound_offset": self.bound_offset},
            )
        if not 0 < self.density_factor <= 0.5:
            raise ConfigError(
                f"density_factor must be in (0, 0.5], got {self.density_factor}",
                details={"density_factor": self.density_factor},
            )
        if self.scale_size % 2 or not 8 <= self.scale_size <= 64:
            raise ConfigError(
                f"scale_size must be an even number in [8, 64], got {self.scale_size}",
                details={"scale_size": self.scale_size},
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
