# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Reader configuration for svgmeta.

Copyright 2025 DNAi inc.
"""

import os
from typing import Any, Mapping, Optional

from svgmeta.exceptions import ConfigError


# Fallback image size used when an SVG does not state its own
DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512

# Percentage base for viewBox lengths
DEFAULT_VIEWPORT_SIZE = 512

ENV_DEFAULT_WIDTH = 'SVGMETA_DEFAULT_WIDTH'
ENV_DEFAULT_HEIGHT = 'SVGMETA_DEFAULT_HEIGHT'
ENV_VIEWPORT_SIZE = 'SVGMETA_VIEWPORT_SIZE'


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return number


class ReaderConfig:
    """
    Configuration for SVG metadata reading.
    
    Holds the fallback dimensions and the XML security switches that are
    passed down to the XML cursor for a single parse. Nothing here touches
    process-wide parser state.
    """
    
    def __init__(
        self,
        default_width: int = DEFAULT_WIDTH,
        default_height: int = DEFAULT_HEIGHT,
        viewport_size: int = DEFAULT_VIEWPORT_SIZE,
        forbid_external: bool = True,
        forbid_entities: bool = False,
        forbid_dtd: bool = False,
    ):
        """
        Initialize reader configuration.
        
        Args:
            default_width: Pixel width reported when the SVG gives none
            default_height: Pixel height reported when the SVG gives none
            viewport_size: Base for percentage lengths inside viewBox
            forbid_external: Refuse external entity declarations and references
            forbid_entities: Refuse internal entity declarations. Illustrator
                writes its namespace URIs through internal entities, so this
                stays off by default
            forbid_dtd: Refuse documents carrying a DOCTYPE
        
        Raises:
            ConfigError: If a size is not a positive integer
        """
        self.default_width = _positive_int('default_width', default_width)
        self.default_height = _positive_int('default_height', default_height)
        self.viewport_size = _positive_int('viewport_size', viewport_size)
        self.forbid_external = bool(forbid_external)
        self.forbid_entities = bool(forbid_entities)
        self.forbid_dtd = bool(forbid_dtd)
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> 'ReaderConfig':
        """
        Build a configuration from environment variables.
        
        Reads SVGMETA_DEFAULT_WIDTH, SVGMETA_DEFAULT_HEIGHT and
        SVGMETA_VIEWPORT_SIZE. Keyword overrides win over the environment.
        
        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Constructor arguments to set explicitly
            
        Returns:
            ReaderConfig instance
        """
        if environ is None:
            environ = os.environ
        kwargs: dict = {}
        for key, name in (
            (ENV_DEFAULT_WIDTH, 'default_width'),
            (ENV_DEFAULT_HEIGHT, 'default_height'),
            (ENV_VIEWPORT_SIZE, 'viewport_size'),
        ):
            raw = environ.get(key)
            if raw is not None and raw.strip():
                kwargs[name] = raw.strip()
        kwargs.update(overrides)
        return cls(**kwargs)
    
    def parser_options(self) -> dict:
        """Keyword arguments for defusedxml's iterparse."""
        return {
            'forbid_dtd': self.forbid_dtd,
            'forbid_entities': self.forbid_entities,
            'forbid_external': self.forbid_external,
        }
    
    def __repr__(self) -> str:
        return (
            f"ReaderConfig(default_width={self.default_width}, "
            f"default_height={self.default_height}, "
            f"viewport_size={self.viewport_size}, "
            f"forbid_external={self.forbid_external}, "
            f"forbid_entities={self.forbid_entities}, "
            f"forbid_dtd={self.forbid_dtd})"
        )
