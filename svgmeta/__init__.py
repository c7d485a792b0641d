# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
svgmeta - SVG dimension and metadata reader

Reads the pixel size, title, description and <metadata> block of SVG
images without building a full document tree. Lengths in any SVG unit
are converted to pixels, and viewBox aspect ratios fill in a missing
width or height.

XML parsing goes through defusedxml: external entities are refused,
internal entities are expanded.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from svgmeta.config import ReaderConfig
from svgmeta.exceptions import (
    SVGMetaError,
    MetadataReadError,
    MalformedSVGError,
    ConfigError,
)
from svgmeta.units import UNIT_LENGTHS, scale_svg_unit
from svgmeta.xml_cursor import NodeKind, XMLCursor
from svgmeta.svg_reader import (
    NS_SVG,
    SVGReader,
    SVGMetadataExtractor,
    get_metadata,
)

__all__ = [
    "ReaderConfig",
    "SVGMetaError",
    "MetadataReadError",
    "MalformedSVGError",
    "ConfigError",
    "UNIT_LENGTHS",
    "scale_svg_unit",
    "NodeKind",
    "XMLCursor",
    "NS_SVG",
    "SVGReader",
    "SVGMetadataExtractor",
    "get_metadata",
]
