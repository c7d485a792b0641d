# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for svgmeta

This module defines custom exceptions for the svgmeta library.
Only MetadataReadError is expected to reach callers of SVGReader;
the other exceptions are raised and handled inside the package.

Copyright 2025 DNAi inc.
"""


class SVGMetaError(Exception):
    """
    Base exception for all svgmeta errors.
    
    All svgmeta exceptions inherit from this class, allowing
    catch-all error handling for any svgmeta-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(SVGMetaError):
    """
    Raised when an SVG source exists but cannot be read.
    
    This exception is raised when:
    - File permissions prevent opening the file
    - The path names a directory
    - The operating system reports an I/O failure while opening
    """
    pass


class MalformedSVGError(SVGMetaError):
    """
    Raised by the XML cursor when the document cannot be parsed further.
    
    This exception is raised when:
    - The XML is not well-formed
    - The document references an external entity
    - The document declares something the parser configuration forbids
    
    SVGReader turns this into a diagnostic message instead of propagating it.
    """
    pass


class ConfigError(SVGMetaError):
    """Raised when a reader configuration value is invalid."""
    pass
