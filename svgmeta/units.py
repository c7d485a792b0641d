# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
CSS/SVG length conversion.

Converts labeled lengths such as "2in", "50%" or "12.5pt" to pixels,
following the unit identifiers of SVG 1.1:
http://www.w3.org/TR/SVG11/coords.html#UnitIdentifiers

Copyright 2025 DNAi inc.
"""

import re
from types import MappingProxyType
from typing import Any, Union

from svgmeta.config import DEFAULT_VIEWPORT_SIZE


# Pixels per unit
UNIT_LENGTHS = MappingProxyType({
    'px': 1.0,
    'pt': 1.25,
    'pc': 15.0,
    'mm': 3.543307,
    'cm': 35.43307,
    'in': 90.0,
    'em': 16.0,  # no font context, fixed guess
    'ex': 12.0,  # no font context, fixed guess
    '': 1.0,     # user units
})

_LENGTH_RE = re.compile(r'^\s*(\d+(?:\.\d+)?)(em|ex|px|pt|pc|cm|mm|in|%|)\s*$')

# Leading number of an arbitrary string, the way PHP's floatval() reads it
_LEADING_NUMBER_RE = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')


def leading_float(value: Any) -> float:
    """
    Convert the numeric prefix of a string to float.
    
    Returns 0.0 when the string does not start with a number.
    """
    if value is None:
        return 0.0
    match = _LEADING_NUMBER_RE.match(str(value))
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def scale_svg_unit(length: Any, viewport_size: Union[int, float] = DEFAULT_VIEWPORT_SIZE) -> float:
    """
    Return the pixel equivalent of a labeled CSS/SVG length.
    
    Args:
        length: CSS/SVG length such as "10mm" or "50%"
        viewport_size: Base used for percentage lengths
        
    Returns:
        Length in pixels. Strings that do not parse as a length are read
        as raw pixels from their leading number (0.0 if there is none).
    """
    if length is None:
        return 0.0
    text = str(length)
    match = _LENGTH_RE.match(text)
    if match:
        value = float(match.group(1))
        unit = match.group(2)
        if unit == '%':
            return value * 0.01 * viewport_size
        return value * UNIT_LENGTHS[unit]
    # Assume pixels
    return leading_float(text)
