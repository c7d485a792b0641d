# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
SVG (Scalable Vector Graphics) dimension and metadata reader

This module reads the pixel size of an SVG image together with the
title, description and raw <metadata> block stored in the document.
The document is streamed; only the root element and its direct
<title>, <desc>, <metadata> and <script> children are inspected.

Copyright 2025 DNAi inc.
"""

import io
import logging
import math
import os
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union

from svgmeta.config import ReaderConfig
from svgmeta.exceptions import MalformedSVGError, MetadataReadError
from svgmeta.units import scale_svg_unit as _scale_svg_unit
from svgmeta.xml_cursor import NodeKind, XMLCursor

logger = logging.getLogger(__name__)

NS_SVG = 'http://www.w3.org/2000/svg'

SVGSource = Union[str, os.PathLike, bytes, bytearray, BinaryIO]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _is_set(value: Optional[str]) -> bool:
    # Empty and "0" attribute values count as absent
    return bool(value) and value != '0'


class SVGReader:
    """
    Reader for SVG dimensions and descriptive metadata.

    The whole parse happens in the constructor. Results are available via
    get_metadata(); non-fatal problems found on the way via get_errors().

    Metadata keys:
    - width, height: pixel size (int), always present
    - originalWidth, originalHeight: attribute values as written, '100%' if absent
    - title, description: text of <title> and <desc>
    - metadata: inner markup of <metadata>
    - animated: True if the root has a <script> child
    """

    scale_svg_unit = staticmethod(_scale_svg_unit)

    def __init__(self, source: SVGSource, config: Optional[ReaderConfig] = None):
        """
        Initialize the reader and parse the source.

        Args:
            source: Path to an SVG file, SVG bytes, or a binary stream
            config: Reader configuration (defaults to ReaderConfig())

        Raises:
            ValueError: If source is not a supported type
            MetadataReadError: If the file exists but cannot be opened
        """
        if source is None:
            raise ValueError("source must be provided")
        self.config = config or ReaderConfig()
        self.aspect = 1.0
        self._errors: List[str] = []
        self._metadata: Dict[str, Any] = {
            'width': self.config.default_width,
            'height': self.config.default_height,
            # Per the SVG spec, unspecified sizes default to '100%'
            'originalWidth': '100%',
            'originalHeight': '100%',
        }

        stream, owned = self._open(source)
        if stream is None:
            return
        try:
            self._read(stream)
        finally:
            if owned:
                stream.close()

    def get_metadata(self) -> Dict[str, Any]:
        """
        Get the metadata read from the SVG.

        Returns:
            A new dictionary on every call
        """
        return dict(self._metadata)

    def get_errors(self) -> List[str]:
        """Get the diagnostic messages collected while parsing."""
        return list(self._errors)

    def _error(self, message: str) -> None:
        self._errors.append(message)
        logger.warning("SVG metadata: %s", message)

    def _open(self, source: SVGSource) -> Tuple[Optional[BinaryIO], bool]:
        """
        Open the source after checking that it has content.

        Returns:
            (stream, owned) where stream is None if there is nothing to parse
            and owned tells whether the reader must close the stream
        """
        if isinstance(source, (bytes, bytearray)):
            if not source:
                logger.debug("Empty SVG data, using defaults")
                return None, False
            return io.BytesIO(bytes(source)), True

        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            if path.is_dir():
                raise MetadataReadError(f"Cannot read SVG file {path}: is a directory")
            try:
                size = path.stat().st_size
            except OSError:
                logger.debug("SVG file %s not found, using defaults", path)
                return None, False
            if size == 0:
                logger.debug("SVG file %s is empty, using defaults", path)
                return None, False
            try:
                return open(path, 'rb'), True
            except OSError as e:
                raise MetadataReadError(f"Cannot read SVG file {path}: {e}") from e

        if hasattr(source, 'read'):
            if self._remaining(source) == 0:
                logger.debug("Empty SVG stream, using defaults")
                return None, False
            return source, False

        raise ValueError("source must be a path, bytes or a binary stream")

    @staticmethod
    def _remaining(stream: BinaryIO) -> Optional[int]:
        """Bytes left in a seekable stream, None if the stream cannot seek."""
        try:
            if not stream.seekable():
                return None
            position = stream.tell()
            end = stream.seek(0, io.SEEK_END)
            stream.seek(position)
        except (AttributeError, OSError):
            return None
        return end - position

    def _read(self, stream: BinaryIO) -> None:
        cursor = XMLCursor(stream, self.config, on_warning=self._error)
        try:
            self._scan(cursor)
        except MalformedSVGError as e:
            self._error(e.message)
        finally:
            cursor.close()

    def _scan(self, cursor: XMLCursor) -> None:
        # Skip until first element
        try:
            keep_reading = cursor.advance()
            while keep_reading and cursor.kind is not NodeKind.ELEMENT:
                keep_reading = cursor.advance()
        except MalformedSVGError as e:
            self._error(f"No root element found ({e.message})")
            self.handle_svg_attribs({})
            return

        if cursor.local_name != 'svg' or cursor.namespace != NS_SVG:
            self._error(f"Expected <svg> tag, got {cursor.local_name} in NS {cursor.namespace}")

        self.handle_svg_attribs(cursor.attributes)

        exit_depth = cursor.depth
        keep_reading = cursor.advance()
        while keep_reading:
            tag = cursor.local_name
            kind = cursor.kind
            is_svg = cursor.namespace == NS_SVG

            if is_svg and tag == 'svg' and kind is NodeKind.END_ELEMENT and cursor.depth <= exit_depth:
                break
            elif is_svg and tag == 'title':
                self._read_field(cursor, 'title')
            elif is_svg and tag == 'desc':
                self._read_field(cursor, 'description')
            elif is_svg and tag == 'metadata' and kind is NodeKind.ELEMENT:
                self._metadata['metadata'] = cursor.read_inner_xml().strip()
            elif is_svg and tag == 'script':
                # Scripted SVGs are treated as animated
                self._metadata['animated'] = True

            # Next sibling, children are not inspected
            keep_reading = cursor.skip_children()

    def _read_field(self, cursor: XMLCursor, field: str) -> None:
        """
        Store the first text found inside the current element.

        Leaves the cursor on the element's end tag.
        """
        if cursor.kind is not NodeKind.ELEMENT:
            return
        depth = cursor.depth
        text = None
        while cursor.advance():
            if cursor.kind is NodeKind.END_ELEMENT and cursor.depth == depth:
                break
            if cursor.kind is NodeKind.TEXT and text is None:
                text = cursor.value.strip()
        if text is not None:
            self._metadata[field] = text

    def handle_svg_attribs(self, attributes: Dict[str, str]) -> None:
        """
        Compute pixel dimensions from the attributes of the root element.

        The viewBox aspect ratio is applied first; explicit width and
        height then override it, and a missing axis is derived from the
        other through the aspect ratio.

        Args:
            attributes: Attributes of the <svg> element
        """
        default_width: float = self.config.default_width
        default_height: float = self.config.default_height
        aspect = 1.0
        width = None
        height = None

        view_box = attributes.get('viewBox')
        if _is_set(view_box):
            # min-x min-y width height
            parts = view_box.split()
            if len(parts) == 4:
                view_width = _scale_svg_unit(parts[2], self.config.viewport_size)
                view_height = _scale_svg_unit(parts[3], self.config.viewport_size)
                if view_width > 0 and view_height > 0:
                    aspect = view_width / view_height
                    default_height = default_width / aspect

        raw_width = attributes.get('width')
        if _is_set(raw_width):
            width = _scale_svg_unit(raw_width, default_width)
            self._metadata['originalWidth'] = raw_width

        raw_height = attributes.get('height')
        if _is_set(raw_height):
            height = _scale_svg_unit(raw_height, default_height)
            self._metadata['originalHeight'] = raw_height

        if width is None and height is None:
            width = default_width
            height = width / aspect
        elif height is None:
            height = width / aspect
        elif width is None:
            width = height * aspect

        self.aspect = aspect
        if width > 0 and height > 0:
            self._metadata['width'] = _round_half_up(width)
            self._metadata['height'] = _round_half_up(height)


class SVGMetadataExtractor:
    """Convenience entry point mirroring the per-format extractor classes."""

    @staticmethod
    def get_metadata(filename: SVGSource, config: Optional[ReaderConfig] = None) -> Dict[str, Any]:
        """
        Read the metadata of one SVG file.
        
        Args:
            filename: Path to an SVG file, SVG bytes, or a binary stream
            config: Optional reader configuration
            
        Returns:
            Metadata dictionary (see SVGReader)
        """
        return SVGReader(filename, config).get_metadata()


def get_metadata(source: SVGSource, config: Optional[ReaderConfig] = None) -> Dict[str, Any]:
    """
    Read SVG dimensions and metadata in one call.

    Args:
        source: Path to an SVG file, SVG bytes, or a binary stream
        config: Optional reader configuration

    Returns:
        Metadata dictionary (see SVGReader)

    Example:
        >>> get_metadata(b'<svg xmlns="http://www.w3.org/2000/svg" width="20" height="10"/>')['width']
        20
    """
    return SVGReader(source, config).get_metadata()
