# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Forward-only XML cursor.

Feeds the document chunk by chunk into defusedxml's parser and exposes
the resulting nodes one at a time (kind, local name, namespace, depth)
with advance() and skip_children() operations, similar to a libxml2
XMLReader. No document tree is built; only the nodes of the current
chunk are buffered.

Copyright 2025 DNAi inc.
"""

import logging
import xml.etree.ElementTree as ET
from collections import deque
from enum import Enum
from typing import BinaryIO, Callable, Dict, Iterator, List, Optional, Tuple
from xml.sax.saxutils import escape

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser, ParseError

from svgmeta.config import ReaderConfig
from svgmeta.exceptions import MalformedSVGError

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Node types reported by XMLCursor."""
    ELEMENT = 1
    END_ELEMENT = 2
    TEXT = 3


def split_tag(tag: str) -> Tuple[str, str]:
    """
    Split an ElementTree tag into (namespace, local name).

    >>> split_tag('{http://www.w3.org/2000/svg}title')
    ('http://www.w3.org/2000/svg', 'title')
    """
    if tag.startswith('{'):
        namespace, _, local_name = tag[1:].partition('}')
        return namespace, local_name
    return '', tag


def inner_xml(element: ET.Element) -> str:
    """Serialize the content of an element without its own start/end tags."""
    parts = [escape(element.text)] if element.text else []
    for child in element:
        # tostring() writes the child's tail as well
        parts.append(ET.tostring(child, encoding='unicode'))
    return ''.join(parts)


class _NodeQueue:
    """
    Parser target that records start/end/text events instead of building
    elements. Adjacent character data is merged into one text event.
    """

    def __init__(self):
        self.nodes: deque = deque()
        self._text: List[str] = []

    def start(self, tag, attrib):
        self._flush()
        self.nodes.append((NodeKind.ELEMENT, tag, attrib, None))

    def end(self, tag):
        self._flush()
        self.nodes.append((NodeKind.END_ELEMENT, tag, None, None))

    def data(self, text):
        self._text.append(text)

    def close(self):
        self._flush()

    def _flush(self):
        if self._text:
            self.nodes.append((NodeKind.TEXT, None, None, ''.join(self._text)))
            self._text = []


class _EntitySkippingParser(DefusedXMLParser):
    """
    DefusedXMLParser that skips references to external entities instead of
    aborting the parse. The entity is never resolved; each skipped
    reference is reported through on_skip.
    """

    def __init__(self, on_skip: Callable[[str], None], **kwargs):
        self._on_skip = on_skip
        super().__init__(**kwargs)

    def defused_external_entity_ref_handler(self, context, base, sysid, pubid):
        self._on_skip(f"External entity {sysid or pubid} not loaded")
        # Non-zero tells expat the reference was handled
        return 1


class XMLCursor:
    """
    Pull-based cursor over an XML byte stream.

    Depth follows XMLReader conventions: the root element is at depth 0,
    its children and its character data at depth 1, and an end element
    has the same depth as its start. Whitespace-only character data is
    not reported.

    External entities are never loaded, internal entities are expanded.
    Both are controlled by the ReaderConfig passed in, never by global
    state.
    """

    CHUNK_SIZE = 16 * 1024

    def __init__(
        self,
        stream: BinaryIO,
        config: Optional[ReaderConfig] = None,
        on_warning: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize cursor. The cursor starts before the first node.

        Args:
            stream: Binary stream with the XML document. The caller owns it.
            config: Reader configuration (parser security switches)
            on_warning: Called with a message for every non-fatal problem,
                such as a skipped external entity
        """
        self.config = config or ReaderConfig()
        self._stream = stream
        self._on_warning = on_warning or self._log_warning
        self._queue = _NodeQueue()
        self._parser = _EntitySkippingParser(
            self._on_warning,
            target=self._queue,
            **self.config.parser_options()
        )
        self._nodes: Optional[Iterator] = self._iter_nodes()
        self._capture: Optional[ET.TreeBuilder] = None
        self._tag: Optional[str] = None
        self._attrib: Dict[str, str] = {}
        self.kind: Optional[NodeKind] = None
        self.local_name = ''
        self.namespace = ''
        self.depth = 0
        self.value: Optional[str] = None

    def __enter__(self) -> 'XMLCursor':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def _log_warning(message: str) -> None:
        logger.warning("XML cursor: %s", message)

    @property
    def closed(self) -> bool:
        return self._nodes is None

    @property
    def buffered(self) -> int:
        """Number of parsed nodes the cursor has not reached yet."""
        return len(self._queue.nodes)

    @property
    def attributes(self) -> Dict[str, str]:
        """Attributes of the current element (empty for other nodes)."""
        if self.kind is NodeKind.ELEMENT:
            return dict(self._attrib)
        return {}

    def get_attribute(self, name: str) -> Optional[str]:
        if self.kind is not NodeKind.ELEMENT:
            return None
        return self._attrib.get(name)

    def _parse_chunks(self) -> Iterator[Tuple[NodeKind, Optional[str], Optional[dict], Optional[str]]]:
        nodes = self._queue.nodes
        while True:
            data = self._stream.read(self.CHUNK_SIZE)
            error = None
            try:
                if data:
                    self._parser.feed(data)
                else:
                    self._parser.close()
            except (ParseError, DefusedXmlException) as e:
                error = e
            # Nodes parsed before a failure are still delivered
            while nodes:
                yield nodes.popleft()
            if error is not None:
                raise error
            if not data:
                return

    def _iter_nodes(self) -> Iterator[Tuple[NodeKind, Optional[str], Optional[dict], int, Optional[str]]]:
        depth = 0
        for kind, tag, attrib, text in self._parse_chunks():
            if kind is NodeKind.ELEMENT:
                yield kind, tag, attrib, depth, None
                depth += 1
            elif kind is NodeKind.END_ELEMENT:
                depth -= 1
                yield kind, tag, None, depth, None
            elif depth > 0:
                # Character data outside the root is ignored
                yield kind, None, None, depth, text

    def advance(self) -> bool:
        """
        Move to the next node in document order.

        Returns:
            True if positioned on a node, False at end of document

        Raises:
            MalformedSVGError: If the document cannot be parsed further
        """
        while self._nodes is not None:
            try:
                kind, tag, attrib, depth, value = next(self._nodes)
            except StopIteration:
                break
            except ParseError as e:
                self.close()
                raise MalformedSVGError(f"XML parse error: {e}") from e
            except DefusedXmlException as e:
                self.close()
                raise MalformedSVGError(f"XML parse error: forbidden construct ({e})") from e

            if self._capture is not None:
                if kind is NodeKind.ELEMENT:
                    self._capture.start(tag, attrib)
                elif kind is NodeKind.END_ELEMENT:
                    self._capture.end(tag)
                else:
                    self._capture.data(value)
            if kind is NodeKind.TEXT and not value.strip():
                continue

            self.kind = kind
            self.depth = depth
            self.value = value
            self._tag = tag
            self._attrib = attrib or {}
            if tag is not None:
                self.namespace, self.local_name = split_tag(tag)
            else:
                self.namespace, self.local_name = '', '#text'
            return True

        self._reset_node()
        self.close()
        return False

    def skip_children(self) -> bool:
        """
        Move to the next sibling of the current node.

        On an element this skips its whole subtree including the matching
        end element. On any other node it is the same as advance().
        """
        if self.kind is NodeKind.ELEMENT:
            if not self._consume_subtree():
                return False
        return self.advance()

    def read_inner_xml(self) -> str:
        """
        Return the markup inside the current element.

        Only this subtree is built in memory. The cursor is left on the
        matching end element. Returns an empty string when the current
        node is not an element.
        """
        if self.kind is not NodeKind.ELEMENT:
            return ''
        self._capture = ET.TreeBuilder()
        self._capture.start(self._tag, dict(self._attrib))
        try:
            if not self._consume_subtree():
                return ''
            element = self._capture.close()
        finally:
            self._capture = None
        return inner_xml(element)

    def _consume_subtree(self) -> bool:
        depth = self.depth
        while self.advance():
            if self.kind is NodeKind.END_ELEMENT and self.depth == depth:
                return True
        return False

    def _reset_node(self) -> None:
        self.kind = None
        self._tag = None
        self._attrib = {}
        self.local_name = ''
        self.namespace = ''
        self.value = None

    def close(self) -> None:
        """Release the parser. The underlying stream is left open."""
        if self._nodes is None:
            return
        self._nodes = None
        self._queue.nodes.clear()
        self._parser = None
        logger.debug("XML cursor closed")
