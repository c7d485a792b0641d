"""
tests/test_xml_cursor.py

Node order, depth bookkeeping and sibling skipping of the XML cursor.
"""

import io

import pytest

from svgmeta.config import ReaderConfig
from svgmeta.exceptions import MalformedSVGError
from svgmeta.xml_cursor import NodeKind, XMLCursor, split_tag

NS = "http://www.w3.org/2000/svg"

DOC = (
    b'<?xml version="1.0"?>\n'
    b'<svg xmlns="http://www.w3.org/2000/svg" width="10">\n'
    b'  <title>Hi</title>\n'
    b'  <g id="layer"><rect/></g>\n'
    b'</svg>\n'
)


def _walk(cursor):
    nodes = []
    while cursor.advance():
        nodes.append((cursor.kind, cursor.local_name, cursor.depth))
    return nodes


# ─────────────────────────────────────────────────────────
# Traversal
# ─────────────────────────────────────────────────────────

def test_nodes_in_document_order_with_depth():
    with XMLCursor(io.BytesIO(DOC)) as cursor:
        nodes = _walk(cursor)
    assert nodes == [
        (NodeKind.ELEMENT, "svg", 0),
        (NodeKind.ELEMENT, "title", 1),
        (NodeKind.TEXT, "#text", 2),
        (NodeKind.END_ELEMENT, "title", 1),
        (NodeKind.ELEMENT, "g", 1),
        (NodeKind.ELEMENT, "rect", 2),
        (NodeKind.END_ELEMENT, "rect", 2),
        (NodeKind.END_ELEMENT, "g", 1),
        (NodeKind.END_ELEMENT, "svg", 0),
    ]


def test_element_exposes_namespace_and_attributes():
    with XMLCursor(io.BytesIO(DOC)) as cursor:
        assert cursor.advance()
        assert cursor.namespace == NS
        assert cursor.get_attribute("width") == "10"
        assert cursor.get_attribute("height") is None
        assert cursor.attributes == {"width": "10"}


def test_text_node_value():
    with XMLCursor(io.BytesIO(DOC)) as cursor:
        while cursor.advance() and cursor.kind is not NodeKind.TEXT:
            pass
        assert cursor.value == "Hi"
        assert cursor.attributes == {}
        assert cursor.get_attribute("width") is None


def test_skip_children_moves_to_next_sibling():
    with XMLCursor(io.BytesIO(DOC)) as cursor:
        while cursor.advance() and cursor.local_name != "g":
            pass
        assert cursor.kind is NodeKind.ELEMENT
        assert cursor.skip_children()
        assert (cursor.kind, cursor.local_name, cursor.depth) == (NodeKind.END_ELEMENT, "svg", 0)
        assert not cursor.skip_children()
        assert cursor.closed


def test_read_inner_xml_keeps_child_markup():
    doc = (
        b'<svg xmlns="http://www.w3.org/2000/svg">'
        b'<metadata>lead <a:x xmlns:a="urn:a" k="v">body</a:x></metadata>'
        b'</svg>'
    )
    with XMLCursor(io.BytesIO(doc)) as cursor:
        while cursor.advance() and cursor.local_name != "metadata":
            pass
        inner = cursor.read_inner_xml()
        assert cursor.kind is NodeKind.END_ELEMENT
        assert cursor.local_name == "metadata"
    assert inner.startswith("lead <")
    assert 'xmlns:' in inner and '"urn:a"' in inner
    assert 'k="v"' in inner
    assert ">body</" in inner


def test_read_inner_xml_off_element_is_empty():
    with XMLCursor(io.BytesIO(DOC)) as cursor:
        assert cursor.read_inner_xml() == ""


def test_split_tag():
    assert split_tag("{urn:x}name") == ("urn:x", "name")
    assert split_tag("plain") == ("", "plain")


# ─────────────────────────────────────────────────────────
# Failures
# ─────────────────────────────────────────────────────────

def test_malformed_document_raises_and_closes():
    with XMLCursor(io.BytesIO(b'<svg><g></svg>')) as cursor:
        with pytest.raises(MalformedSVGError) as excinfo:
            _walk(cursor)
        assert cursor.closed
        assert not cursor.advance()
    assert excinfo.value.message.startswith("XML parse error")


def test_external_entity_is_skipped_not_loaded():
    doc = (
        b'<?xml version="1.0"?>\n'
        b'<!DOCTYPE svg [<!ENTITY ext SYSTEM "file:///etc/passwd">]>\n'
        b'<svg xmlns="http://www.w3.org/2000/svg"><title>&ext;</title></svg>'
    )
    warnings = []
    with XMLCursor(io.BytesIO(doc), on_warning=warnings.append) as cursor:
        nodes = _walk(cursor)
    assert warnings == ["External entity file:///etc/passwd not loaded"]
    assert (NodeKind.TEXT, "#text", 2) not in nodes
    assert nodes[-1] == (NodeKind.END_ELEMENT, "svg", 0)


def test_internal_entity_is_expanded():
    doc = (
        b'<?xml version="1.0"?>\n'
        b'<!DOCTYPE svg [<!ENTITY ns_svg "http://www.w3.org/2000/svg">]>\n'
        b'<svg xmlns="&ns_svg;"/>'
    )
    with XMLCursor(io.BytesIO(doc)) as cursor:
        assert cursor.advance()
        assert cursor.namespace == NS
        assert cursor.local_name == "svg"


def test_forbidden_entity_declaration_raises():
    doc = (
        b'<!DOCTYPE svg [<!ENTITY ns "http://www.w3.org/2000/svg">]>'
        b'<svg xmlns="http://www.w3.org/2000/svg"/>'
    )
    config = ReaderConfig(forbid_entities=True)
    with XMLCursor(io.BytesIO(doc), config) as cursor:
        with pytest.raises(MalformedSVGError) as excinfo:
            _walk(cursor)
    assert "forbidden construct" in excinfo.value.message


# ─────────────────────────────────────────────────────────
# Memory
# ─────────────────────────────────────────────────────────

def test_parsed_nodes_are_not_retained():
    rects = 20000
    doc = (
        b'<svg xmlns="http://www.w3.org/2000/svg"><g id="layer1">'
        + b"<rect/>" * rects
        + b"</g><title>end</title></svg>"
    )
    most_buffered = 0
    with XMLCursor(io.BytesIO(doc)) as cursor:
        assert cursor.advance()
        assert cursor.advance() and cursor.local_name == "g"
        while cursor.advance():
            most_buffered = max(most_buffered, cursor.buffered)
            if cursor.kind is NodeKind.END_ELEMENT and cursor.local_name == "g":
                break
        assert cursor.local_name == "g"
        assert cursor.advance() and cursor.local_name == "title"
    # Only the current chunk is held, never the whole layer
    assert 0 < most_buffered <= XMLCursor.CHUNK_SIZE < 2 * rects


def test_read_inner_xml_keeps_whitespace_between_children():
    doc = (
        b'<svg xmlns="http://www.w3.org/2000/svg">'
        b'<metadata><a>1</a> <b>2</b></metadata>'
        b'</svg>'
    )
    with XMLCursor(io.BytesIO(doc)) as cursor:
        while cursor.advance() and cursor.local_name != "metadata":
            pass
        inner = cursor.read_inner_xml()
    assert inner == (
        '<ns0:a xmlns:ns0="http://www.w3.org/2000/svg">1</ns0:a> '
        '<ns0:b xmlns:ns0="http://www.w3.org/2000/svg">2</ns0:b>'
    )
