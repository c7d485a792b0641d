"""Shared fixtures for svgmeta tests."""

import pytest


SVG_OPEN = '<svg xmlns="http://www.w3.org/2000/svg"{attrs}>'


def make_svg(attrs: str = "", body: str = "", prolog: str = '<?xml version="1.0" encoding="UTF-8"?>\n') -> bytes:
    """Build a small SVG document as bytes."""
    if attrs:
        attrs = " " + attrs
    return (prolog + SVG_OPEN.format(attrs=attrs) + body + "</svg>\n").encode("utf-8")


@pytest.fixture
def write_svg(tmp_path):
    """Write SVG bytes to a temporary file and return its path."""
    counter = {"n": 0}

    def _write(data: bytes, name: str = None):
        counter["n"] += 1
        path = tmp_path / (name or f"image{counter['n']}.svg")
        path.write_bytes(data)
        return path

    return _write
