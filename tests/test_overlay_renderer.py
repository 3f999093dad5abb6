"""Unit tests for OverlayRenderer."""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import fitz  # PyMuPDF
import pytest
from services.overlay_renderer import OverlayRenderer


@pytest.fixture
def renderer():
    return OverlayRenderer()


def open_pdf(data):
    return fitz.open(stream=data, filetype="pdf")


def test_overlay_drawn_on_every_page(renderer, make_pdf):
    source = open_pdf(make_pdf(["first", "second", "third"]))

    result = renderer.apply_overlay(source, "CONFIDENTIAL")

    assert result.page_count == 3
    for page in result:
        text = page.get_text()
        assert "CONFIDENTIAL" in text
    assert "first" in result[0].get_text()


def test_overlay_does_not_touch_source(renderer, make_pdf):
    source = open_pdf(make_pdf(["original"]))

    renderer.apply_overlay(source, "STAMP")

    assert "STAMP" not in source[0].get_text()


def test_overlay_anchored_top_left(renderer, make_pdf):
    source = open_pdf(make_pdf(["body"], width=612, height=792))

    result = renderer.apply_overlay(source, "DRAFT")
    hits = result[0].search_for("DRAFT")

    assert hits
    rect = hits[0]
    assert rect.x0 == pytest.approx(50, abs=2)
    # Baseline sits 50pt below the top edge; glyphs rise above it
    assert rect.y0 < 50 < rect.y1 + 10


def test_overlay_on_tiny_page_is_accepted(renderer, make_pdf):
    source = open_pdf(make_pdf(["x"], width=60, height=60))

    result = renderer.apply_overlay(source, "A VERY LONG WATERMARK")

    assert result.page_count == 1
