"""Overlay rendering: stamps a text string onto every page."""
import logging

import fitz  # PyMuPDF

from config import (
    OVERLAY_X,
    OVERLAY_Y_FROM_TOP,
    OVERLAY_FONT_SIZE,
    OVERLAY_FONT,
    OVERLAY_COLOR,
    OVERLAY_OPACITY,
)
from services.document_composer import DocumentComposer

logger = logging.getLogger(__name__)


class OverlayRenderer:
    """Draws a fixed-style text stamp at the top-left of each page."""

    def __init__(self, composer: DocumentComposer = None):
        self.composer = composer or DocumentComposer()

    def apply_overlay(self, document: fitz.Document, text: str) -> fitz.Document:
        """
        Return a copy of ``document`` with ``text`` drawn on every page.

        The stamp is unconditional: no wrapping, no attempt to avoid existing
        content, and on very small pages it may run off the edge.
        """
        output = self.composer.merge([document])

        for page in output:
            # PyMuPDF places text by its baseline, measured from the top-left corner
            page.insert_text(
                fitz.Point(OVERLAY_X, OVERLAY_Y_FROM_TOP),
                text,
                fontsize=OVERLAY_FONT_SIZE,
                fontname=OVERLAY_FONT,
                color=OVERLAY_COLOR,
                fill_opacity=OVERLAY_OPACITY,
                stroke_opacity=OVERLAY_OPACITY,
                overlay=True,
            )

        logger.info(f"Applied overlay to {output.page_count} pages")
        return output
