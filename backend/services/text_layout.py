"""
Text-to-document layout.

Paginates a block of text into a new PDF using a fixed line height and left
margin. Lines longer than the character limit are truncated, not wrapped;
the remainder of such a line is dropped. Text is drawn with an embedded
Unicode font so that translated (e.g. Hindi) output stays readable; glyphs
are placed in logical order without script shaping.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import fitz  # PyMuPDF

from config import (
    LAYOUT_MARGIN,
    LAYOUT_BREAK_GAP,
    LAYOUT_FONT_SIZE,
    LAYOUT_LINE_GAP,
    LAYOUT_MAX_LINE_CHARS,
    LAYOUT_FONT,
    LAYOUT_FONT_FILE,
    LAYOUT_PAGE_WIDTH,
    LAYOUT_PAGE_HEIGHT,
)
from models.errors import PdfOperationError, UNRENDERABLE_TEXT

logger = logging.getLogger(__name__)

BLACK = (0, 0, 0)
FONT_REF = "okpdf"  # resource name of the embedded font on each page


@dataclass
class LinePlacement:
    """Where one line lands: page index and baseline measured from the bottom edge."""
    page_index: int
    cursor_y: float
    text: str


def load_layout_font(font_name: str = LAYOUT_FONT, font_file: Optional[str] = None) -> fitz.Font:
    """Load the layout font from a file if one is configured, else by pymupdf-fonts name."""
    if font_file:
        font = fitz.Font(fontfile=font_file)
    else:
        font = fitz.Font(font_name)
    logger.info(f"Layout font loaded: {font.name}")
    return font


class TextLayout:
    """Lays plain text out onto fixed-size pages."""

    def __init__(
        self,
        page_width: float = LAYOUT_PAGE_WIDTH,
        page_height: float = LAYOUT_PAGE_HEIGHT,
        margin: float = LAYOUT_MARGIN,
        font_size: float = LAYOUT_FONT_SIZE,
        max_line_chars: int = LAYOUT_MAX_LINE_CHARS,
        font: Optional[fitz.Font] = None,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.font_size = font_size
        self.max_line_chars = max_line_chars
        self.font = font or load_layout_font(LAYOUT_FONT, LAYOUT_FONT_FILE)

    @staticmethod
    def split_lines(text: str) -> List[str]:
        return [line.rstrip("\r") for line in text.split("\n")]

    def plan(self, text: str) -> List[LinePlacement]:
        """
        Compute the placement of every line without drawing anything.

        The cursor starts at ``height - margin`` and drops by
        ``font_size + 5`` per line; a new page starts once it falls
        below ``margin + 20``.
        """
        placements = []
        page_index = 0
        cursor_y = self.page_height - self.margin

        for line in self.split_lines(text):
            if cursor_y < self.margin + LAYOUT_BREAK_GAP:
                page_index += 1
                cursor_y = self.page_height - self.margin
            placements.append(LinePlacement(page_index, cursor_y, line[:self.max_line_chars]))
            cursor_y -= self.font_size + LAYOUT_LINE_GAP

        return placements

    def missing_glyphs(self, placements: List[LinePlacement]) -> List[str]:
        """Characters that would be drawn but have no glyph in the layout font."""
        missing = set()
        for placement in placements:
            for char in placement.text:
                if not char.isspace() and not self.font.has_glyph(ord(char)):
                    missing.add(char)
        return sorted(missing)

    def layout(self, text: str, title: str) -> fitz.Document:
        """
        Render ``text`` into a new document.

        ``title`` is not drawn on the page; it is stored as the PDF's
        metadata title.

        Raises:
            PdfOperationError: UNRENDERABLE_TEXT if the font lacks glyphs for
                any character that would be drawn
        """
        placements = self.plan(text)
        missing = self.missing_glyphs(placements)
        if missing:
            raise PdfOperationError.of(
                UNRENDERABLE_TEXT,
                f"The layout font {self.font.name} cannot render {len(missing)} characters",
                characters="".join(missing[:50]),
                font=self.font.name,
            )

        document = fitz.open()
        page_count = placements[-1].page_index + 1 if placements else 1
        for _ in range(page_count):
            page = document.new_page(width=self.page_width, height=self.page_height)
            page.insert_font(fontname=FONT_REF, fontbuffer=self.font.buffer)

        for placement in placements:
            if not placement.text.strip():
                continue
            page = document[placement.page_index]
            page.insert_text(
                fitz.Point(self.margin, self.page_height - placement.cursor_y),
                placement.text,
                fontsize=self.font_size,
                fontname=FONT_REF,
                color=BLACK,
            )

        document.set_metadata({"title": title, "producer": "OK PDF"})
        logger.info(f"Laid out {len(placements)} lines on {document.page_count} pages ({title!r})")
        return document
