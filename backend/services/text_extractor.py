"""Text extraction from PDF documents."""
import logging
from typing import List

import fitz  # PyMuPDF

from models.document import ExtractedText, PageText

logger = logging.getLogger(__name__)

TEXT_BLOCK = 0


class TextContentReader:
    """Reads the text fragments (spans) of a single page in reader order."""

    def read_fragments(self, page: fitz.Page) -> List[str]:
        """
        Return the page's text spans as plain strings.

        Order follows the content stream as reported by PyMuPDF; no
        column detection or layout-aware reordering is attempted.
        """
        content = page.get_text("dict")
        fragments = []
        for block in content.get("blocks", []):
            if block.get("type") != TEXT_BLOCK:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    if span.get("text"):
                        fragments.append(span["text"])
        return fragments


class TextExtractor:
    """Concatenates per-page text with page-boundary markers."""

    def __init__(self, reader: TextContentReader = None):
        self.reader = reader or TextContentReader()

    def extract(self, document: fitz.Document) -> ExtractedText:
        """Read every page in index order into an ExtractedText."""
        pages = []
        for page in document:
            fragments = self.reader.read_fragments(page)
            pages.append(PageText(page_number=page.number + 1, fragments=fragments))
            logger.debug(f"Page {page.number + 1}: {len(fragments)} fragments")

        logger.info(f"Extracted text from {len(pages)} pages")
        return ExtractedText(pages=pages)

    def extract_text(self, document: fitz.Document) -> str:
        """
        Extract the document text as one string.

        Each page contributes "--- Page {n} ---", its fragments joined by
        single spaces, and a blank line.
        """
        return self.extract(document).to_string()
