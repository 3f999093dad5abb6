"""Document composition: builds new PDFs from pages of existing ones."""
import logging
from typing import List, Sequence, Tuple

import fitz  # PyMuPDF

from services.page_selector import select_pages

logger = logging.getLogger(__name__)

PageSource = Tuple[fitz.Document, Sequence[int]]


class DocumentComposer:
    """Copies selected pages of one or more source documents into a new document."""

    def compose(self, sources: Sequence[PageSource]) -> fitz.Document:
        """
        Build a new document from (document, zero-indexed pages) pairs.

        Sources are consumed in order and pages within a source in the order
        given, so duplicates appear more than once. Page objects are copied,
        so the result stays valid after the sources are closed.

        Args:
            sources: Pairs of source document and validated page indices

        Returns:
            A new fitz.Document (possibly with zero pages)
        """
        output = fitz.open()

        for source_number, (source, indices) in enumerate(sources, start=1):
            for index in indices:
                output.insert_pdf(source, from_page=index, to_page=index)
            logger.debug(f"Copied {len(indices)} pages from source {source_number}")

        logger.info(f"Composed document with {output.page_count} pages from {len(sources)} sources")
        return output

    def merge(self, documents: Sequence[fitz.Document]) -> fitz.Document:
        """Concatenate all pages of every document, in order."""
        return self.compose([(doc, list(range(doc.page_count))) for doc in documents])

    def split(self, document: fitz.Document, requested_one_indexed: Sequence[int]) -> fitz.Document:
        """Extract the requested 1-indexed pages, in the order requested."""
        indices: List[int] = select_pages(requested_one_indexed, document.page_count)
        return self.compose([(document, indices)])
