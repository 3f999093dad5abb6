"""Document codec: parses PDF bytes into documents and serializes them back."""
import logging
from typing import List

import fitz  # PyMuPDF

from models.document import PageInfo
from models.errors import PdfOperationError, MALFORMED_DOCUMENT, EMPTY_DOCUMENT

logger = logging.getLogger(__name__)


class DocumentCodec:
    """Loads and saves PDF documents through PyMuPDF."""

    def __init__(self, garbage: int = 3, deflate: bool = True):
        """
        Initialize the codec once per process.

        Args:
            garbage: PyMuPDF garbage collection level used when saving
            deflate: Whether to compress streams when saving
        """
        self.garbage = garbage
        self.deflate = deflate
        # Failures surface as exceptions; keep MuPDF from printing to stderr as well
        fitz.TOOLS.mupdf_display_errors(False)
        logger.info(f"DocumentCodec initialized (PyMuPDF {fitz.VersionBind})")

    def load(self, data: bytes, name: str = "document.pdf") -> fitz.Document:
        """
        Parse raw PDF bytes.

        Args:
            data: Raw file contents
            name: File name, used for logging and error details

        Returns:
            An open fitz.Document

        Raises:
            PdfOperationError: MALFORMED_DOCUMENT if the bytes are not a readable PDF
        """
        if not data:
            raise PdfOperationError.of(
                MALFORMED_DOCUMENT, f"{name} is empty", filename=name
            )

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"Failed to parse PDF {name}: {str(e)}")
            raise PdfOperationError.of(
                MALFORMED_DOCUMENT,
                f"{name} is not a valid PDF document",
                filename=name,
                original_error=str(e),
            ) from e

        if doc.needs_pass:
            doc.close()
            raise PdfOperationError.of(
                MALFORMED_DOCUMENT, f"{name} is password protected", filename=name
            )

        logger.debug(f"Loaded {name}: {doc.page_count} pages, {len(data)} bytes")
        return doc

    def serialize(self, doc: fitz.Document) -> bytes:
        """
        Serialize a finished document to PDF bytes.

        Raises:
            PdfOperationError: EMPTY_DOCUMENT if the document has no pages
        """
        if doc.page_count == 0:
            raise PdfOperationError.of(
                EMPTY_DOCUMENT, "The resulting document has no pages"
            )

        data = doc.tobytes(garbage=self.garbage, deflate=self.deflate)
        logger.debug(f"Serialized document: {doc.page_count} pages, {len(data)} bytes")
        return data

    @staticmethod
    def page_info(doc: fitz.Document) -> List[PageInfo]:
        """Describe the geometry of every page in order."""
        return [
            PageInfo(page_number=page.number + 1, width=page.rect.width, height=page.rect.height)
            for page in doc
        ]
