"""Shared fixtures for OK PDF tests."""
import fitz  # PyMuPDF
import pytest


def build_pdf(page_texts, width=595, height=842) -> bytes:
    """Build a PDF in memory with one page per text, text near the top-left."""
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page(width=width, height=height)
        if text:
            page.insert_text(fitz.Point(72, 100), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    """Factory fixture returning PDF bytes for the given page texts."""
    return build_pdf


@pytest.fixture
def five_page_pdf():
    return build_pdf([f"Page {n} body" for n in range(1, 6)])
