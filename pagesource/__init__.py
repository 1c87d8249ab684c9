"""
PDF page source for structured text extraction.
Opens documents with PyMuPDF and reports positioned text fragments.
"""

from .adapter import PDFAdapter, extract_page_fragments, open_pdf
from .page import PageTextLayer, RawFragment

__all__ = [
    "PDFAdapter",
    "PageTextLayer",
    "RawFragment",
    "open_pdf",
    "extract_page_fragments",
]
