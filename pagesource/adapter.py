"""
PDF adapter for the extraction pipeline.

Opens documents with PyMuPDF and exposes, per page, the raw text
fragments, the page size and a rendered image for debug overlays.
"""

from typing import List, Tuple

import fitz
from PIL import Image

from pagesource.page.models import RawFragment
from pagesource.page.text_layer import PageTextLayer


def open_pdf(pdf_path: str) -> fitz.Document:
    """
    Open a PDF document.

    Args:
        pdf_path: Path to the PDF file.

    Returns:
        A fitz.Document instance.

    Raises:
        RuntimeError: If fitz cannot open the file.
    """
    try:
        doc = fitz.open(pdf_path)
    except Exception as e:
        raise RuntimeError(f"Failed to open PDF '{pdf_path}': {e}") from e
    return doc


def extract_page_fragments(
    pdf_path: str, page_index: int, granularity: str = "word"
) -> List[RawFragment]:
    """
    Extract the raw fragments of a single page.

    Args:
        pdf_path:    Path to the PDF file.
        page_index:  0-based page number.
        granularity: ``"word"`` or ``"span"``.

    Returns:
        Fragments in content-stream order (may be empty for image-only pages).
    """
    with PDFAdapter(pdf_path, granularity=granularity) as pdf:
        return pdf.fragments(page_index)


class PDFAdapter:
    """
    Keeps the document open across page operations.

    Usage::

        with PDFAdapter("paper.pdf") as pdf:
            for idx in range(pdf.page_count):
                fragments = pdf.fragments(idx)
    """

    def __init__(self, pdf_path: str, granularity: str = "word"):
        self.pdf_path = pdf_path
        self.granularity = granularity
        self.doc = open_pdf(pdf_path)
        self.page_count = self.doc.page_count

    def _load_page(self, page_index: int) -> fitz.Page:
        if page_index < 0 or page_index >= self.page_count:
            raise IndexError(
                f"Page index {page_index} out of range "
                f"(document has {self.page_count} pages)"
            )
        return self.doc.load_page(page_index)

    # -- text extraction ----------------------------------------------------

    def text_layer(self, page_index: int) -> PageTextLayer:
        """Return the full PageTextLayer for *page_index*."""
        return PageTextLayer(self._load_page(page_index), granularity=self.granularity)

    def fragments(self, page_index: int) -> List[RawFragment]:
        """Return the raw fragments of *page_index*."""
        return self.text_layer(page_index).fragments

    # -- rendering ----------------------------------------------------------

    def render(self, page_index: int, scale: float = 1.5) -> Image.Image:
        """Render *page_index* to a PIL RGB image."""
        page = self._load_page(page_index)
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        return Image.frombytes("RGB", [pix.width, pix.height], pix.samples)

    # -- geometry -----------------------------------------------------------

    def dimensions(self, page_index: int) -> Tuple[float, float]:
        """Return (width, height) in PDF points."""
        rect = self._load_page(page_index).rect
        return rect.width, rect.height

    # -- lifecycle ----------------------------------------------------------

    def close(self):
        if self.doc:
            self.doc.close()
            self.doc = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def __repr__(self):
        return f"PDFAdapter('{self.pdf_path}', pages={self.page_count})"
