"""
Fragment-level text extraction for PDF pages.

Reads PyMuPDF's ``rawdict`` structure and re-expresses every run of
glyphs as a :class:`RawFragment` in PDF user space, the shape a
content-stream parser such as PDF.js reports.  Geometry, not document
structure, is all that survives: PyMuPDF's block and line grouping is
deliberately discarded.
"""

import logging
from typing import Dict, List, Sequence

import fitz

from .models import RawFragment

logger = logging.getLogger(__name__)

GRANULARITIES = ("span", "word")


def span_transform(
    size: float,
    direction: Sequence[float],
    origin: Sequence[float],
    page_height: float,
) -> List[float]:
    """
    Build a PDF-space text matrix from PyMuPDF span geometry.

    PyMuPDF reports positions with a top-left origin and Y growing
    downward; the returned ``[a, b, c, d, e, f]`` uses the PDF convention
    (bottom-left origin, Y up).
    """
    dx, dy = direction
    ox, oy = origin
    return [size * dx, -size * dy, size * dy, size * dx, ox, page_height - oy]


def _chars_to_fragment(
    chars: List[Dict],
    size: float,
    direction: Sequence[float],
    page_height: float,
) -> RawFragment:
    text = "".join(c.get("c", "") for c in chars)
    x0 = min(c["bbox"][0] for c in chars)
    x1 = max(c["bbox"][2] for c in chars)
    return RawFragment(
        text=text,
        transform=span_transform(size, direction, chars[0]["origin"], page_height),
        width=max(0.0, x1 - x0),
        height=size,
    )


class PageTextLayer:
    """
    Extracts raw fragments from a single PDF page.

    With ``granularity="span"`` every PyMuPDF span becomes one fragment;
    with ``"word"`` spans are further cut at whitespace, which keeps the
    horizontal gaps between table cells visible to the layout engine.
    """

    def __init__(self, page: fitz.Page, granularity: str = "word"):
        if granularity not in GRANULARITIES:
            raise ValueError(
                f"Unknown granularity '{granularity}' (expected one of {GRANULARITIES})"
            )
        self.page = page
        self.granularity = granularity
        self.page_height = page.rect.height
        self.fragments: List[RawFragment] = []

        self._extract_fragments()

    def _extract_fragments(self):
        """Walk blocks → lines → spans → chars and collect fragments."""
        flags = fitz.TEXT_PRESERVE_WHITESPACE | fitz.TEXT_PRESERVE_LIGATURES

        try:
            text_dict = self.page.get_text("rawdict", flags=flags)
        except Exception as e:
            logger.warning("Failed to extract text from page %d: %s", self.page.number, e)
            return

        for block_data in text_dict.get("blocks", []):
            # Skip image blocks
            if block_data.get("type") != 0:
                continue

            for line_data in block_data.get("lines", []):
                direction = tuple(line_data.get("dir", (1.0, 0.0)))
                for span_data in line_data.get("spans", []):
                    self._add_span(span_data, direction)

        logger.debug(
            "Page %d: %d %s fragments", self.page.number, len(self.fragments), self.granularity
        )

    def _add_span(self, span_data: Dict, direction: Sequence[float]):
        size = float(span_data.get("size", 0.0))
        chars = [c for c in span_data.get("chars", []) if c.get("c")]
        if not chars or size <= 0:
            return

        if self.granularity == "span":
            self.fragments.append(_chars_to_fragment(chars, size, direction, self.page_height))
            return

        word: List[Dict] = []
        for char in chars:
            if char["c"].isspace():
                if word:
                    self.fragments.append(
                        _chars_to_fragment(word, size, direction, self.page_height)
                    )
                    word = []
                continue
            word.append(char)
        if word:
            self.fragments.append(_chars_to_fragment(word, size, direction, self.page_height))

    @property
    def character_count(self) -> int:
        """Non-whitespace characters across all fragments."""
        return sum(len("".join(f.text.split())) for f in self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)
