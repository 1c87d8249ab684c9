"""
Document pipeline: PDF → per-page fragments → structured text.

Coordinates the extraction of a whole document:

1. **Fragment extraction**: PyMuPDF reports every page's text runs as
   raw positioned fragments (:mod:`pagesource`).
2. **Layout analysis**: lines, margins, columns and table rows are
   reconstructed from geometry alone (:func:`analyze_page`).
3. **Segment building**: breaks, tables and formulas become typed
   segments per column (:func:`page_text_from_layout`).
4. **Health check**: pages whose output keeps too little of their
   input text are flagged; optional overlay images are written for
   visual review.

Usage::

    from structured_text.pipeline import DocumentExtractor, PipelineConfig

    extractor = DocumentExtractor(PipelineConfig(page_range=(0, 9)))
    result = extractor.extract("paper.pdf")
    print(result.summary())
    text = result.to_text()
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tqdm import tqdm

from pagesource.adapter import PDFAdapter
from structured_text.assembler import analyze_page, page_text_from_layout
from structured_text.config import ExtractionConfig
from structured_text.debug import draw_page_layout
from structured_text.layout.models import PageLayout
from structured_text.markup.models import FormulaSegment, PageText, TableSegment, WordSegment
from structured_text.pacing import ReadingInstruction, build_reading_script

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\f"


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------


@dataclass
class PipelineConfig:
    """
    All tuneable parameters for the document pipeline.

    Attributes:
        extraction:       Thresholds of the page-level engine.
        granularity:      Fragment granularity, ``"word"`` or ``"span"``.
        page_range:       ``(start, end)`` 0-based inclusive, or ``None`` for all.
        min_coverage:     Pages keeping less than this share of their input
                          characters are flagged ``low_coverage``.
        render_scale:     Resolution multiplier for debug page rendering.
        debug_layout_dir: Save colour-coded layout images here (``None`` to skip).
        disable_tqdm:     Suppress progress bars.
    """

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    granularity: str = "word"
    page_range: Optional[Tuple[int, int]] = None
    min_coverage: float = 0.5
    render_scale: float = 1.5
    debug_layout_dir: Optional[str] = None
    disable_tqdm: bool = False


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------


def _content_chars(page_text: PageText) -> int:
    """Non-whitespace characters of the page's content (markup excluded)."""
    total = 0
    for seg in page_text.segments:
        if isinstance(seg, WordSegment):
            total += len(seg.text)
        elif isinstance(seg, TableSegment):
            total += sum(len("".join(row.split())) for row in seg.rows)
        elif isinstance(seg, FormulaSegment):
            total += len("".join(seg.content.split()))
    return total


@dataclass
class PageExtraction:
    """Structured text of one page plus the numbers behind its health check."""

    page_index: int
    page_text: PageText = field(default_factory=PageText)
    fragment_count: int = 0
    input_chars: int = 0
    output_chars: int = 0
    column_count: int = 0
    low_coverage: bool = False
    error: Optional[str] = None

    @property
    def text(self) -> str:
        return self.page_text.render()

    @property
    def coverage(self) -> float:
        """Share of input characters present in the output (1.0 for empty pages)."""
        if self.input_chars == 0:
            return 1.0
        return self.output_chars / self.input_chars

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page_index,
            "text": self.text,
            "segments": self.page_text.to_dict(),
            "fragments": self.fragment_count,
            "columns": self.column_count,
            "coverage": round(self.coverage, 3),
            "low_coverage": self.low_coverage,
            "error": self.error,
        }


@dataclass
class ExtractionResult:
    """
    Summary returned after a document run.

    Captures per-page results and timings so the caller can report or
    log them.
    """

    pdf_path: str = ""
    total_pages: int = 0
    pages: List[PageExtraction] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    time_fragments: float = 0.0
    time_layout: float = 0.0

    @property
    def pages_processed(self) -> int:
        return len(self.pages)

    @property
    def word_count(self) -> int:
        return sum(len(page.page_text.words) for page in self.pages)

    @property
    def low_coverage_pages(self) -> List[int]:
        return [page.page_index for page in self.pages if page.low_coverage]

    @property
    def failed_pages(self) -> List[int]:
        return [page.page_index for page in self.pages if page.error]

    @property
    def is_empty(self) -> bool:
        return all(page.page_text.is_empty for page in self.pages)

    def to_text(self) -> str:
        """Rendered pages joined with a form feed."""
        return PAGE_SEPARATOR.join(page.text for page in self.pages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.pdf_path,
            "total_pages": self.total_pages,
            "pages": [page.to_dict() for page in self.pages],
        }

    def reading_script(self, **kwargs) -> List[ReadingInstruction]:
        """Reading instructions for every processed page, in page order."""
        script: List[ReadingInstruction] = []
        for page in self.pages:
            script.extend(build_reading_script(page.page_text, page.page_index, **kwargs))
        return script

    def summary(self) -> str:
        """Format a human-readable summary of the run."""
        low = ", ".join(str(i + 1) for i in self.low_coverage_pages) or "none"
        failed = ", ".join(str(i + 1) for i in self.failed_pages) or "none"
        return (
            f"{'=' * 60}\n"
            f"EXTRACTION COMPLETE\n"
            f"{'=' * 60}\n"
            f"  Source:       {self.pdf_path}\n"
            f"  Pages:        {self.pages_processed} / {self.total_pages}\n"
            f"  Words:        ~{self.word_count}\n"
            f"  Low coverage: {low}\n"
            f"  Failed:       {failed}\n"
            f"\n"
            f"  Fragment extraction: {self.time_fragments:.2f}s\n"
            f"  Layout & segments:   {self.time_layout:.2f}s\n"
            f"  Total wall time:     {self.elapsed_seconds:.2f}s\n"
            f"{'=' * 60}"
        )


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------


class DocumentExtractor:
    """
    Page-by-page structured text extraction for a PDF document.

    Every page is processed independently; a page whose text cannot be
    read is logged and yields an empty result, and the run continues.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()

    def page_indices(self, page_count: int) -> range:
        """Pages selected by ``config.page_range``, clamped to the document."""
        if self.config.page_range is None:
            return range(page_count)
        start, end = self.config.page_range
        start = max(0, start)
        end = min(end, page_count - 1)
        return range(start, end + 1)

    def extract(self, pdf_path: str) -> ExtractionResult:
        """
        Extract the structured text of every selected page.

        Args:
            pdf_path: Path to the input PDF.

        Returns:
            :class:`ExtractionResult` with per-page results and timings.

        Raises:
            RuntimeError: If the PDF cannot be opened.
        """
        t_total = time.perf_counter()
        cfg = self.config
        result = ExtractionResult(pdf_path=str(pdf_path))

        with PDFAdapter(str(pdf_path), granularity=cfg.granularity) as pdf:
            result.total_pages = pdf.page_count
            indices = self.page_indices(pdf.page_count)
            logger.info("Extracting %d of %d pages from %s", len(indices), pdf.page_count, pdf_path)

            pbar = tqdm(indices, desc="Extracting text", unit="page", disable=cfg.disable_tqdm)
            for idx in pbar:
                pbar.set_postfix(page=f"{idx + 1}/{pdf.page_count}")
                page, layout = self._extract_single_page(pdf, idx, result)
                result.pages.append(page)

                if cfg.debug_layout_dir and layout is not None:
                    self._save_debug_layout(pdf, idx, layout)

        result.elapsed_seconds = time.perf_counter() - t_total

        if result.low_coverage_pages:
            logger.warning(
                "%d page(s) kept less than %.0f%% of their text: %s",
                len(result.low_coverage_pages),
                cfg.min_coverage * 100,
                [i + 1 for i in result.low_coverage_pages],
            )
        logger.info(
            "Extraction complete: %d pages, ~%d words in %.1fs",
            result.pages_processed,
            result.word_count,
            result.elapsed_seconds,
        )
        return result

    def _extract_single_page(
        self,
        pdf: PDFAdapter,
        page_index: int,
        result: ExtractionResult,
    ) -> Tuple[PageExtraction, Optional[PageLayout]]:
        """Extract one page, timing both phases on *result*."""
        cfg = self.config
        page = PageExtraction(page_index=page_index)

        t0 = time.perf_counter()
        try:
            layer = pdf.text_layer(page_index)
        except Exception as e:
            logger.warning("Could not read text of page %d (%s), skipping", page_index + 1, e)
            page.error = str(e)
            return page, None
        finally:
            result.time_fragments += time.perf_counter() - t0

        page.fragment_count = len(layer)
        page.input_chars = layer.character_count
        if not layer.fragments:
            logger.debug("Page %d: no extractable text", page_index + 1)
            return page, None

        t1 = time.perf_counter()
        layout = analyze_page(layer.fragments, cfg.extraction)
        page.page_text = page_text_from_layout(layout, cfg.extraction)
        result.time_layout += time.perf_counter() - t1

        page.column_count = layout.column_count
        page.output_chars = _content_chars(page.page_text)
        page.low_coverage = page.coverage < cfg.min_coverage
        if page.low_coverage:
            logger.warning(
                "Page %d: output keeps %.0f%% of %d input characters",
                page_index + 1,
                page.coverage * 100,
                page.input_chars,
            )
        logger.debug(
            "Page %d: %d fragments → %d column(s), %d words",
            page_index + 1,
            page.fragment_count,
            page.column_count,
            len(page.page_text.words),
        )
        return page, layout

    def _save_debug_layout(self, pdf: PDFAdapter, page_index: int, layout: PageLayout):
        """Write a colour-coded layout overlay for visual review."""
        cfg = self.config
        out = Path(cfg.debug_layout_dir)
        out.mkdir(parents=True, exist_ok=True)

        _, height = pdf.dimensions(page_index)
        img = pdf.render(page_index, scale=cfg.render_scale)
        annotated = draw_page_layout(img, layout, height, cfg.render_scale, cfg.extraction)
        path = out / f"page_{page_index:03d}.png"
        annotated.save(str(path))
        logger.debug("Saved layout debug image: %s", path)
