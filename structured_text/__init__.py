"""
Structured text extraction from positioned PDF text fragments.

Layout reconstruction (lines, margins, columns, tables, formulas),
break classification, typed segments with their sentinel rendering,
speech pacing, and the document pipeline.
"""

from .assembler import (
    analyze_page,
    extract_page,
    extract_structured_text,
    page_text_from_layout,
    sort_items_by_position,
)
from .config import ExtractionConfig
from .markup import BreakLevel, PageText, parse_structured_text
from .pipeline import DocumentExtractor, ExtractionResult, PageExtraction, PipelineConfig

__all__ = [
    "ExtractionConfig",
    "analyze_page",
    "extract_page",
    "extract_structured_text",
    "page_text_from_layout",
    "sort_items_by_position",
    "BreakLevel",
    "PageText",
    "parse_structured_text",
    "DocumentExtractor",
    "ExtractionResult",
    "PageExtraction",
    "PipelineConfig",
]
