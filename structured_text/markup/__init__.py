"""Typed segments and the sentinel markup they render to."""

from .levels import BreakLevel
from .models import (
    BreakSegment,
    FormulaSegment,
    PageText,
    Segment,
    TableSegment,
    WordSegment,
)
from .parser import MarkedFormula, extract_marked_formulas, parse_structured_text
from .vocabulary import COLUMN_SEPARATOR, is_block_formula, mark_formula, render_table

__all__ = [
    "BreakLevel",
    "Segment",
    "WordSegment",
    "BreakSegment",
    "TableSegment",
    "FormulaSegment",
    "PageText",
    "COLUMN_SEPARATOR",
    "mark_formula",
    "is_block_formula",
    "render_table",
    "parse_structured_text",
    "extract_marked_formulas",
    "MarkedFormula",
]
