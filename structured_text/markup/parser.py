"""
Reading-mode segmenter: sentinel string → typed segments.

This is the consumer side of the vocabulary in :mod:`.vocabulary`.  It
turns a rendered page back into a :class:`PageText` so that renderers and
speech pacing can work from typed segments rather than raw markup.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .levels import BreakLevel
from .models import BreakSegment, FormulaSegment, PageText, Segment, TableSegment, WordSegment
from .vocabulary import (
    COLUMN_SEPARATOR,
    MARKER_START,
    RE_FORMULA,
    RE_TABLE,
    break_level_for_whitespace,
)

logger = logging.getLogger(__name__)

# Order matters: structured tokens first, then whitespace, then plain words
# (a word never swallows the start of a marker).
_RE_TOKEN = re.compile(
    f"(?P<table>{RE_TABLE.pattern})"
    f"|(?P<formula>{RE_FORMULA.pattern})"
    r"|(?P<space>\s+)"
    f"|(?P<word>(?:(?!{MARKER_START})\\S)+)"
    r"|(?P<other>\S)",
    re.DOTALL,
)


@dataclass
class MarkedFormula:
    """A formula span found in rendered text."""

    formula: str
    is_block: bool
    marker: str


def _parse_column(text: str) -> List[Segment]:
    segments: List[Segment] = []
    pending: Optional[BreakLevel] = None

    for m in _RE_TOKEN.finditer(text):
        if m.group("space") is not None:
            level = break_level_for_whitespace(m.group("space"))
            pending = level if pending is None else max(pending, level)
            continue

        if segments and pending is not None:
            segments.append(BreakSegment(pending))
        pending = None

        if m.group("table") is not None:
            rows = [row for row in m.group("rows").split("\n") if row.strip()]
            segments.append(TableSegment(rows=rows))
        elif m.group("formula") is not None:
            block = m.group("block")
            if block is not None:
                segments.append(FormulaSegment(content=block, is_block=True))
            else:
                segments.append(FormulaSegment(content=m.group("inline"), is_block=False))
        else:
            token = m.group("word") or m.group("other")
            last = segments[-1] if segments else None
            if isinstance(last, WordSegment) and not text[m.start() - 1].isspace():
                # unterminated marker character glued to the previous word
                last.text += token
            else:
                segments.append(WordSegment(token))

    return segments


def parse_structured_text(text: Optional[str]) -> PageText:
    """
    Parse a rendered page string into typed segments.

    Recognises the column separator, ```` ```table ```` fences, inline and
    block formula sentinels, and whitespace runs (three or more newlines
    are a section break, two a paragraph break, one a line break, anything
    else a word space).  Leading and trailing whitespace of a column is
    ignored.

    The column separator is matched on the raw string, so a body line that
    is literally ``---`` between two paragraph breaks reads back as a
    column boundary.

    Args:
        text: Rendered page text.  ``None`` or non-string input is treated
              as empty.

    Returns:
        :class:`PageText`; empty columns are dropped.
    """
    if not isinstance(text, str):
        if text is not None:
            logger.warning("parse_structured_text: expected str, got %s", type(text).__name__)
        return PageText()

    columns = []
    for chunk in text.split(COLUMN_SEPARATOR):
        segments = _parse_column(chunk)
        if segments:
            columns.append(segments)
    return PageText(columns=columns)


def extract_marked_formulas(text: str) -> List[MarkedFormula]:
    """List the formula spans in *text*, in order of appearance."""
    if not text:
        return []
    found = []
    for m in RE_FORMULA.finditer(text):
        is_block = m.group("block") is not None
        formula = m.group("block") if is_block else m.group("inline")
        found.append(MarkedFormula(formula=formula, is_block=is_block, marker=m.group(0)))
    return found
