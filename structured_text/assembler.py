"""
Structured text assembly for one page.

Runs the layout stages in order (items → lines → margin filter → columns →
table regions), then walks each column top to bottom and turns its lines
into typed segments: words separated by classified breaks, fenced table
blocks and formula spans.  Columns are processed independently and
joined left to right.

Usage:
    page_text = extract_page(fragments)
    text = page_text.render()          # sentinel string
    text = extract_structured_text(fragments)   # same, in one call
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from structured_text.breaks import (
    decide_break,
    is_heading,
    median_font_size,
    should_merge_hyphenation,
    strip_hyphen,
)
from structured_text.config import ExtractionConfig, resolve_config
from structured_text.layout.columns import (
    assign_lines_to_columns,
    column_gap_threshold,
    detect_columns,
)
from structured_text.layout.items import build_positioned_items, to_positioned_item
from structured_text.layout.lines import build_line_text, group_into_lines, split_wide_gaps
from structured_text.layout.margins import partition_margin_lines
from structured_text.layout.models import Column, PageLayout, TextLine
from structured_text.markup.levels import BreakLevel
from structured_text.markup.models import (
    BreakSegment,
    FormulaSegment,
    PageText,
    Segment,
    TableSegment,
    WordSegment,
)
from structured_text.markup.vocabulary import is_block_formula
from structured_text.regions import (
    contains_math,
    detect_table_regions,
    format_table_row,
    is_table_row,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout analysis
# ---------------------------------------------------------------------------

def _word_count(line: TextLine) -> int:
    return sum(len(item.text.split()) for item in line.items)


def _gutter_runs(lines: List[TextLine], cfg: ExtractionConfig) -> Optional[List[TextLine]]:
    """
    Lines cut at wide gaps, or ``None`` when the cuts do not look like a gutter.

    Table rows are never cut.  The gaps count as a gutter only when enough
    of the runs right of them hold running text rather than a lone token
    (page numbers in a table of contents, equation numbers, form labels).
    """
    threshold = column_gap_threshold(lines, cfg)
    runs: List[TextLine] = []
    tails: List[TextLine] = []
    for line in lines:
        if is_table_row(line, cfg):
            runs.append(line)
            continue
        pieces = split_wide_gaps([line], threshold)
        runs.extend(pieces)
        tails.extend(pieces[1:])

    if not tails:
        return None
    wordy = sum(1 for run in tails if _word_count(run) >= cfg.gutter_min_words)
    if wordy < len(tails) * cfg.gutter_min_share:
        logger.debug("Wide gaps on %d line(s) are not a gutter", len(tails))
        return None
    return runs


def analyze_page(
    fragments: Optional[Iterable[Any]],
    config: Optional[ExtractionConfig] = None,
) -> PageLayout:
    """
    Run the geometry stages and return the intermediate layout.

    Args:
        fragments: Raw fragments of one page, in any order.
        config:    Extraction thresholds.

    Returns:
        :class:`PageLayout` with lines, dropped margin lines, columns
        (lines ordered top to bottom) and table row flags.
    """
    cfg = resolve_config(config)
    items = build_positioned_items(fragments)
    lines = group_into_lines(items, cfg)

    if cfg.filter_margins:
        lines, dropped = partition_margin_lines(lines, cfg)
    else:
        dropped = []

    layout = PageLayout(items=items, lines=lines, dropped_lines=dropped)
    if not lines:
        return layout

    column_xs: List[float] = []
    runs: List[TextLine] = lines
    if cfg.detect_columns:
        column_xs = detect_columns(lines, cfg)
        if len(column_xs) <= 1 and cfg.split_wide_gaps:
            split = _gutter_runs(lines, cfg)
            split_xs = detect_columns(split, cfg) if split else []
            if len(split_xs) > 1:
                runs, column_xs = split, split_xs

    if len(column_xs) <= 1:
        start = column_xs[0] if column_xs else min(line.start_x for line in lines)
        layout.columns = [Column(x=start, lines=list(lines))]
    else:
        for x, column_lines in assign_lines_to_columns(runs, column_xs).items():
            ordered = sorted(column_lines, key=lambda line: (-line.y, line.start_x))
            layout.columns.append(Column(x=x, lines=ordered))

    for col_index, column in enumerate(layout.columns):
        for line_index in detect_table_regions(column.lines, cfg):
            layout.table_rows.add((col_index, line_index))

    logger.debug(
        "Page layout: %d items, %d lines (%d dropped), %d column(s), %d table rows",
        len(items),
        len(lines),
        len(dropped),
        layout.column_count,
        len(layout.table_rows),
    )
    return layout


# ---------------------------------------------------------------------------
# Segment building
# ---------------------------------------------------------------------------

class _ColumnBuilder:
    """Accumulates the segments of one column."""

    def __init__(self):
        self.segments: List[Segment] = []

    @property
    def last(self) -> Optional[Segment]:
        return self.segments[-1] if self.segments else None

    def tail_text(self, count: int = 3) -> str:
        """Rendered text of the last few segments."""
        return "".join(seg.render() for seg in self.segments[-count:])

    def add_break(self, level: BreakLevel):
        if self.segments:
            self.segments.append(BreakSegment(level))

    def add_words(self, text: str, glue: bool = False):
        words = text.split()
        if glue and words and isinstance(self.last, WordSegment):
            self.last.text = strip_hyphen(self.last.text) + words.pop(0)
            if words:
                self.segments.append(BreakSegment(BreakLevel.WORD))
        for i, word in enumerate(words):
            if i:
                self.segments.append(BreakSegment(BreakLevel.WORD))
            self.segments.append(WordSegment(word))

    def add_table_row(self, row: str):
        if isinstance(self.last, TableSegment):
            self.last.rows.append(row)
        else:
            self.segments.append(TableSegment(rows=[row]))

    def add_formula(self, text: str, is_block: bool):
        self.segments.append(FormulaSegment(content=text, is_block=is_block))


def _transition_level(
    prev_line: TextLine,
    curr_line: TextLine,
    median: float,
    heading: bool,
    cfg: ExtractionConfig,
) -> BreakLevel:
    """Break between a table and its neighbour: paragraph at least."""
    gap = (prev_line.y - curr_line.y) / (median if median > 0 else cfg.default_font_size)
    if heading or gap > cfg.section_gap:
        return BreakLevel.SECTION
    return BreakLevel.PARAGRAPH


def build_column_segments(
    lines: List[TextLine],
    table_rows: Set[int],
    config: Optional[ExtractionConfig] = None,
) -> List[Segment]:
    """
    Turn the lines of one column into segments.

    Args:
        lines:      Column lines ordered top to bottom.
        table_rows: Indices into *lines* flagged as table rows.
        config:     Extraction thresholds.

    Returns:
        Segment list; breaks only ever appear between two content segments.
    """
    cfg = resolve_config(config)
    median = median_font_size(lines, cfg)
    builder = _ColumnBuilder()

    prev_line: Optional[TextLine] = None
    prev_text = ""
    prev_was_table = False

    for index, line in enumerate(lines):
        if index in table_rows:
            if prev_line is not None and not prev_was_table:
                builder.add_break(_transition_level(prev_line, line, median, False, cfg))
            builder.add_table_row(format_table_row(line, cfg))
            prev_line, prev_text, prev_was_table = line, "", True
            continue

        text = build_line_text(line.items, cfg)
        if not text.strip():
            continue
        has_math = contains_math(text)

        glue = (
            prev_line is not None
            and not prev_was_table
            and not has_math
            and isinstance(builder.last, WordSegment)
            and len(builder.last.text) > 1
            and should_merge_hyphenation(prev_text, line)
        )
        if prev_line is not None and not glue:
            if prev_was_table:
                heading = is_heading(line, text, median, cfg)
                level = _transition_level(prev_line, line, median, heading, cfg)
            else:
                level = decide_break(prev_line, line, median, builder.tail_text(), cfg)
            builder.add_break(level)

        if has_math:
            builder.add_formula(text, is_block_formula(text, cfg.block_formula_min_length))
        else:
            builder.add_words(text, glue=glue)

        prev_line, prev_text, prev_was_table = line, text, False

    return builder.segments


def extract_page(
    fragments: Optional[Iterable[Any]],
    config: Optional[ExtractionConfig] = None,
) -> PageText:
    """
    Extract the structured text of one page as typed segments.

    Never raises for malformed input; a page without usable fragments
    yields an empty :class:`PageText`.
    """
    cfg = resolve_config(config)
    layout = analyze_page(fragments, cfg)
    return page_text_from_layout(layout, cfg)


def page_text_from_layout(
    layout: PageLayout,
    config: Optional[ExtractionConfig] = None,
) -> PageText:
    """Build segments for every column of an analysed page."""
    cfg = resolve_config(config)
    columns: List[List[Segment]] = []
    for col_index, column in enumerate(layout.columns):
        rows = {line for col, line in layout.table_rows if col == col_index}
        segments = build_column_segments(column.lines, rows, cfg)
        if segments:
            columns.append(segments)
    return PageText(columns=columns)


def extract_structured_text(
    fragments: Optional[Iterable[Any]],
    config: Optional[ExtractionConfig] = None,
) -> str:
    """
    Convert a page's raw fragments into the structured text string.

    Args:
        fragments: Unordered fragments with ``text``/``str``, a 6-element
                   ``transform`` and optional ``width``/``height``.
        config:    Extraction thresholds.

    Returns:
        The rendered page (``""`` for empty or degenerate input).
    """
    return extract_page(fragments, config).render()


def sort_items_by_position(
    fragments: Optional[Iterable[Any]],
    config: Optional[ExtractionConfig] = None,
) -> List[Any]:
    """
    Reorder the usable fragments into reading order: lines top to bottom,
    items left to right.  Unusable fragments are left out.
    """
    cfg = resolve_config(config)
    by_item: Dict[int, Any] = {}
    items = []
    for fragment in fragments or []:
        item = to_positioned_item(fragment)
        if item is None:
            continue
        by_item[id(item)] = fragment
        items.append(item)

    return [by_item[id(item)] for line in group_into_lines(items, cfg) for item in line.items]
