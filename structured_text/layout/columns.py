"""
Column detection and line-to-column assignment.

Columns are inferred from where lines start: a column boundary is an X
position that is far enough from the previous boundary *and* recurs as a
line start often enough.  The frequency gate keeps one-off indentation
(a centred title, a quotation) from being mistaken for a column.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from structured_text.config import ExtractionConfig, resolve_config

from .models import TextLine

logger = logging.getLogger(__name__)


def page_width(lines: List[TextLine]) -> float:
    """Right-most text edge across *lines* (0 for no lines)."""
    if not lines:
        return 0.0
    return max(line.end_x for line in lines)


def column_gap_threshold(
    lines: List[TextLine],
    config: Optional[ExtractionConfig] = None,
) -> float:
    """Minimum distance between two column starts on this page."""
    cfg = resolve_config(config)
    return max(cfg.column_min_gap, page_width(lines) * cfg.column_gap_ratio)


def detect_columns(
    lines: List[TextLine],
    config: Optional[ExtractionConfig] = None,
) -> List[float]:
    """
    Infer column start X coordinates.

    Distinct line-start X values are scanned in ascending order.  The
    smallest one opens the first column; a later value opens a new column
    only when it lies more than ``max(50, 15% of page width)`` past the
    previous boundary and at least 10% of all lines start within ±20 of it.

    Args:
        lines:  Lines of one page.
        config: Extraction thresholds.

    Returns:
        Ascending column start X values (empty for no lines).
    """
    if not lines:
        return []

    cfg = resolve_config(config)
    starts = np.array([line.start_x for line in lines], dtype=float)
    threshold = column_gap_threshold(lines, cfg)
    min_count = len(lines) * cfg.column_min_frequency

    candidates = np.unique(starts)
    columns = [float(candidates[0])]

    for x in candidates[1:]:
        if x - columns[-1] <= threshold:
            continue
        frequency = int(np.count_nonzero(np.abs(starts - x) <= cfg.column_start_tolerance))
        if frequency >= min_count:
            columns.append(float(x))

    logger.debug(
        "Detected %d column(s) at %s (gap threshold %.1f)",
        len(columns),
        [round(c, 1) for c in columns],
        threshold,
    )
    return columns


def nearest_column(x: float, columns: List[float]) -> float:
    """The column start closest to *x*; ties go to the left-most column."""
    best = columns[0]
    best_distance = abs(x - best)
    for col in columns[1:]:
        distance = abs(x - col)
        if distance < best_distance:
            best = col
            best_distance = distance
    return best


def assign_lines_to_columns(
    lines: List[TextLine],
    columns: List[float],
) -> Dict[float, List[TextLine]]:
    """
    Assign every line to the column whose start X is nearest its own start.

    Args:
        lines:   Lines of one page.
        columns: Column start X values from :func:`detect_columns`.

    Returns:
        Column X → lines (input order preserved), keys in left-to-right
        order.  Every column appears, even when no line is assigned to it.
    """
    column_map: Dict[float, List[TextLine]] = {col: [] for col in sorted(columns)}
    if not column_map:
        return column_map

    ordered_columns = list(column_map)
    for line in lines:
        column_map[nearest_column(line.start_x, ordered_columns)].append(line)
    return column_map
