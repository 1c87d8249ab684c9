"""
Table row and formula detection.

Tables are recognised from regular horizontal spacing between the items
of a line; formulas from the presence of mathematical or Greek symbols.
"""

import logging
import re
from typing import List, Optional, Set

import numpy as np

from structured_text.config import ExtractionConfig, resolve_config
from structured_text.layout.models import TextLine

logger = logging.getLogger(__name__)

_RE_MATH = re.compile(r"[∑∏∫√±×÷≠≈≤≥∞∂∇α-ωΑ-Ω]")


def contains_math(text: str) -> bool:
    """True if *text* contains a math operator or a Greek letter."""
    return bool(_RE_MATH.search(text))


def _significant_gaps(line: TextLine, min_gap: float) -> List[float]:
    return [
        item.x - prev.right
        for prev, item in zip(line.items, line.items[1:])
        if item.x - prev.right > min_gap
    ]


def is_table_row(line: TextLine, config: Optional[ExtractionConfig] = None) -> bool:
    """
    Decide whether *line* looks like a row of a table.

    A row needs at least two gaps wider than ``table_min_gap`` whose mean
    absolute deviation is below ``table_gap_variance_ratio`` of their
    mean, i.e. cells separated by regular spacing.
    """
    if len(line.items) < 2:
        return False

    cfg = resolve_config(config)
    gaps = np.array(_significant_gaps(line, cfg.table_min_gap), dtype=float)
    if gaps.size < 2:
        return False

    mean_gap = gaps.mean()
    deviation = np.abs(gaps - mean_gap).mean()
    return bool(deviation < mean_gap * cfg.table_gap_variance_ratio)


def detect_table_regions(
    lines: List[TextLine],
    config: Optional[ExtractionConfig] = None,
) -> Set[int]:
    """
    Indices of *lines* that belong to tables.

    Each qualifying row also pulls in its immediate neighbours when they
    qualify on their own, so a table is never split around a row that
    was evaluated in isolation.
    """
    flags = [is_table_row(line, config) for line in lines]
    table_lines: Set[int] = set()

    for i, flagged in enumerate(flags):
        if not flagged:
            continue
        table_lines.add(i)
        if i > 0 and flags[i - 1]:
            table_lines.add(i - 1)
        if i < len(lines) - 1 and flags[i + 1]:
            table_lines.add(i + 1)

    if table_lines:
        logger.debug("Detected %d table rows", len(table_lines))
    return table_lines


def format_table_row(line: TextLine, config: Optional[ExtractionConfig] = None) -> str:
    """
    Rebuild a table row: a tab where the gap exceeds ``table_tab_gap``,
    otherwise a single space.
    """
    if not line.items:
        return ""

    cfg = resolve_config(config)
    parts = [line.items[0].text]
    for prev, item in zip(line.items, line.items[1:]):
        parts.append("\t" if item.x - prev.right > cfg.table_tab_gap else " ")
        parts.append(item.text)
    return "".join(parts)
