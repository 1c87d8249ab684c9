"""
Line grouping and line text reconstruction.

Items are clustered into lines by baseline proximity, then each line's
text is rebuilt with spaces inferred from horizontal gaps, since many
content-stream parsers emit adjacent glyph runs without explicit spaces.
"""

import logging
from typing import List, Optional

from structured_text.config import ExtractionConfig, resolve_config

from .models import PositionedItem, TextLine

logger = logging.getLogger(__name__)


def line_tolerance(font_size: float, config: Optional[ExtractionConfig] = None) -> float:
    """Maximum baseline distance for an item of *font_size* to join a line."""
    cfg = resolve_config(config)
    return max(cfg.line_tolerance_min, font_size * cfg.line_tolerance_ratio)


def group_into_lines(
    items: List[PositionedItem],
    config: Optional[ExtractionConfig] = None,
) -> List[TextLine]:
    """
    Cluster items into lines, top to bottom.

    Items are sorted by Y descending (top of the page first); an item joins
    the open line when its baseline lies within :func:`line_tolerance` of
    the line's baseline, otherwise the open line is closed and a new one
    starts.  The sort key also includes X and text, so the result does not
    depend on the input order.

    Args:
        items:  Positioned items in any order.
        config: Extraction thresholds.

    Returns:
        Lines ordered top to bottom, members ordered left to right.
    """
    if not items:
        return []

    ordered = sorted(
        items, key=lambda it: (-it.y, it.x, it.text, it.width, it.font_size)
    )

    lines: List[TextLine] = []
    current = [ordered[0]]
    current_y = ordered[0].y

    for item in ordered[1:]:
        if abs(item.y - current_y) <= line_tolerance(item.font_size, config):
            current.append(item)
            continue
        lines.append(TextLine.from_items(current, current_y))
        current = [item]
        current_y = item.y

    lines.append(TextLine.from_items(current, current_y))

    logger.debug("Grouped %d items into %d lines", len(items), len(lines))
    return lines


def split_wide_gaps(lines: List[TextLine], min_gap: float) -> List[TextLine]:
    """
    Split lines wherever two neighbouring items are more than *min_gap* apart.

    Side-by-side columns often share baselines, which makes the line
    grouper merge a left-column line with its right-column neighbour.
    Splitting at the gutter yields one run per column so the column
    detector sees every column start.  Runs keep the parent line's Y.
    """
    runs: List[TextLine] = []
    for line in lines:
        current: List[PositionedItem] = []
        for item in line.items:
            if current and item.x - current[-1].right > min_gap:
                runs.append(TextLine.from_items(current, line.y))
                current = []
            current.append(item)
        if current:
            runs.append(TextLine.from_items(current, line.y))
    return runs


def build_line_text(
    items: List[PositionedItem],
    config: Optional[ExtractionConfig] = None,
) -> str:
    """
    Concatenate item texts, inserting a space where the gap is word-sized.

    A single space is added between two items only when the horizontal gap
    exceeds ``space_width_ratio × font size`` of the left item, which
    approximates the width of a space glyph.
    """
    if not items:
        return ""
    if len(items) == 1:
        return items[0].text

    cfg = resolve_config(config)
    parts = [items[0].text]
    for prev, item in zip(items, items[1:]):
        gap = item.x - prev.right
        if gap > prev.font_size * cfg.space_width_ratio:
            parts.append(" ")
        parts.append(item.text)
    return "".join(parts)
