"""
Header and footer removal.

Running headers, footers and page numbers sit in the top and bottom
bands of the page.  Only lines that also *look* like boilerplate are
dropped, so legitimate body text near the margins survives.
"""

import logging
import re
from typing import List, Optional, Tuple

from structured_text.config import ExtractionConfig, resolve_config

from .lines import build_line_text
from .models import TextLine

logger = logging.getLogger(__name__)

_RE_PAGE_NUMBER = re.compile(r"^(Page\s+)?\d+(\s+of\s+\d+)?$", re.IGNORECASE)


def is_page_number(text: str) -> bool:
    """True for ``"12"``, ``"Page 3"``, ``"page 3 of 10"`` and the like."""
    return bool(_RE_PAGE_NUMBER.match(text.strip()))


def looks_like_boilerplate(line: TextLine, config: Optional[ExtractionConfig] = None) -> bool:
    """A page number, or a short line made of only a few fragments."""
    cfg = resolve_config(config)
    text = build_line_text(line.items, cfg).strip()
    if is_page_number(text):
        return True
    return len(text) < cfg.margin_max_chars and len(line.items) < cfg.margin_max_items


def partition_margin_lines(
    lines: List[TextLine],
    config: Optional[ExtractionConfig] = None,
) -> Tuple[List[TextLine], List[TextLine]]:
    """
    Split *lines* into ``(kept, dropped)`` header/footer lines.

    Pages with fewer than ``margin_min_lines`` lines, or with no vertical
    extent, are returned unchanged.
    """
    cfg = resolve_config(config)
    if len(lines) < cfg.margin_min_lines:
        return list(lines), []

    min_y = min(line.y for line in lines)
    max_y = max(line.y for line in lines)
    page_height = max_y - min_y
    if page_height <= 0:
        return list(lines), []

    header_threshold = max_y - page_height * cfg.margin_band_ratio
    footer_threshold = min_y + page_height * cfg.margin_band_ratio

    kept: List[TextLine] = []
    dropped: List[TextLine] = []
    for line in lines:
        in_band = line.y > header_threshold or line.y < footer_threshold
        if in_band and looks_like_boilerplate(line, cfg):
            dropped.append(line)
        else:
            kept.append(line)

    if dropped:
        logger.debug(
            "Dropped %d header/footer lines: %s",
            len(dropped),
            [line.raw_text[:30] for line in dropped],
        )
    return kept, dropped


def filter_headers_footers(
    lines: List[TextLine],
    config: Optional[ExtractionConfig] = None,
) -> List[TextLine]:
    """
    Drop boilerplate lines from the top and bottom 10% of the page.

    The page height is estimated from the spread of line baselines.  A
    line in either band is dropped only if it is a page number
    (``Page 3 of 10``) or is both short and sparse.

    Args:
        lines:  Lines ordered top to bottom.
        config: Extraction thresholds.

    Returns:
        The retained lines, order preserved.
    """
    kept, _ = partition_margin_lines(lines, config)
    return kept
