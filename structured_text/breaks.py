"""
Break classification between consecutive lines, and hyphenation merging.

The vertical gap between two lines is normalised by the page's median
font size and combined with typographic cues (headings, sentence ends,
first-line indents) to pick a :class:`BreakLevel`.
"""

import re
from typing import List, Optional

import numpy as np

from structured_text.config import ExtractionConfig, resolve_config
from structured_text.layout.lines import build_line_text
from structured_text.layout.models import TextLine
from structured_text.markup.levels import BreakLevel

_RE_SENTENCE_END = re.compile(r"[.!?][\"']?\s*$")
_RE_STARTS_CAPITAL = re.compile(r"^[A-Z]")


def median_font_size(lines: List[TextLine], config: Optional[ExtractionConfig] = None) -> float:
    """Upper median of the lines' average font sizes."""
    cfg = resolve_config(config)
    if not lines:
        return cfg.default_font_size
    sizes = np.sort(np.array([line.avg_font_size for line in lines], dtype=float))
    median = float(sizes[len(sizes) // 2])
    return median if median > 0 else cfg.default_font_size


def is_heading(
    line: TextLine,
    text: str,
    median: float,
    config: Optional[ExtractionConfig] = None,
) -> bool:
    """
    Heading cues: a short line set larger than body text, a line ending
    with a colon, or a short ALL-CAPS line.
    """
    cfg = resolve_config(config)
    stripped = text.strip()
    is_short = len(line.items) < cfg.heading_max_items
    is_large = line.avg_font_size > median * cfg.heading_font_ratio
    is_caps = stripped.isupper() and len(stripped) > cfg.heading_min_caps_length
    return (is_large and is_short) or stripped.endswith(":") or (is_caps and is_short)


def should_merge_hyphenation(previous_text: str, line: TextLine) -> bool:
    """
    True when *previous_text* ends with a hyphen and *line* continues the
    word (its first character is lowercase).
    """
    if not previous_text.endswith("-") or not line.items:
        return False
    first = line.items[0].text.strip()[:1]
    return bool(first) and first.islower()


def strip_hyphen(text: str) -> str:
    """Remove the trailing hyphen of a word split across lines."""
    return text[:-1] if text.endswith("-") else text


def decide_break(
    prev_line: TextLine,
    curr_line: TextLine,
    median: float,
    accumulated_text: str = "",
    config: Optional[ExtractionConfig] = None,
) -> BreakLevel:
    """
    Choose the break to emit between *prev_line* and *curr_line*.

    Rules, first match wins (gap = baseline distance / median font size):

    1. Either line is a heading → section break.
    2. gap > 3.0 → section break.
    3. gap > 2.0 → paragraph break.
    4. gap > 0.8, the text so far ends a sentence and the current line
       starts with a capital → paragraph break.
    5. The current line is indented more than 20 past the previous one →
       paragraph break.
    6. gap > 1.2 → line break.
    7. Otherwise a word space (same paragraph).

    Hyphenation merging is decided separately and takes precedence over
    all of these (see :func:`should_merge_hyphenation`).

    Args:
        prev_line:        The line emitted before.
        curr_line:        The line about to be emitted.
        median:           Median font size of the page or column.
        accumulated_text: Text emitted so far in this column; defaults to
                          the previous line's text.
        config:           Extraction thresholds.
    """
    cfg = resolve_config(config)
    prev_text = build_line_text(prev_line.items, cfg)
    curr_text = build_line_text(curr_line.items, cfg)

    if is_heading(curr_line, curr_text, median, cfg) or is_heading(
        prev_line, prev_text, median, cfg
    ):
        return BreakLevel.SECTION

    gap = (prev_line.y - curr_line.y) / (median if median > 0 else cfg.default_font_size)

    if gap > cfg.section_gap:
        return BreakLevel.SECTION
    if gap > cfg.paragraph_gap:
        return BreakLevel.PARAGRAPH

    context = (accumulated_text or prev_text).rstrip()
    if (
        gap > cfg.sentence_gap
        and _RE_SENTENCE_END.search(context)
        and _RE_STARTS_CAPITAL.match(curr_text)
    ):
        return BreakLevel.PARAGRAPH

    if curr_line.items and prev_line.items:
        if curr_line.start_x - prev_line.start_x > cfg.indent_threshold:
            return BreakLevel.PARAGRAPH

    if gap > cfg.line_gap:
        return BreakLevel.LINE
    return BreakLevel.WORD
