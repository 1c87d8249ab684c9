"""
Sentinel vocabulary shared by the renderer and the segment parser.

The rendered page string embeds structure as literal tokens.  Both
directions (render and parse) read their tokens from this module, so a
change here changes both sides together.
"""

import re

from .levels import BreakLevel

BREAK_MARKUP = {
    BreakLevel.WORD: " ",
    BreakLevel.LINE: "\n",
    BreakLevel.PARAGRAPH: "\n\n",
    BreakLevel.SECTION: "\n\n\n",
}

COLUMN_SEPARATOR = "\n\n---\n\n"

TABLE_OPEN = "```table\n"
TABLE_CLOSE = "\n```"

FORMULA_INLINE_START = "|||FORMULA_INLINE_START|||"
FORMULA_INLINE_END = "|||FORMULA_INLINE_END|||"
FORMULA_BLOCK_START = "|||FORMULA_BLOCK_START|||"
FORMULA_BLOCK_END = "|||FORMULA_BLOCK_END|||"

# Symbols that always make a formula display-style
_BLOCK_FORMULA_SYMBOLS = re.compile(r"[∑∏∫]")

# Parsing patterns, built from the tokens above
RE_TABLE = re.compile(f"{re.escape(TABLE_OPEN)}(?P<rows>.*?){re.escape(TABLE_CLOSE)}", re.DOTALL)
RE_FORMULA = re.compile(
    f"{re.escape(FORMULA_BLOCK_START)}(?P<block>.*?){re.escape(FORMULA_BLOCK_END)}"
    f"|{re.escape(FORMULA_INLINE_START)}(?P<inline>.*?){re.escape(FORMULA_INLINE_END)}",
    re.DOTALL,
)
# Any token that opens a structured span
MARKER_START = "|".join(
    re.escape(token) for token in (TABLE_OPEN, FORMULA_INLINE_START, FORMULA_BLOCK_START)
)


def is_block_formula(text: str, min_length: int = 40) -> bool:
    """Display formulas are long or use large operators (∑, ∏, ∫)."""
    return len(text) > min_length or bool(_BLOCK_FORMULA_SYMBOLS.search(text))


def mark_formula(text: str, is_block: bool) -> str:
    """Wrap *text* in the inline or block formula sentinels."""
    if is_block:
        return f"{FORMULA_BLOCK_START}{text}{FORMULA_BLOCK_END}"
    return f"{FORMULA_INLINE_START}{text}{FORMULA_INLINE_END}"


def render_table(rows) -> str:
    """Fence consecutive table rows in a ```` ```table ```` block."""
    return TABLE_OPEN + "\n".join(rows) + TABLE_CLOSE


def break_level_for_whitespace(whitespace: str) -> BreakLevel:
    """Map a run of rendered whitespace back to its break level."""
    newlines = whitespace.count("\n")
    if newlines >= 3:
        return BreakLevel.SECTION
    if newlines == 2:
        return BreakLevel.PARAGRAPH
    if newlines == 1:
        return BreakLevel.LINE
    return BreakLevel.WORD
