"""Break levels between adjacent pieces of text."""

from enum import IntEnum


class BreakLevel(IntEnum):
    """
    Ordinal strength of a discontinuity in the text.

    Comparisons follow strength, so ``max()`` of two levels picks the
    stronger break.
    """

    WORD = 1
    LINE = 2
    PARAGRAPH = 3
    SECTION = 4
