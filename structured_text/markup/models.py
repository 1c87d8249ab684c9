"""
Typed segments describing the structured text of a page.

A page is a list of columns, each a flat list of segments: words, breaks
between them, table blocks and formula spans.  The sentinel string is
only one rendering of this value (see :meth:`PageText.render`).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .levels import BreakLevel
from .vocabulary import BREAK_MARKUP, COLUMN_SEPARATOR, mark_formula, render_table


@dataclass
class WordSegment:
    text: str

    kind = "word"

    def render(self) -> str:
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "text": self.text}


@dataclass
class BreakSegment:
    level: BreakLevel

    kind = "break"

    def render(self) -> str:
        return BREAK_MARKUP[self.level]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "level": int(self.level)}


@dataclass
class TableSegment:
    rows: List[str] = field(default_factory=list)

    kind = "table"

    @property
    def cells(self) -> List[List[str]]:
        """Rows split into tab-separated cells."""
        return [row.split("\t") for row in self.rows]

    def render(self) -> str:
        return render_table(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "rows": list(self.rows)}


@dataclass
class FormulaSegment:
    content: str
    is_block: bool = False

    kind = "formula"

    def render(self) -> str:
        return mark_formula(self.content, self.is_block)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "content": self.content, "is_block": self.is_block}


Segment = Union[WordSegment, BreakSegment, TableSegment, FormulaSegment]


@dataclass
class PageText:
    """
    Structured text of one page: one segment list per column, in
    left-to-right order.  Columns are never empty.
    """

    columns: List[List[Segment]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(self.columns)

    @property
    def segments(self) -> List[Segment]:
        """All segments, column after column."""
        return [seg for column in self.columns for seg in column]

    @property
    def words(self) -> List[str]:
        """Word texts in reading order (tables and formulas excluded)."""
        return [seg.text for seg in self.segments if isinstance(seg, WordSegment)]

    def render(self) -> str:
        """Serialise to the sentinel string consumed by reading-mode clients."""
        return COLUMN_SEPARATOR.join(
            "".join(seg.render() for seg in column) for column in self.columns if column
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"columns": [[seg.to_dict() for seg in column] for column in self.columns]}

    def __str__(self) -> str:
        return self.render()
