"""
Geometry data models for page layout reconstruction.

All coordinates are in PDF user space: the origin is the bottom-left
corner of the page and Y grows upward, so a larger ``y`` is higher on
the page.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple


@dataclass
class PositionedItem:
    """A text fragment with its resolved position and font size."""

    text: str
    x: float
    y: float
    width: float
    height: float
    font_size: float

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass
class TextLine:
    """
    Items sharing a baseline, ordered left to right.

    ``y`` is the representative baseline of the line (the first item that
    opened it); ``avg_font_size`` is the mean of the members' font sizes.
    """

    items: List[PositionedItem] = field(default_factory=list)
    y: float = 0.0
    avg_font_size: float = 0.0

    @classmethod
    def from_items(cls, items: List[PositionedItem], y: float) -> "TextLine":
        """Build a closed line: members sorted by X, mean font size computed."""
        ordered = sorted(items, key=lambda it: (it.x, it.text, it.width))
        avg = sum(it.font_size for it in ordered) / len(ordered) if ordered else 0.0
        return cls(items=ordered, y=y, avg_font_size=avg)

    @property
    def start_x(self) -> float:
        """X of the first item (0 for an empty line)."""
        return self.items[0].x if self.items else 0.0

    @property
    def end_x(self) -> float:
        """Right edge of the last item (0 for an empty line)."""
        return self.items[-1].right if self.items else 0.0

    @property
    def raw_text(self) -> str:
        return "".join(it.text for it in self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        preview = self.raw_text[:40]
        return f"TextLine(y={self.y:.1f}, items={len(self.items)}, '{preview}')"


@dataclass
class Column:
    """A column start X and its lines ordered top to bottom."""

    x: float
    lines: List[TextLine] = field(default_factory=list)


@dataclass
class PageLayout:
    """
    Intermediate layout of one page, before break classification.

    Kept so that callers (the debug overlay, tests) can inspect how the
    engine grouped lines and columns.
    """

    items: List[PositionedItem] = field(default_factory=list)
    lines: List[TextLine] = field(default_factory=list)
    dropped_lines: List[TextLine] = field(default_factory=list)
    columns: List[Column] = field(default_factory=list)

    # (column index, line index) pairs flagged as table rows
    table_rows: Set[Tuple[int, int]] = field(default_factory=set)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def column_map(self) -> Dict[float, List[TextLine]]:
        """Column start X → lines, in left-to-right order."""
        return {col.x: col.lines for col in self.columns}
