"""Geometry stages: items, lines, margins and columns."""

from .columns import assign_lines_to_columns, detect_columns
from .items import build_positioned_items, font_size_from_transform
from .lines import build_line_text, group_into_lines, split_wide_gaps
from .margins import filter_headers_footers
from .models import Column, PageLayout, PositionedItem, TextLine

__all__ = [
    "PositionedItem",
    "TextLine",
    "Column",
    "PageLayout",
    "build_positioned_items",
    "font_size_from_transform",
    "group_into_lines",
    "split_wide_gaps",
    "build_line_text",
    "filter_headers_footers",
    "detect_columns",
    "assign_lines_to_columns",
]
