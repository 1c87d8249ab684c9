"""
Raw fragment → positioned item conversion.

Accepts the fragment shapes produced by content-stream parsers: either
:class:`pagesource.page.models.RawFragment` instances or PDF.js-style
mappings with ``str``/``text``, ``transform`` and optional
``width``/``height``.  Anything unusable is skipped, never raised.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence

from .models import PositionedItem

logger = logging.getLogger(__name__)


def font_size_from_transform(transform: Sequence[float]) -> float:
    """
    Derive the font size from an affine text transform ``[a, b, c, d, e, f]``.

    The vertical scale ``|d|`` combined with the skew ``c`` gives the
    rendered glyph height.
    """
    scale_y = abs(transform[3])
    skew_x = transform[2]
    return math.sqrt(scale_y * scale_y + skew_x * skew_x)


def _field(fragment: Any, *names: str) -> Any:
    """Read the first present attribute or key among *names*."""
    for name in names:
        if isinstance(fragment, Mapping):
            if name in fragment:
                return fragment[name]
        elif hasattr(fragment, name):
            return getattr(fragment, name)
    return None


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def to_positioned_item(fragment: Any) -> Optional[PositionedItem]:
    """Convert one fragment, or return ``None`` if it is unusable."""
    text = _field(fragment, "text", "str")
    if not isinstance(text, str) or not text.strip():
        return None

    transform = _field(fragment, "transform")
    if transform is None or isinstance(transform, (str, bytes)):
        return None
    try:
        values = [_as_float(v) for v in transform]
    except TypeError:
        return None
    if len(values) != 6 or any(v is None for v in values):
        return None

    font_size = font_size_from_transform(values)
    if not math.isfinite(font_size) or font_size <= 0:
        return None

    raw_width = _field(fragment, "width")
    raw_height = _field(fragment, "height")
    width = _as_float(raw_width) if raw_width is not None else 0.0
    height = _as_float(raw_height) if raw_height else font_size
    if width is None or height is None:
        return None

    return PositionedItem(
        text=text,
        x=values[4],
        y=values[5],
        width=max(0.0, width),
        height=height,
        font_size=font_size,
    )


def build_positioned_items(fragments: Optional[Iterable[Any]]) -> List[PositionedItem]:
    """
    Convert raw fragments into positioned items.

    Whitespace-only fragments and fragments with a missing, malformed or
    non-finite transform (or a zero font size) are dropped.

    Args:
        fragments: Iterable of raw fragments (objects or mappings).

    Returns:
        Positioned items in input order.
    """
    if not fragments:
        return []

    items: List[PositionedItem] = []
    skipped = 0
    for fragment in fragments:
        item = to_positioned_item(fragment)
        if item is None:
            skipped += 1
            continue
        items.append(item)

    if skipped:
        logger.debug("Skipped %d unusable fragments (%d kept)", skipped, len(items))
    return items
