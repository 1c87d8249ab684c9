"""
Raw fragment model emitted by the page text layer.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class RawFragment:
    """
    One text run as a content-stream parser would report it.

    ``transform`` is the affine text matrix ``[a, b, c, d, e, f]`` in PDF
    user space (origin bottom-left, Y up): ``(e, f)`` is the baseline
    origin and the font size is the length of the ``(c, d)`` column.
    """

    text: str
    transform: List[float] = field(default_factory=lambda: [1.0, 0.0, 0.0, 1.0, 0.0, 0.0])
    width: float = 0.0
    height: float = 0.0

    @property
    def x(self) -> float:
        return self.transform[4]

    @property
    def y(self) -> float:
        return self.transform[5]

    def to_dict(self) -> dict:
        return {
            "str": self.text,
            "transform": list(self.transform),
            "width": self.width,
            "height": self.height,
        }
