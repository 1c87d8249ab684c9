import math

import pytest

from pagesource.page.models import RawFragment
from structured_text.layout.items import (
    build_positioned_items,
    font_size_from_transform,
    to_positioned_item,
)


def test_font_size_combines_scale_and_skew():
    assert font_size_from_transform([12, 0, 5, 12, 0, 0]) == pytest.approx(13.0)
    assert font_size_from_transform([10, 0, 0, -10, 0, 0]) == pytest.approx(10.0)


def test_position_comes_from_translation(frag):
    items = build_positioned_items([frag("Hello", 72.5, 700.25, size=11)])
    assert len(items) == 1
    it = items[0]
    assert (it.text, it.x, it.y) == ("Hello", 72.5, 700.25)
    assert it.font_size == pytest.approx(11)
    assert it.width == pytest.approx(5 * 11 * 0.5)


def test_whitespace_fragments_dropped(frag):
    items = build_positioned_items([frag("   ", 0, 0), frag("\n", 0, 0), frag("a", 0, 0)])
    assert [it.text for it in items] == ["a"]


@pytest.mark.parametrize(
    "transform",
    [
        None,
        "12 0 0 12 0 0",
        [12, 0, 0, 12, 0],
        [12, 0, 0, 12, 0, float("nan")],
        [12, 0, 0, 12, float("inf"), 0],
        [0, 0, 0, 0, 10, 10],
        [12, 0, 0, 12, "x", 0],
        [True, 0, 0, 12, 0, 0],
    ],
)
def test_malformed_transforms_skipped(transform):
    assert to_positioned_item({"str": "x", "transform": transform}) is None


def test_never_raises_on_garbage():
    garbage = [None, 42, "text", {"str": None}, {"transform": [1, 0, 0, 1, 0, 0]}, object()]
    assert build_positioned_items(garbage) == []
    assert build_positioned_items(None) == []


def test_missing_width_and_height_defaults():
    it = to_positioned_item({"str": "abc", "transform": [9, 0, 0, 9, 1, 2]})
    assert it.width == 0.0
    assert it.height == pytest.approx(9)


def test_negative_width_clamped():
    it = to_positioned_item({"text": "abc", "transform": [9, 0, 0, 9, 1, 2], "width": -4})
    assert it.width == 0.0


def test_raw_fragment_objects_accepted():
    fragment = RawFragment(text="Hi", transform=[10, 0, 0, 10, 5, 6], width=8, height=0)
    it = to_positioned_item(fragment)
    assert (it.x, it.y, it.width) == (5, 6, 8)
    assert it.height == pytest.approx(10)
    assert math.isfinite(it.font_size)


def test_input_order_preserved(frag):
    items = build_positioned_items([frag("b", 50, 10), frag("a", 0, 10)])
    assert [it.text for it in items] == ["b", "a"]
