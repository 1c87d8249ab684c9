import random

from structured_text.layout.lines import (
    build_line_text,
    group_into_lines,
    line_tolerance,
    split_wide_gaps,
)


def test_line_tolerance():
    assert line_tolerance(5) == 2
    assert line_tolerance(20) == 4


def test_items_grouped_top_to_bottom(item):
    items = [item("b", 50, 100), item("a", 0, 101), item("c", 0, 80)]
    lines = group_into_lines(items)

    assert len(lines) == 2
    assert [it.text for it in lines[0].items] == ["a", "b"]
    assert lines[0].y == 101
    assert [it.text for it in lines[1].items] == ["c"]


def test_average_font_size(item):
    lines = group_into_lines([item("a", 0, 100, size=10), item("b", 20, 100, size=14)])
    assert lines[0].avg_font_size == 12


def test_grouping_is_permutation_invariant(item):
    items = [item(f"w{i}", (i % 5) * 40, 700 - (i // 5) * 14) for i in range(30)]
    expected = [(line.y, line.raw_text) for line in group_into_lines(items)]

    shuffled = list(items)
    random.Random(3).shuffle(shuffled)
    assert [(line.y, line.raw_text) for line in group_into_lines(shuffled)] == expected


def test_empty_input():
    assert group_into_lines([]) == []


def test_gap_aware_spacing(item):
    items = [item("Hel", 0, 0, width=15), item("lo", 15, 0, width=10), item("world", 30, 0)]
    assert build_line_text(items) == "Hello world"


def test_single_item_text(item):
    assert build_line_text([item("only", 0, 0)]) == "only"
    assert build_line_text([]) == ""


def test_split_wide_gaps(item, line):
    merged = group_into_lines([item("left", 0, 100, width=50), item("right", 300, 100)])
    runs = split_wide_gaps(merged, 100)

    assert [run.raw_text for run in runs] == ["left", "right"]
    assert all(run.y == 100 for run in runs)

    assert len(split_wide_gaps([line("no gaps here", 0, 50)], 100)) == 1
