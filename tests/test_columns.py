from structured_text.config import ExtractionConfig
from structured_text.layout.columns import (
    assign_lines_to_columns,
    column_gap_threshold,
    detect_columns,
    nearest_column,
)


def _two_columns(line, rows=10):
    left = [line(f"l{i}a l{i}b l{i}c", 0, 700 - i * 14) for i in range(rows)]
    right = [line(f"r{i}a r{i}b r{i}c", 400, 700 - i * 14) for i in range(rows)]
    return left, right


def test_threshold_scales_with_page_width(line):
    narrow = [line("abc", 0, 100)]
    wide = [line("x" * 100, 0, 100)]  # 600 wide
    assert column_gap_threshold(narrow) == 50
    assert column_gap_threshold(wide) == 90


def test_two_columns_detected(line):
    left, right = _two_columns(line)
    assert detect_columns(left + right) == [0, 400]


def test_one_off_indent_is_not_a_column(line):
    lines = [line("body text " * 8, 0, 700 - i * 14) for i in range(19)]
    lines.append(line("a quotation", 150, 400))
    assert detect_columns(lines) == [0]


def test_frequency_threshold_is_configurable(line):
    lines = [line("body text " * 8, 0, 700 - i * 14) for i in range(19)]
    lines.append(line("a quotation", 150, 400))
    assert detect_columns(lines, ExtractionConfig(column_min_frequency=0.05)) == [0, 150]


def test_starts_within_tolerance_count(line):
    left, right = _two_columns(line)
    # right column starts jitter by up to 15 around 400
    for i, ln in enumerate(right):
        for it in ln.items:
            it.x += (i % 4) * 5
    columns = detect_columns(left + right)
    assert len(columns) == 2
    assert columns[1] == 400


def test_no_lines():
    assert detect_columns([]) == []


def test_nearest_column_ties_go_left():
    assert nearest_column(50, [0, 100]) == 0
    assert nearest_column(51, [0, 100]) == 100


def test_assignment(line):
    left, right = _two_columns(line, rows=3)
    mapping = assign_lines_to_columns(right + left, [400, 0])

    assert list(mapping) == [0, 400]
    assert mapping[0] == left
    assert mapping[400] == right


def test_empty_columns_kept(line):
    mapping = assign_lines_to_columns([line("x", 0, 10)], [0, 300])
    assert mapping[300] == []
