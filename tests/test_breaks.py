import pytest

from structured_text.breaks import (
    decide_break,
    is_heading,
    median_font_size,
    should_merge_hyphenation,
    strip_hyphen,
)
from structured_text.markup.levels import BreakLevel

MEDIAN = 12.0


def test_upper_median(line):
    lines = [line("a", 0, 100, size=s) for s in (16, 10, 14, 12)]
    assert median_font_size(lines) == 14
    assert median_font_size([]) == 12


@pytest.mark.parametrize(
    "text, size, expected",
    [
        ("Larger heading", 16, True),
        ("Results:", 12, True),
        ("INTRODUCTION", 12, True),
        ("ABC", 12, False),
        ("the cat sat", 12, False),
        ("Slightly larger", 14, False),
    ],
)
def test_heading_cues(line, text, size, expected):
    assert is_heading(line(text, 0, 100, size=size), text, MEDIAN) is expected


def test_long_large_line_is_not_a_heading(line):
    text = "one two three four five six seven eight nine ten eleven"
    assert not is_heading(line(text, 0, 100, size=16), text, MEDIAN)


@pytest.mark.parametrize(
    "prev, curr, expected",
    [
        (("continuing text", 0, 100), ("more words", 0, 88), BreakLevel.WORD),
        (("continuing text", 0, 100), ("more words", 0, 60), BreakLevel.SECTION),
        (("continuing text", 0, 100), ("more words", 0, 70), BreakLevel.PARAGRAPH),
        (("End of sentence.", 0, 100), ("New start", 0, 88), BreakLevel.PARAGRAPH),
        (("a quote ends.'", 0, 100), ("Then more", 0, 88), BreakLevel.PARAGRAPH),
        (("continuing text", 0, 100), ("indented words", 30, 88), BreakLevel.PARAGRAPH),
        (("continuing text", 0, 100), ("more words", 0, 84), BreakLevel.LINE),
        (("End of sentence.", 0, 100), ("lowercase start", 0, 88), BreakLevel.WORD),
    ],
)
def test_break_rules(line, prev, curr, expected):
    assert decide_break(line(*prev), line(*curr), MEDIAN) == expected


def test_heading_overrides_small_gap(line):
    prev = line("the text", 0, 100)
    heading = line("Heading", 0, 88, size=16)
    assert decide_break(prev, heading, MEDIAN) == BreakLevel.SECTION
    assert decide_break(heading, line("body again", 0, 76), MEDIAN) == BreakLevel.SECTION


def test_accumulated_text_used_for_sentence_end(line):
    prev = line("no punctuation", 0, 100)
    curr = line("Next", 0, 88)
    assert decide_break(prev, curr, MEDIAN) == BreakLevel.WORD
    assert decide_break(prev, curr, MEDIAN, accumulated_text="Done. ") == BreakLevel.PARAGRAPH


def test_hyphenation(line):
    assert should_merge_hyphenation("an exam-", line("ple is", 0, 88))
    assert not should_merge_hyphenation("an exam-", line("Ple is", 0, 88))
    assert not should_merge_hyphenation("an exam", line("ple is", 0, 88))
    assert not should_merge_hyphenation("an exam-", line("42 is", 0, 88))
    assert strip_hyphen("exam-") == "exam"
    assert strip_hyphen("exam") == "exam"
