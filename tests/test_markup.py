import re

from structured_text.markup import (
    BreakLevel,
    COLUMN_SEPARATOR,
    PageText,
    extract_marked_formulas,
    is_block_formula,
    mark_formula,
    parse_structured_text,
)
from structured_text.markup.models import (
    BreakSegment,
    FormulaSegment,
    TableSegment,
    WordSegment,
)


def _sample_page():
    return PageText(
        columns=[
            [
                WordSegment("Intro"),
                BreakSegment(BreakLevel.SECTION),
                WordSegment("a"),
                BreakSegment(BreakLevel.WORD),
                WordSegment("b"),
                BreakSegment(BreakLevel.PARAGRAPH),
                TableSegment(["x\ty", "1\t2"]),
                BreakSegment(BreakLevel.LINE),
                FormulaSegment("∑ x", is_block=True),
            ],
            [WordSegment("right")],
        ]
    )


def test_render_vocabulary():
    text = _sample_page().render()
    assert text == (
        "Intro\n\n\na b\n\n```table\nx\ty\n1\t2\n```\n"
        "|||FORMULA_BLOCK_START|||∑ x|||FORMULA_BLOCK_END|||"
        "\n\n---\n\nright"
    )


def test_parse_recovers_segments():
    page = _sample_page()
    assert parse_structured_text(page.render()).columns == page.columns


def test_words_and_dict_export():
    page = _sample_page()
    assert page.words == ["Intro", "a", "b", "right"]
    exported = page.to_dict()
    assert exported["columns"][0][1] == {"type": "break", "level": 4}
    assert exported["columns"][0][6] == {"type": "table", "rows": ["x\ty", "1\t2"]}


def test_inline_formula_between_words():
    text = "see " + mark_formula("x ≤ y", False) + " now"
    segments = parse_structured_text(text).columns[0]
    assert segments == [
        WordSegment("see"),
        BreakSegment(BreakLevel.WORD),
        FormulaSegment("x ≤ y", is_block=False),
        BreakSegment(BreakLevel.WORD),
        WordSegment("now"),
    ]


def test_whitespace_runs_map_to_levels():
    columns = parse_structured_text("a\nb\n\nc\n\n\nd e").columns
    levels = [seg.level for seg in columns[0] if isinstance(seg, BreakSegment)]
    assert levels == [BreakLevel.LINE, BreakLevel.PARAGRAPH, BreakLevel.SECTION, BreakLevel.WORD]


def test_columns_and_edges():
    page = parse_structured_text("  left  " + COLUMN_SEPARATOR + COLUMN_SEPARATOR + "right\n")
    assert page.columns == [[WordSegment("left")], [WordSegment("right")]]


def test_empty_and_invalid_input():
    assert parse_structured_text("").is_empty
    assert parse_structured_text(None).is_empty
    assert parse_structured_text(42).is_empty
    assert PageText().render() == ""


def test_table_cells():
    table = parse_structured_text("```table\nName\tAge\nBob\t4\n```").columns[0][0]
    assert table.cells == [["Name", "Age"], ["Bob", "4"]]


def test_marked_formulas():
    text = "a " + mark_formula("α + β", False) + " b " + mark_formula("∫ f dx", True)
    found = extract_marked_formulas(text)
    assert [(f.formula, f.is_block) for f in found] == [("α + β", False), ("∫ f dx", True)]
    assert found[0].marker == mark_formula("α + β", False)
    assert extract_marked_formulas("") == []


def test_block_formula_rule():
    assert is_block_formula("∑ x")
    assert is_block_formula("x" * 41)
    assert not is_block_formula("x" * 40)
    assert not is_block_formula("x ≤ y")


def test_parser_reads_tokens_from_vocabulary():
    from structured_text.markup import parser, vocabulary

    for token in (
        vocabulary.TABLE_OPEN,
        vocabulary.TABLE_CLOSE,
        vocabulary.FORMULA_INLINE_START,
        vocabulary.FORMULA_INLINE_END,
        vocabulary.FORMULA_BLOCK_START,
        vocabulary.FORMULA_BLOCK_END,
    ):
        assert re.escape(token) in parser._RE_TOKEN.pattern

    rendered = vocabulary.render_table(["a\tb"]) + " " + mark_formula("x ≤ y", False)
    segments = parse_structured_text(rendered).columns[0]
    assert segments[0] == TableSegment(["a\tb"])
    assert segments[2] == FormulaSegment("x ≤ y", is_block=False)


def test_dash_line_reads_back_as_column_boundary():
    page = PageText(
        columns=[
            [
                WordSegment("above"),
                BreakSegment(BreakLevel.PARAGRAPH),
                WordSegment("---"),
                BreakSegment(BreakLevel.PARAGRAPH),
                WordSegment("below"),
            ]
        ]
    )
    rendered = page.render()
    assert rendered == "above" + COLUMN_SEPARATOR + "below"
    assert parse_structured_text(rendered).columns == [[WordSegment("above")], [WordSegment("below")]]
