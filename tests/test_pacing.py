import pytest

from structured_text.markup import parse_structured_text
from structured_text.pacing import (
    DEFAULT_PROSODY,
    TextRole,
    build_reading_script,
    get_prosody,
    preview_script,
    split_sentences,
)

PAGE = (
    "First sentence. Second one.\n\n"
    "New paragraph\n\n"
    "```table\na\tb\n```\n\n"
    "|||FORMULA_INLINE_START|||x ≤ y|||FORMULA_INLINE_END|||"
    "\n\n---\n\n"
    "Right column"
)


def test_split_sentences_respects_abbreviations():
    assert split_sentences("Dr. Smith arrived. He sat down.") == [
        "Dr. Smith arrived.",
        "He sat down.",
    ]
    assert split_sentences("no boundary here") == ["no boundary here"]
    assert split_sentences("") == []


def test_script_from_segments():
    script = build_reading_script(parse_structured_text(PAGE), page_index=2)

    assert [inst.text for inst in script] == [
        "First sentence.",
        "Second one.",
        "New paragraph",
        "",
        "Right column",
    ]
    assert script[3].role == TextRole.COLUMN_TRANSITION
    assert script[3].prosody.pause_after == pytest.approx(0.8)
    assert script[-1].column_index == 1
    assert all(inst.page_index == 2 for inst in script)


def test_pauses_follow_break_levels():
    script = build_reading_script(parse_structured_text(PAGE))

    assert script[0].prosody.pause_after == pytest.approx(0.15)  # between sentences
    assert script[1].prosody.pause_after == pytest.approx(0.3)  # paragraph
    assert script[2].prosody.pause_after == pytest.approx(0.3)
    assert script[-1].prosody.pause_after == 0


def test_section_pause():
    script = build_reading_script(parse_structured_text("Title\n\n\nbody text"))
    assert script[0].prosody.pause_after == pytest.approx(1.2)


def test_tables_and_formulas_read_on_request():
    script = build_reading_script(
        parse_structured_text(PAGE), read_tables=True, read_formulas=True
    )
    roles = [inst.role for inst in script]
    assert TextRole.TABLE in roles
    assert TextRole.FORMULA in roles
    table = next(inst for inst in script if inst.role == TextRole.TABLE)
    assert table.text == "a, b"


def test_multipliers():
    script = build_reading_script(
        parse_structured_text(PAGE), speed_multiplier=1.5, pause_multiplier=2.0
    )
    assert script[1].prosody.pause_after == pytest.approx(0.6)
    assert script[0].prosody.speed_factor == pytest.approx(1.5)


def test_get_prosody_does_not_mutate_defaults():
    rule = get_prosody(TextRole.TABLE, pause_multiplier=3.0)
    rule.skip = False
    assert DEFAULT_PROSODY[TextRole.TABLE].skip
    assert DEFAULT_PROSODY[TextRole.TABLE].pause_after == pytest.approx(0.4)


def test_empty_page():
    assert build_reading_script(parse_structured_text("")) == []


def test_preview():
    preview = preview_script(build_reading_script(parse_structured_text(PAGE)))
    assert "[PAGE 1]" in preview
    assert "[COLUMN_TRANSITION 0.8s]" in preview
    assert '"First sentence."' in preview
