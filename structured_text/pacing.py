"""
Reading script for speech pacing.

Turns the typed segments of a page into a flat list of
:class:`ReadingInstruction` objects that a TTS engine can consume
sequentially.  Break levels decide the pauses: a line break is a short
breath, a paragraph a longer one, a section the longest.  Tables and
formulas are skipped unless asked for.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from structured_text.markup.levels import BreakLevel
from structured_text.markup.models import (
    BreakSegment,
    FormulaSegment,
    PageText,
    Segment,
    TableSegment,
    WordSegment,
)


class TextRole(Enum):
    """What a reading instruction speaks."""

    BODY = auto()
    TABLE = auto()
    FORMULA = auto()
    COLUMN_TRANSITION = auto()  # silence between two columns


@dataclass
class ProsodyRule:
    """
    Prosody parameters for one instruction.

    Durations in seconds.  Speed is a multiplier (1.0 = normal,
    0.9 = slower).
    """

    pause_before: float = 0.0
    pause_after: float = 0.0
    speed_factor: float = 1.0
    skip: bool = False


@dataclass
class ReadingInstruction:
    """A single unit in the reading script: one thing to speak, or a silence."""

    text: str
    role: TextRole
    prosody: ProsodyRule
    page_index: int
    column_index: int

    @property
    def should_skip(self) -> bool:
        return self.prosody.skip

    def __repr__(self) -> str:
        preview = self.text[:60].replace("\n", " ")
        return (
            f"ReadingInstruction({self.role.name}, "
            f"speed={self.prosody.speed_factor}x, "
            f"pause=[{self.prosody.pause_before}s|{self.prosody.pause_after}s], "
            f"'{preview}')"
        )


# -----------------------------------------------------------------
# Default prosody table
# -----------------------------------------------------------------

DEFAULT_PROSODY: Dict[TextRole, ProsodyRule] = {
    TextRole.BODY: ProsodyRule(
        pause_before=0.0,
        pause_after=0.0,  # taken from the break that follows
        speed_factor=1.0,
    ),
    TextRole.TABLE: ProsodyRule(
        pause_before=0.4,
        pause_after=0.4,
        speed_factor=0.95,
        skip=True,
    ),
    TextRole.FORMULA: ProsodyRule(
        pause_before=0.3,
        pause_after=0.3,
        speed_factor=0.9,
        skip=True,
    ),
    TextRole.COLUMN_TRANSITION: ProsodyRule(
        pause_before=0.0,
        pause_after=0.8,
        speed_factor=1.0,
    ),
}

# Silence after a break of each level
BREAK_PAUSES: Dict[BreakLevel, float] = {
    BreakLevel.WORD: 0.0,
    BreakLevel.LINE: 0.15,
    BreakLevel.PARAGRAPH: 0.3,
    BreakLevel.SECTION: 1.2,
}

# Pause inserted between sentences within a body block
SENTENCE_PAUSE: float = 0.15


def get_prosody(
    role: TextRole,
    speed_multiplier: float = 1.0,
    pause_multiplier: float = 1.0,
) -> ProsodyRule:
    """
    Look up the prosody rule for *role* and apply global multipliers.

    Returns a new ProsodyRule instance (does not mutate the defaults).
    """
    base = DEFAULT_PROSODY.get(role, DEFAULT_PROSODY[TextRole.BODY])
    return ProsodyRule(
        pause_before=base.pause_before * pause_multiplier,
        pause_after=base.pause_after * pause_multiplier,
        speed_factor=base.speed_factor * speed_multiplier,
        skip=base.skip,
    )


# -----------------------------------------------------------------
# Sentence splitting
# -----------------------------------------------------------------

_SENT_ABBREVS = {
    "Mr", "Mrs", "Ms", "Dr", "Prof", "Jr", "Sr", "St", "vs", "etc",
    "al", "Vol", "No", "Fig", "Eq", "Sec", "Inc", "Corp", "Ltd",
}
_RE_SENTENCE_BOUNDARY = re.compile(r"([.!?])(\s+)(?=[A-Z\"])")


def split_sentences(text: str) -> List[str]:
    """
    Split text into sentences at ``. ! ?`` followed by whitespace and an
    uppercase letter, unless the word before is a known abbreviation.
    """
    if not text:
        return []

    sentences = []
    last = 0
    for m in _RE_SENTENCE_BOUNDARY.finditer(text):
        preceding = text[last : m.start()].split()
        word_before = preceding[-1] if preceding else ""
        if word_before in _SENT_ABBREVS:
            continue
        split_at = m.start() + 1
        sentence = text[last:split_at].strip()
        if sentence:
            sentences.append(sentence)
        last = split_at

    tail = text[last:].strip()
    if tail:
        sentences.append(tail)
    return sentences


# -----------------------------------------------------------------
# Script building
# -----------------------------------------------------------------

def _speakable_table(segment: TableSegment) -> str:
    rows = [", ".join(cell.strip() for cell in row if cell.strip()) for row in segment.cells]
    return ". ".join(rows)


def _column_blocks(segments: List[Segment]) -> List[Tuple[TextRole, str, BreakLevel]]:
    """
    Group a column's segments into ``(role, text, break_after)`` blocks.

    Words up to the next line-or-stronger break form one body block;
    tables and formulas are blocks of their own.
    """
    blocks: List[Tuple[TextRole, str, BreakLevel]] = []
    words: List[str] = []

    def flush(level: BreakLevel):
        if words:
            blocks.append((TextRole.BODY, " ".join(words), level))
            words.clear()
        elif blocks:
            role, text, previous = blocks[-1]
            blocks[-1] = (role, text, max(previous, level))

    for seg in segments:
        if isinstance(seg, WordSegment):
            words.append(seg.text)
        elif isinstance(seg, BreakSegment):
            if seg.level >= BreakLevel.LINE:
                flush(seg.level)
        elif isinstance(seg, TableSegment):
            flush(BreakLevel.WORD)
            blocks.append((TextRole.TABLE, _speakable_table(seg), BreakLevel.WORD))
        elif isinstance(seg, FormulaSegment):
            flush(BreakLevel.WORD)
            blocks.append((TextRole.FORMULA, seg.content, BreakLevel.WORD))

    flush(BreakLevel.WORD)
    return blocks


def build_reading_script(
    page_text: PageText,
    page_index: int = 0,
    speed_multiplier: float = 1.0,
    pause_multiplier: float = 1.0,
    read_tables: bool = False,
    read_formulas: bool = False,
) -> List[ReadingInstruction]:
    """
    Convert one page's segments into reading instructions.

    Body blocks are split into per-sentence instructions: the first
    sentence keeps the block's pause before, the last carries the pause
    of the break that follows, and the ones in between get
    :data:`SENTENCE_PAUSE`.  A silent :attr:`TextRole.COLUMN_TRANSITION`
    instruction separates columns.

    Args:
        page_text:        Typed segments of the page.
        page_index:       0-based page number.
        speed_multiplier: Global speed scaling.
        pause_multiplier: Global pause scaling.
        read_tables:      Speak tables instead of skipping them.
        read_formulas:    Speak formulas instead of skipping them.

    Returns:
        Ordered list of ReadingInstruction.
    """
    instructions: List[ReadingInstruction] = []
    overrides = {TextRole.TABLE: read_tables, TextRole.FORMULA: read_formulas}

    for col_idx, column in enumerate(page_text.columns):
        if col_idx > 0 and instructions:
            instructions.append(
                ReadingInstruction(
                    text="",
                    role=TextRole.COLUMN_TRANSITION,
                    prosody=get_prosody(
                        TextRole.COLUMN_TRANSITION, speed_multiplier, pause_multiplier
                    ),
                    page_index=page_index,
                    column_index=col_idx,
                )
            )

        for role, text, break_after in _column_blocks(column):
            prosody = get_prosody(role, speed_multiplier, pause_multiplier)
            if overrides.get(role):
                prosody.skip = False
            break_pause = BREAK_PAUSES[break_after] * pause_multiplier

            if prosody.skip:
                _extend_last_pause(instructions, break_pause)
                continue

            pieces = split_sentences(text) if role == TextRole.BODY else [text]
            for i, piece in enumerate(pieces):
                is_last = i == len(pieces) - 1
                piece_prosody = ProsodyRule(
                    pause_before=(
                        prosody.pause_before if i == 0 else SENTENCE_PAUSE * pause_multiplier
                    ),
                    pause_after=(
                        max(prosody.pause_after, break_pause)
                        if is_last
                        else SENTENCE_PAUSE * pause_multiplier
                    ),
                    speed_factor=prosody.speed_factor,
                )
                instructions.append(
                    ReadingInstruction(
                        text=piece,
                        role=role,
                        prosody=piece_prosody,
                        page_index=page_index,
                        column_index=col_idx,
                    )
                )

    return instructions


def _extend_last_pause(instructions: List[ReadingInstruction], pause: float):
    if instructions:
        last = instructions[-1].prosody
        last.pause_after = max(last.pause_after, pause)


# -----------------------------------------------------------------
# Debug preview
# -----------------------------------------------------------------

def preview_script(script: List[ReadingInstruction]) -> str:
    """
    Format the reading script as a human-readable string for review.

    Example output::

        [PAGE 1]
        [BODY, pause=0.0s|0.3s] "Machine learning is a subfield..."
        [COLUMN_TRANSITION 0.8s]
        [BODY] "The second column starts here."
    """
    lines: List[str] = []
    current_page: Optional[int] = None

    for inst in script:
        if inst.page_index != current_page:
            current_page = inst.page_index
            lines.append(f"\n[PAGE {current_page + 1}]")

        p = inst.prosody
        if inst.role == TextRole.COLUMN_TRANSITION:
            lines.append(f"[COLUMN_TRANSITION {p.pause_after:.1f}s]")
            continue

        pauses = ""
        if p.pause_before > 0 or p.pause_after > 0:
            pauses = f", pause={p.pause_before:.1f}s|{p.pause_after:.1f}s"
        speed = f", speed={p.speed_factor:.2f}x" if p.speed_factor != 1.0 else ""

        lines.append(f'[{inst.role.name}{pauses}{speed}] "{inst.text[:80]}"')

    return "\n".join(lines)
