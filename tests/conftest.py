import pytest

from structured_text.layout.models import PositionedItem, TextLine

# Synthetic glyph metrics: every character is half the font size wide and
# words are separated by 0.3 × font size (wider than the 0.25 space test).
CHAR_WIDTH_RATIO = 0.5
WORD_GAP_RATIO = 0.3


def make_fragment(text, x, y, size=12.0, width=None):
    """PDF.js-style text item with a pure scale transform."""
    if width is None:
        width = len(text) * size * CHAR_WIDTH_RATIO
    return {"str": text, "transform": [size, 0, 0, size, x, y], "width": width, "height": size}


def make_line_fragments(text, x, y, size=12.0):
    """One fragment per word of *text*, laid out left to right from *x*."""
    fragments = []
    cursor = x
    for word in text.split():
        frag = make_fragment(word, cursor, y, size)
        fragments.append(frag)
        cursor += frag["width"] + size * WORD_GAP_RATIO
    return fragments


def make_item(text, x, y, size=12.0, width=None):
    if width is None:
        width = len(text) * size * CHAR_WIDTH_RATIO
    return PositionedItem(text=text, x=x, y=y, width=width, height=size, font_size=size)


def make_line(text, x, y, size=12.0):
    """A closed TextLine with one item per word."""
    items = []
    cursor = x
    for word in text.split():
        item = make_item(word, cursor, y, size)
        items.append(item)
        cursor = item.right + size * WORD_GAP_RATIO
    return TextLine.from_items(items, y)


@pytest.fixture
def frag():
    return make_fragment


@pytest.fixture
def line_frags():
    return make_line_fragments


@pytest.fixture
def item():
    return make_item


@pytest.fixture
def line():
    return make_line
