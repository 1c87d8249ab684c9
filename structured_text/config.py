"""
Tuneable parameters for structured text extraction.

Every threshold used by the layout heuristics lives here.  The defaults
were chosen empirically and should be validated against a labelled
sample of real PDF pages before being changed.
"""

from dataclasses import dataclass


@dataclass
class ExtractionConfig:
    """
    Thresholds for the page-level extraction engine.

    Distances are in PDF user-space units (points); ``*_ratio`` fields are
    fractions; ``*_gap`` break thresholds are multiples of the page's
    median font size.

    Attributes:
        line_tolerance_min:        Minimum Y distance for two items to share a line.
        line_tolerance_ratio:      Y tolerance as a fraction of the item's font size.
        filter_margins:            Drop header/footer boilerplate lines.
        margin_min_lines:          Pages with fewer lines are never filtered.
        margin_band_ratio:         Height of the header and footer bands.
        margin_max_chars:          Margin lines shorter than this may be dropped...
        margin_max_items:          ...when they also have fewer items than this.
        detect_columns:            Enable multi-column detection.
        column_min_gap:            Absolute minimum gap between column starts.
        column_gap_ratio:          Column gap as a fraction of page width.
        column_start_tolerance:    X tolerance when counting recurring line starts.
        column_min_frequency:      Fraction of lines that must start at a column.
        split_wide_gaps:           Retry column detection on lines split at wide
                                   gaps when the unsplit lines give one column.
        gutter_min_words:          Words a run right of a wide gap needs to count...
        gutter_min_share:          ...and the share of such runs that must, for the
                                   gaps to be treated as a gutter.
        space_width_ratio:         Approximate space glyph width / font size.
        table_min_gap:             Item gaps below this are ignored for tables.
        table_gap_variance_ratio:  Max gap deviation / mean gap for a table row.
        table_tab_gap:             Gaps wider than this become tabs in table rows.
        heading_font_ratio:        Font size / median above which a line is a heading.
        heading_max_items:         Headings have fewer items than this.
        heading_min_caps_length:   ALL-CAPS headings must be longer than this.
        section_gap:               Normalised gap forcing a section break.
        paragraph_gap:             Normalised gap forcing a paragraph break.
        sentence_gap:              Gap for a paragraph break after a full sentence.
        line_gap:                  Normalised gap forcing a line break.
        indent_threshold:          First-line indent that starts a paragraph.
        block_formula_min_length:  Formula lines longer than this are blocks.
        default_font_size:         Median font size when a page has no lines.
    """

    line_tolerance_min: float = 2.0
    line_tolerance_ratio: float = 0.2

    filter_margins: bool = True
    margin_min_lines: int = 5
    margin_band_ratio: float = 0.10
    margin_max_chars: int = 50
    margin_max_items: int = 5

    detect_columns: bool = True
    column_min_gap: float = 50.0
    column_gap_ratio: float = 0.15
    column_start_tolerance: float = 20.0
    column_min_frequency: float = 0.10
    split_wide_gaps: bool = True
    gutter_min_words: int = 2
    gutter_min_share: float = 0.5

    space_width_ratio: float = 0.25

    table_min_gap: float = 10.0
    table_gap_variance_ratio: float = 0.3
    table_tab_gap: float = 15.0

    heading_font_ratio: float = 1.2
    heading_max_items: int = 10
    heading_min_caps_length: int = 3

    section_gap: float = 3.0
    paragraph_gap: float = 2.0
    sentence_gap: float = 0.8
    line_gap: float = 1.2
    indent_threshold: float = 20.0

    block_formula_min_length: int = 40

    default_font_size: float = 12.0


DEFAULT_CONFIG = ExtractionConfig()


def resolve_config(config=None) -> ExtractionConfig:
    """Return *config* or the shared defaults when ``None``."""
    return config if config is not None else DEFAULT_CONFIG
