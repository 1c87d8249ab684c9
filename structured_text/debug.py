"""
Layout debug overlay.

Draws the lines the engine reconstructed onto a rendered page image:
one colour per column, with table rows and formula lines tagged and
dropped header/footer lines shown in grey.
"""

from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from structured_text.config import ExtractionConfig, resolve_config
from structured_text.layout.lines import build_line_text
from structured_text.layout.models import PageLayout, TextLine
from structured_text.regions import contains_math

COLUMN_COLORS = [
    (41, 128, 185),  # blue
    (39, 174, 96),  # green
    (142, 68, 173),  # purple
    (211, 84, 0),  # orange
    (22, 160, 133),  # teal
]
DROPPED_COLOR = (127, 140, 141)
TABLE_COLOR = (192, 57, 43)
FORMULA_COLOR = (243, 156, 18)


def line_box(
    line: TextLine, page_height: float, scale: float
) -> Tuple[float, float, float, float]:
    """Pixel box of *line*; PDF Y (up) is flipped to image Y (down)."""
    ascent = max((item.height for item in line.items), default=line.avg_font_size)
    descent = line.avg_font_size * 0.25
    x0 = line.start_x * scale
    x1 = max(line.end_x, line.start_x + 1) * scale
    y0 = (page_height - line.y - ascent) * scale
    y1 = (page_height - line.y + descent) * scale
    return x0, y0, x1, y1


def _load_font():
    try:
        return ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 11)
    except (OSError, IOError):
        return ImageFont.load_default()


def draw_page_layout(
    image: Image.Image,
    layout: PageLayout,
    page_height: float,
    scale: float,
    config: Optional[ExtractionConfig] = None,
    line_width: int = 1,
) -> Image.Image:
    """
    Draw colour-coded boxes around every reconstructed line.

    Args:
        image:       Page rendered at *scale*.
        layout:      Result of :func:`structured_text.assembler.analyze_page`.
        page_height: Page height in PDF points.
        scale:       Render scale used for *image*.
        config:      Extraction thresholds (for line text reconstruction).
        line_width:  Border width in pixels.

    Returns:
        A new RGB image.
    """
    cfg = resolve_config(config)
    img = image.copy()
    draw = ImageDraw.Draw(img, "RGBA")
    font = _load_font()

    for line in layout.dropped_lines:
        box = line_box(line, page_height, scale)
        draw.rectangle(box, fill=(*DROPPED_COLOR, 40), outline=DROPPED_COLOR)

    for col_index, column in enumerate(layout.columns):
        color = COLUMN_COLORS[col_index % len(COLUMN_COLORS)]
        for line_index, line in enumerate(column.lines):
            x0, y0, x1, y1 = line_box(line, page_height, scale)
            draw.rectangle([x0, y0, x1, y1], fill=(*color, 30))
            for i in range(line_width):
                draw.rectangle([x0 - i, y0 - i, x1 + i, y1 + i], outline=color)

            tag = None
            if (col_index, line_index) in layout.table_rows:
                tag, tag_color = "TABLE", TABLE_COLOR
            elif contains_math(build_line_text(line.items, cfg)):
                tag, tag_color = "MATH", FORMULA_COLOR
            if tag:
                tw, th = draw.textbbox((0, 0), tag, font=font)[2:]
                draw.rectangle([x1 + 2, y0, x1 + tw + 8, y0 + th + 4], fill=(*tag_color, 220))
                draw.text((x1 + 5, y0 + 2), tag, fill=(255, 255, 255), font=font)

        # column start marker
        cx = column.x * scale
        draw.line([(cx, 0), (cx, img.height)], fill=(*color, 90), width=1)
        draw.text((cx + 2, 2), f"C{col_index + 1}", fill=color, font=font)

    return img.convert("RGB")
