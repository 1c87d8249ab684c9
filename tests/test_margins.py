from structured_text.layout.margins import (
    filter_headers_footers,
    is_page_number,
    partition_margin_lines,
)

BODY = "This body line is long enough that it is never boilerplate at all"


def _page(line, header="Journal of Things", footer="Page 3 of 10"):
    lines = [line(header, 72, 800)]
    lines += [line(BODY, 72, 700 - i * 50) for i in range(4)]
    lines.append(line(footer, 72, 40))
    return lines


def test_page_numbers():
    assert is_page_number("12")
    assert is_page_number("Page 3")
    assert is_page_number("page 3 of 10")
    assert not is_page_number("Chapter 3")


def test_header_and_footer_dropped(line):
    kept, dropped = partition_margin_lines(_page(line))

    assert len(kept) == 4
    assert [d.y for d in dropped] == [800, 40]


def test_short_pages_untouched(line):
    lines = [line("short", 0, 100), line("tiny", 0, 10)]
    assert filter_headers_footers(lines) == lines


def test_body_text_in_band_survives(line):
    lines = _page(line, footer=BODY)
    kept = filter_headers_footers(lines)

    assert len(kept) == 5
    assert kept[-1].y == 40


def test_flat_page_untouched(line):
    lines = [line(f"w{i}", i * 40, 100) for i in range(6)]
    assert filter_headers_footers(lines) == lines
