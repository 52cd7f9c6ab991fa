from conftest import paragraphs

from etext_segmenter.boundaries import (
    is_etext,
    locate_footer,
    locate_header,
    split_envelope,
)
from etext_segmenter.models import Boundary

TITLE = "The Project Gutenberg Etext of Hamlet"
HEADER_END = "*END*THE SMALL PRINT! FOR PUBLIC DOMAIN ETEXTS*END*"
SMALL_PRINT_START = "**START**THE SMALL PRINT!**"
MONEY = "If you *want* to send money even if you don't have to"
FOOTER = "End of the Project Gutenberg Etext of Hamlet"


def _body(count):
    return [f"body paragraph {i}" for i in range(count)]


def test_explicit_header_end_wins():
    blocks = paragraphs(TITLE, "***", HEADER_END, *_body(10))
    assert locate_header(blocks) == Boundary(0, 3)


def test_divider_is_used_without_header_end():
    blocks = paragraphs(TITLE, "***", *_body(10))
    assert locate_header(blocks) == Boundary(0, 2)


def test_distant_money_marker_replaces_divider():
    blocks = paragraphs(TITLE, "***", *_body(58), MONEY, *_body(19))
    assert locate_header(blocks) == Boundary(0, 61)


def test_nearby_money_marker_keeps_divider():
    blocks = paragraphs(TITLE, "***", *_body(5), MONEY, *_body(20))
    assert locate_header(blocks) == Boundary(0, 2)


def test_start_of_text_marker_stands_in_for_divider():
    start = "*** START OF THE PROJECT GUTENBERG EBOOK HAMLET ***"
    blocks = paragraphs(TITLE, start, *_body(10))
    assert locate_header(blocks) == Boundary(0, 2)


def test_distant_small_print_is_a_second_range():
    blocks = paragraphs(TITLE, "***", *_body(13), SMALL_PRINT_START, *_body(4))
    header = locate_header(blocks)
    assert header == Boundary(0, 2, small_print=(15, 18))
    assert [i for i in range(len(blocks)) if i in header] == [0, 1, 15, 16, 17]


def test_header_end_near_document_end_falls_back_to_divider():
    blocks = paragraphs(TITLE, "***", *_body(10), HEADER_END, "last")
    assert locate_header(blocks) == Boundary(0, 2)


def test_no_markers_means_no_header():
    assert locate_header(paragraphs(*_body(12))) is None
    assert locate_header([]) is None


def test_footer_is_found_from_the_end():
    blocks = paragraphs(TITLE, "***", *_body(5), FOOTER, "license text")
    assert locate_footer(blocks) == Boundary(7, 9)
    assert locate_footer(paragraphs(*_body(3))) is None


def test_footer_scan_skips_the_header():
    blocks = paragraphs("End of the line for Project Gutenberg", HEADER_END, *_body(8))
    header = locate_header(blocks)
    assert header == Boundary(0, 2)
    assert locate_footer(blocks, header) is None


def test_split_envelope_keeps_document_order():
    blocks = paragraphs(TITLE, "***", *_body(5), FOOTER, "license text")
    envelope = split_envelope(blocks)
    assert envelope.header == blocks[:2]
    assert envelope.body == blocks[2:7]
    assert envelope.footer == blocks[7:]
    assert envelope.header_range == Boundary(0, 2)
    assert envelope.footer_range == Boundary(7, 9)


def test_split_envelope_without_markers_is_all_body():
    blocks = paragraphs(*_body(3))
    envelope = split_envelope(blocks)
    assert envelope.body == blocks
    assert envelope.header == [] and envelope.footer == []


def test_is_etext_requires_markers_in_order():
    assert is_etext(paragraphs(TITLE, SMALL_PRINT_START, HEADER_END, *_body(2)))
    assert not is_etext(paragraphs(HEADER_END, SMALL_PRINT_START, TITLE))
    assert not is_etext(paragraphs(*_body(4)))
