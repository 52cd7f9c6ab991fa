import codecs

import pytest

from etext_segmenter.adapters import io_text


@pytest.mark.parametrize(
    "bom, expected",
    [
        (codecs.BOM_UTF8, "utf-8"),
        (codecs.BOM_UTF16_LE, "utf-16-le"),
        (codecs.BOM_UTF16_BE, "utf-16-be"),
        (codecs.BOM_UTF32_LE, "utf-32-le"),
        (codecs.BOM_UTF32_BE, "utf-32-be"),
    ],
)
def test_byte_order_mark_names_encoding(bom, expected):
    assert io_text.detect_encoding(bom + b"x") == (expected, len(bom))


def test_no_mark_falls_back_to_default():
    assert io_text.detect_encoding(b"plain") == ("iso-8859-1", 0)
    assert io_text.detect_encoding(b"plain", "utf-8") == ("utf-8", 0)


def test_decode_strips_the_mark():
    data = codecs.BOM_UTF16_LE + "Café".encode("utf-16-le")
    assert io_text.decode(data) == "Café"


def test_read_defaults_to_latin_1(tmp_path):
    path = tmp_path / "latin.txt"
    path.write_bytes("Café\nnaïve\n".encode("iso-8859-1"))
    payload = io_text.read(str(path))
    assert payload["type"] == "lines"
    assert payload["lines"] == ["Café", "naïve"]
    assert payload["source_path"] == str(path.resolve())


def test_read_with_explicit_encoding(tmp_path):
    path = tmp_path / "utf8.txt"
    path.write_bytes("Café\n".encode("utf-8"))
    assert io_text.read(str(path), encoding="utf-8")["lines"] == ["Café"]


def test_mark_overrides_explicit_encoding(tmp_path):
    path = tmp_path / "marked.txt"
    path.write_bytes(codecs.BOM_UTF8 + "été\n".encode("utf-8"))
    assert io_text.read(str(path), encoding="iso-8859-1")["lines"] == ["été"]


def test_crlf_and_form_feed_handling(tmp_path):
    path = tmp_path / "dos.txt"
    path.write_bytes(b"one\r\ntwo\x0cthree\r\n\r\nfour")
    assert io_text.read(str(path))["lines"] == ["one", "two\x0cthree", "", "four"]
