"""Plain-text IO adapter: decodes a file into lines."""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "iso-8859-1"

# UTF-32 marks first: the UTF-16 LE mark is a prefix of the UTF-32 LE one.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def detect_encoding(data: bytes, default: str = DEFAULT_ENCODING) -> tuple[str, int]:
    """Return the encoding named by a byte-order mark and the mark's length."""

    return next(
        ((name, len(bom)) for bom, name in _BOMS if data.startswith(bom)),
        (default, 0),
    )


def decode(data: bytes, default: str = DEFAULT_ENCODING) -> str:
    encoding, skip = detect_encoding(data, default)
    logger.debug("decoding as %s", encoding)
    return data[skip:].decode(encoding)


def _split_lines(text: str) -> list[str]:
    """Split on newlines only; form feeds and other separators stay in the line."""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    return lines[:-1] if lines and lines[-1] == "" else lines


def read(path: str, encoding: str | None = None) -> dict[str, Any]:
    """Read ``path`` into a ``{"type": "lines"}`` payload.

    A byte-order mark takes precedence over ``encoding``, which defaults to
    ISO-8859-1 since most plain-text etexts predate Unicode.
    """

    abs_path = str(Path(path).resolve())
    text = decode(Path(path).read_bytes(), encoding or DEFAULT_ENCODING)
    return {
        "type": "lines",
        "source_path": abs_path,
        "lines": _split_lines(text),
    }
