"""Character classes shared by the segmenter and the boilerplate heuristics.

The sets are ASCII/Latin oriented: they describe how plain-text etexts mark
sentence ends, clause continuations, quotations and groupings.
"""

from __future__ import annotations

import re

# Whitespace plus the C0/C1 control characters that show up in old etexts.
TRIM_CHARACTERS = (
    "".join(chr(code) for code in range(0x21))
    + "\x7f\x85\xa0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

EM_DASH = "\u2014"
EN_DASH = "\u2013"
HYPHEN_MINUS = "-"

PHRASE_PUNCTUATION = frozenset(".,:;?!")
# Punctuation that continues a clause rather than ending it.
DEPENDENT_PUNCTUATION = frozenset({",", ";", ":", HYPHEN_MINUS, EN_DASH, EM_DASH, "&"})

LEFT_QUOTES = frozenset({'"', "`", "\u201c", "\u2018", "\u00ab", "\u201e"})
RIGHT_QUOTES = frozenset({'"', "'", "\u201d", "\u2019", "\u00bb"})

LEFT_GROUP_PUNCTUATION = frozenset("([{<")
RIGHT_GROUP_PUNCTUATION = frozenset(")]}>")

PUNCTUATION = (
    PHRASE_PUNCTUATION
    | DEPENDENT_PUNCTUATION
    | LEFT_QUOTES
    | RIGHT_QUOTES
    | LEFT_GROUP_PUNCTUATION
    | RIGHT_GROUP_PUNCTUATION
    | frozenset("/*_\u2026")
)

COPYRIGHT_SIGN = "\u00a9"

# Characters that cannot appear in XML 1.0 character data.
_XML_INVALID_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
_XML_FILLER = " "

_WHITESPACE_RUN_RE = re.compile(r"\s+")


def is_blank(text: str) -> bool:
    """Return ``True`` when ``text`` holds nothing but trim characters."""

    return not text.strip(TRIM_CHARACTERS)


def first_content_index(text: str) -> int:
    """Index of the first non-trim character, or ``-1`` for a blank line."""

    return next((i for i, ch in enumerate(text) if ch not in TRIM_CHARACTERS), -1)


def last_content_index(text: str) -> int:
    """Index of the last non-trim character, or ``-1`` for a blank line."""

    return next(
        (i for i in range(len(text) - 1, -1, -1) if text[i] not in TRIM_CHARACTERS),
        -1,
    )


def is_independent_punctuation(ch: str) -> bool:
    """Return ``True`` for punctuation that can close a sentence."""

    return ch in PUNCTUATION and ch not in DEPENDENT_PUNCTUATION


def ends_phrase(ch: str) -> bool:
    """Return ``True`` for phrase punctuation that does not continue a clause."""

    return ch in PHRASE_PUNCTUATION and ch not in DEPENDENT_PUNCTUATION


def has_letter_or_digit(text: str) -> bool:
    return any(ch.isalnum() for ch in text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN_RE.sub(" ", text)


def sanitize(text: str) -> str:
    """Replace characters that are not XML-safe with a neutral filler."""

    return _XML_INVALID_RE.sub(_XML_FILLER, text)
