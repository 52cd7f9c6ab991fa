"""Single-line classification used by the paragraph segmenter.

The segmenter only depends on the :class:`LineClassifier` protocol; the
:class:`ProseLineClassifier` below is the default rule set for English prose
etexts and can be replaced by any object with the same three methods.
"""

from __future__ import annotations

import re
from typing import List, Mapping, Protocol, runtime_checkable

from etext_segmenter.characters import TRIM_CHARACTERS
from etext_segmenter.models import HeadingKind

TRAILING_PUNCTUATION = (".", "!", "?", ";", ":", ",")

SECTION_HEADINGS: Mapping[str, HeadingKind] = {
    "contents": HeadingKind.CONTENTS,
    "table of contents": HeadingKind.CONTENTS,
    "preface": HeadingKind.PREFACE,
    "foreword": HeadingKind.FOREWORD,
    "introduction": HeadingKind.INTRODUCTION,
    "afterword": HeadingKind.AFTERWORD,
    "bibliography": HeadingKind.BIBLIOGRAPHY,
    "glossary": HeadingKind.GLOSSARY,
    "index": HeadingKind.INDEX,
}

NUMBERED_HEADINGS: Mapping[str, HeadingKind] = {
    "volume": HeadingKind.VOLUME,
    "book": HeadingKind.BOOK,
    "article": HeadingKind.ARTICLE,
    "part": HeadingKind.PART,
    "chapter": HeadingKind.CHAPTER,
    "act": HeadingKind.ACT,
    "scene": HeadingKind.SCENE,
}

_NUMBER_WORDS = (
    "one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|"
    "thirteen|fourteen|fifteen|sixteen|seventeen|eighteen|nineteen|twenty|"
    "thirty|forty|fifty|sixty|seventy|eighty|ninety|hundred"
)
_ORDINAL_WORDS = (
    "first|second|third|fourth|fifth|sixth|seventh|eighth|ninth|tenth|"
    "eleventh|twelfth|last|final"
)
ROMAN_RE = (
    r"(?=[ivxlcdm])m{0,3}(?:cm|cd|d?c{0,3})(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3})(?<=[ivxlcdm])"
)

_KEYWORDS = "|".join(NUMBERED_HEADINGS)
_NUMBERED_RE = re.compile(
    rf"^(?P<kind>{_KEYWORDS})\s+(?:the\s+)?"
    rf"(?:\d+|{ROMAN_RE}|(?:{_NUMBER_WORDS})(?:[-\s](?:{_NUMBER_WORDS}))*|{_ORDINAL_WORDS})\b",
    re.IGNORECASE,
)
_ORDINAL_RE = re.compile(
    rf"^(?:the\s+)?(?:\d+(?:st|nd|rd|th)|{_ORDINAL_WORDS})\s+(?P<kind>{_KEYWORDS})\b",
    re.IGNORECASE,
)
_PAGE_NUMBER_RE = re.compile(
    rf"^[\[(\-{{]?\s*(?:(?:page|p\.)\s*)?(?:\d{{1,4}}|{ROMAN_RE})\s*[\])\-}}]?$",
    re.IGNORECASE,
)
_PAGE_ROMAN_RE = re.compile(rf"^[\[(\-{{]?\s*(?:(?:page|p\.)\s*)?{ROMAN_RE}\s*[\])\-}}]?$")

BREAK_CHARACTERS = frozenset("*-=_~#+.")
_MIN_BREAK_CHARACTERS = 3

MAX_SUB_WORDS = 8
MAX_TITLE_WORDS = 10
MAX_NUMBERED_WORDS = 8
# Words a correctly capitalized title may leave in lower case.
MINOR_WORDS = frozenset(
    "a an and as at by de for from in of on or the to with".split()
)


@runtime_checkable
class LineClassifier(Protocol):
    """Classifies a single source line for the paragraph segmenter."""

    def classify_heading(self, text: str) -> HeadingKind:
        ...

    def is_break(self, text: str) -> bool:
        ...

    def is_page_number(self, text: str) -> bool:
        ...


def _words(text: str) -> List[str]:
    return text.split()


def _section_heading(text: str) -> HeadingKind:
    key = " ".join(_words(text.rstrip(".:").lower()))
    return SECTION_HEADINGS.get(key, HeadingKind.NONE)


def _numbered_heading(text: str) -> HeadingKind:
    if len(_words(text)) > MAX_NUMBERED_WORDS:
        return HeadingKind.NONE
    match = _NUMBERED_RE.match(text) or _ORDINAL_RE.match(text)
    if not match:
        return HeadingKind.NONE
    return NUMBERED_HEADINGS[match.group("kind").lower()]


def _is_sub_heading(text: str) -> bool:
    letters = [ch for ch in text if ch.isalpha()]
    return len(letters) > 1 and text.isupper() and len(_words(text)) <= MAX_SUB_WORDS


def _is_capitalized(word: str, first: bool) -> bool:
    letters = [ch for ch in word if ch.isalpha()]
    if not letters:
        return True
    if letters[0].isupper():
        return True
    return not first and word.strip("\"'()[],;:").lower() in MINOR_WORDS


def _is_title_heading(text: str) -> bool:
    words = _words(text)
    if not words or len(words) > MAX_TITLE_WORDS or text.endswith(TRAILING_PUNCTUATION):
        return False
    if not any(ch.isalpha() for ch in text):
        return False
    return all(_is_capitalized(w, i == 0) for i, w in enumerate(words))


def classify_heading(text: str) -> HeadingKind:
    """Return the heading kind suggested by ``text`` alone."""

    stripped = text.strip(TRIM_CHARACTERS)
    if not stripped:
        return HeadingKind.NONE
    kind = _section_heading(stripped)
    if kind is HeadingKind.NONE:
        kind = _numbered_heading(stripped)
    if kind is not HeadingKind.NONE:
        return kind
    if _is_sub_heading(stripped):
        return HeadingKind.SUB
    if _is_title_heading(stripped):
        return HeadingKind.TITLE
    return HeadingKind.NONE


def is_break(text: str) -> bool:
    """Return ``True`` for decorative divider lines such as ``* * *`` or ``-----``."""

    visible = [ch for ch in text if ch not in TRIM_CHARACTERS]
    return len(visible) >= _MIN_BREAK_CHARACTERS and all(ch in BREAK_CHARACTERS for ch in visible)


def is_page_number(text: str) -> bool:
    """Return ``True`` for bare page number lines (``12``, ``[12]``, ``- 12 -``, ``xiv``)."""

    stripped = text.strip(TRIM_CHARACTERS)
    if not stripped:
        return False
    if any(ch.isdigit() for ch in stripped):
        return bool(_PAGE_NUMBER_RE.match(stripped))
    # roman page numbers only in lower case; "I" or "MIX" alone is more likely prose
    return bool(_PAGE_ROMAN_RE.match(stripped))


class ProseLineClassifier:
    """Default :class:`LineClassifier` for English prose etexts."""

    def classify_heading(self, text: str) -> HeadingKind:
        return classify_heading(text)

    def is_break(self, text: str) -> bool:
        return is_break(text)

    def is_page_number(self, text: str) -> bool:
        return is_page_number(text)
