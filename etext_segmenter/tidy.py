"""Tidying of bibliographic strings recovered from etext headers.

``tidy`` is the shared primitive; ``tidy_title`` and ``tidy_author`` layer the
field-specific rules on top of it. Each public function runs its rules to a
fixpoint, so applying it a second time never changes the result.
"""

from __future__ import annotations

import re
from typing import Callable

from etext_segmenter.characters import (
    COPYRIGHT_SIGN,
    DEPENDENT_PUNCTUATION,
    EM_DASH,
    EN_DASH,
    HYPHEN_MINUS,
    LEFT_GROUP_PUNCTUATION,
    PHRASE_PUNCTUATION,
    PUNCTUATION,
    RIGHT_GROUP_PUNCTUATION,
    TRIM_CHARACTERS,
    collapse_whitespace,
)
from etext_segmenter.markers import by_index, find_project_name, match_work_token_at

_TIDY_TRIM = TRIM_CHARACTERS + "".join(sorted(DEPENDENT_PUNCTUATION)) + "*."
_AUTHOR_TRIM = (
    TRIM_CHARACTERS + "".join(sorted(PHRASE_PUNCTUATION)) + HYPHEN_MINUS + EM_DASH + EN_DASH
)
_RIGHT_GROUP = "".join(sorted(RIGHT_GROUP_PUNCTUATION))

_LANGUAGES = ("French", "Spanish", "German", "Italian", "Latin")
_PROJECT_PREFIXES = ("", "The ", "This is the ")
# "Book" and "Gutenberg's" often begin genuine titles
_LEADING_WORK_TOKENS = frozenset({"etext", "ebook", "edition"})
# table of contents bleeding into the first line after a break
_CONTENTS_RE = re.compile(r"(?<=[\r\n])contents", re.IGNORECASE)


def _fixpoint(step: Callable[[str], str], text: str) -> str:
    """Apply ``step`` until the text stops changing."""
    current = text
    while True:
        updated = step(current)
        if updated == current:
            return current
        current = updated


def _starts_with_word(text: str, word: str) -> bool:
    """Case-sensitive test for ``word`` as a whole leading word."""
    return re.match(rf"{re.escape(word)}\b", text) is not None


def _cut_at(text: str, needle: str) -> str:
    """Drop ``needle`` (case-insensitive) and everything after it."""
    match = re.search(re.escape(needle), text, re.IGNORECASE)
    return text[: match.start()] if match else text


def _tidy_once(text: str) -> str:
    contents = _CONTENTS_RE.search(text)
    if contents:
        text = text[: contents.start()]
    # some texts end in a stray "^M"
    if len(text) > 1 and text[-2] == "^":
        text = text[:-2]
    text = text.strip(_TIDY_TRIM)
    right = max((text.rfind(ch) for ch in RIGHT_GROUP_PUNCTUATION), default=-1)
    if right >= 0 and not text[right + 1 :].strip(TRIM_CHARACTERS):
        left = max((text.rfind(ch, 0, right) for ch in LEFT_GROUP_PUNCTUATION), default=-1)
        if left >= 0:
            text = text[:left]
    return collapse_whitespace(text.strip(_TIDY_TRIM))


def tidy(text: str) -> str:
    """Trim decorative characters, trailing groups and stray contents from ``text``."""

    return _fixpoint(_tidy_once, text)


def _strip_project_name(text: str) -> str:
    name = find_project_name(text)
    if name is None or text[: name.start()] not in _PROJECT_PREFIXES:
        return text
    text = tidy(text[name.end() :])
    if text.startswith("'s "):
        text = tidy(text[3:])
    work = match_work_token_at(text)
    if work is not None:
        text = tidy(text[work.end() :])
    return text


def _strip_language_of(text: str) -> str:
    # "in French of ..."
    if not _starts_with_word(text, "in") or not any(lang in text for lang in _LANGUAGES):
        return text
    match = re.search(r"\bof\b", text)
    return tidy(text[match.end() :]) if match else text


def _strip_copyright(text: str) -> str:
    index = text.lower().find("copyright")
    if index >= 0:
        rest = text[index + 1 :]
        if "@" in rest or COPYRIGHT_SIGN in rest or "(c)" in rest or "(C)" in rest:
            text = tidy(text[:index])
    return tidy(_cut_at(text, "(c)"))


def _tidy_title_once(text: str) -> str:
    text = tidy(text)
    if text.startswith("release of:"):
        text = tidy(text[len("release of:") :])
    text = tidy(_cut_at(text, "title:"))
    text = _strip_project_name(text)
    if text.startswith("s "):
        text = tidy(text[2:])
    text = _strip_language_of(text)
    for word in ("of", "from", "the"):
        if _starts_with_word(text, word):
            text = tidy(text[len(word) :])
    if text.lower().endswith(", or"):
        text = tidy(text[: -len(", or")])
    work = match_work_token_at(text)
    if work is not None and work.group().lower() in _LEADING_WORK_TOKENS:
        text = tidy(text[work.end() :])
        if _starts_with_word(text, "of"):
            text = tidy(text[2:])
    text = tidy(_cut_at(text, "author:"))
    by = by_index(text)
    if by >= 0 and text[by].islower():
        text = tidy(text[:by])
    return tidy(_strip_copyright(text))


def tidy_title(text: str) -> str:
    """Tidy a title, removing boilerplate lead-ins, bylines and copyright notices."""

    return _fixpoint(_tidy_title_once, text)


def _strip_author_copyright(text: str) -> str:
    index = text.lower().find("copyright")
    if index < 0:
        return text
    if any(mark in text for mark in ("@", COPYRIGHT_SIGN, "(c)", "19", "20")):
        return tidy(text[:index])
    return text


def _tidy_author_once(text: str) -> str:
    text = tidy(text).strip(_AUTHOR_TRIM)
    if _starts_with_word(text, "the"):
        text = tidy(text[3:])
    text = tidy(_cut_at(text, "author:"))
    if text.lower().endswith("all rights reserved"):
        text = tidy(text[: -len("all rights reserved")])
    text = _strip_author_copyright(text)
    this_is = text.find(", this is")
    if this_is >= 0:
        text = tidy(text[:this_is])
    by = by_index(text)
    if by >= 0 and text[by].islower():
        # "by" after punctuation introduces someone else, otherwise the author follows
        punctuation = max((text.rfind(ch, 0, by) for ch in PUNCTUATION), default=-1)
        text = tidy(text[:punctuation] if punctuation >= 0 else text[by + 2 :])
    if text and text[0] not in LEFT_GROUP_PUNCTUATION:
        text = text.rstrip(_RIGHT_GROUP)
    return text


def tidy_author(text: str) -> str:
    """Tidy an author name, dropping surrounding punctuation and rights notices."""

    return _fixpoint(_tidy_author_once, text)
