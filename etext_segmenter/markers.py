"""Token primitives for recognizing etext boilerplate.

Every heuristic in :mod:`etext_segmenter.boundaries` and
:mod:`etext_segmenter.metadata` is phrased in terms of a handful of tokens: the
project name (with its known misspelling), the "work" word that follows it
(``Etext``, ``EBook`` ...), a free-standing ``by`` and the preferred-filename
line. They live here so both modules agree on what a token is.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional, Sequence

from etext_segmenter.characters import DEPENDENT_PUNCTUATION, TRIM_CHARACTERS

_DEPENDENT_CLASS = "".join(re.escape(ch) for ch in sorted(DEPENDENT_PUNCTUATION))

# "PG" must stand alone and in capitals; in lower case it is mostly part of words.
PROJECT_NAME_RE = re.compile(r"(?i:Project Gutenb[eu]rg)|\bPG\b")

# In priority order. "Gutenberg's" covers "Project Gutenberg's Address Book".
WORK_TOKENS = ("Etext", "EBook", "Edition", "book", "Gutenberg's")
_WORK_TOKEN_RES = tuple(
    re.compile(rf"{re.escape(token)}(?=$|[\s{_DEPENDENT_CLASS}])", re.IGNORECASE)
    for token in WORK_TOKENS
)

BY_RE = re.compile(r"(?<![^\s*])by(?=\s|$)", re.IGNORECASE)

# a work token this close after the project name belongs to it
WORK_TOKEN_WINDOW = 4
MAX_HEADER_BLOCK_LINES = 4

SMALL_PRINT = "small print"
SMALL_PRINT_START = "start"
SMALL_PRINT_END = "end"


def find_project_name(text: str) -> Optional[re.Match[str]]:
    return PROJECT_NAME_RE.search(text)


def has_project_name(text: str) -> bool:
    return PROJECT_NAME_RE.search(text) is not None


def iter_work_tokens(text: str) -> Iterator[re.Match[str]]:
    """Yield work-token matches, highest priority token first."""
    for pattern in _WORK_TOKEN_RES:
        yield from pattern.finditer(text)


def find_work_token(text: str) -> Optional[re.Match[str]]:
    """Return the first match of the highest priority work token in ``text``."""
    return next(iter_work_tokens(text), None)


def match_work_token_at(text: str, pos: int = 0) -> Optional[re.Match[str]]:
    return next((m for m in (p.match(text, pos) for p in _WORK_TOKEN_RES) if m), None)


def by_index(text: str) -> int:
    """Index of a free-standing "by", or ``-1``.

    "by" counts when it starts the string or follows whitespace or an asterisk,
    and ends the string or precedes whitespace.
    """
    match = BY_RE.search(text)
    return match.start() if match else -1


def is_file_line(line: str) -> bool:
    """Return ``True`` for the line naming the preferred file (``...sawyr10.txt...``)."""

    trimmed = line.strip()
    lower = trimmed.lower()
    return (
        trimmed.startswith("*") and trimmed.endswith("*") and "file" in lower
    ) or ".txt" in lower or ".zip" in lower


def work_token_follows(line: str) -> Optional[re.Match[str]]:
    """Work token directly after the project name on ``line``.

    The token must start after the project name but no more than a few
    characters past its end (``Project Gutenberg's Etext``), and must be
    followed by whitespace or dependent punctuation unless the line is led by
    an asterisk.
    """

    name = find_project_name(line)
    if name is None:
        return None
    stripped = line.lstrip(TRIM_CHARACTERS)
    led_by_asterisk = stripped.startswith("*")
    for token in iter_work_tokens(line):
        if not name.start() < token.start() < name.end() + WORK_TOKEN_WINDOW:
            continue
        if token.end() >= len(line):
            continue
        following = line[token.end()]
        if led_by_asterisk or following.isspace() or following in DEPENDENT_PUNCTUATION:
            return token
    return None


def is_header_block(lines: Sequence[str], first: bool = False) -> bool:
    """Return ``True`` when a block looks like the etext's title header.

    ``first`` marks the first block of the header region, where a line that
    simply starts with the project name is enough.
    """

    if len(lines) > MAX_HEADER_BLOCK_LINES:
        return False
    if any("money" in line.lower() for line in lines):
        return False
    for line in lines:
        name = find_project_name(line)
        if name is not None and "copyright" not in line.lower() and work_token_follows(line):
            return True
        if first and name is not None and name.start() == 0:
            return True
        if is_file_line(line):
            return True
    return False


def is_small_print_start(text: str) -> bool:
    lower = text.lower()
    return SMALL_PRINT in lower and SMALL_PRINT_START in lower


def is_header_end(text: str) -> bool:
    """Return ``True`` when a line of ``text`` closes the small print.

    Lines are checked separately because single-spaced headers can end up
    several to a block.
    """

    return any(
        SMALL_PRINT in line and SMALL_PRINT_END in line for line in text.lower().splitlines()
    )


def is_footer_end(text: str) -> bool:
    """Return ``True`` for a block that opens the closing boilerplate."""

    if not has_project_name(text):
        return False
    trim = TRIM_CHARACTERS + "*"
    return any(line.strip(trim).lower().startswith("end") for line in text.splitlines())
