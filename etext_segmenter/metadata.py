"""Bibliographic metadata recovered from an etext header.

Each field is extracted by an ordered table of independent rules; the first
rule that yields a value wins. A field no rule can find is simply ``None``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Iterator, Optional, Sequence, Tuple

from etext_segmenter.boundaries import locate_header
from etext_segmenter.characters import (
    DEPENDENT_PUNCTUATION,
    TRIM_CHARACTERS,
    first_content_index,
    has_letter_or_digit,
)
from etext_segmenter.markers import (
    by_index,
    find_project_name,
    find_work_token,
    has_project_name,
    is_file_line,
    is_header_block,
)
from etext_segmenter.models import Block, Boundary, Metadata
from etext_segmenter.tidy import tidy, tidy_author, tidy_title

logger = logging.getLogger(__name__)

MAX_BY_AUTHOR_LENGTH = 128
TRANSITION = "etext of:"
CONTINUATION_ENDINGS = (" of", " in", " and", " de")
DEGENERATE_AUTHORS = ("author", "himself", "herself")


@dataclass(frozen=True)
class HeaderText:
    """Lines of the header blocks, with each block's header-block flag."""

    blocks: Tuple[Tuple[str, ...], ...]
    header_flags: Tuple[bool, ...]

    @classmethod
    def from_blocks(cls, blocks: Sequence[Block]) -> HeaderText:
        texts = tuple(b.texts for b in blocks)
        flags = tuple(is_header_block(lines, first=i == 0) for i, lines in enumerate(texts))
        return cls(texts, flags)

    @classmethod
    def from_text(cls, *blocks: str) -> HeaderText:
        """Build from raw block strings; lines are separated by newlines."""
        texts = tuple(tuple(b.split("\n")) for b in blocks)
        flags = tuple(is_header_block(lines, first=i == 0) for i, lines in enumerate(texts))
        return cls(texts, flags)

    def lines(self) -> Iterator[str]:
        for block in self.blocks:
            yield from block

    def header_blocks(self) -> Iterator[Tuple[str, ...]]:
        return (b for b, flag in zip(self.blocks, self.header_flags) if flag)

    def other_blocks(self) -> Iterator[Tuple[str, ...]]:
        return (b for b, flag in zip(self.blocks, self.header_flags) if not flag)


def property_value(header: HeaderText, name: str, delimiter: str = ":") -> Optional[str]:
    """Value of the first ``Name<delimiter>`` line whose value is not the name itself."""

    prefix = (name + delimiter).lower()
    for line in header.lines():
        stripped = line.strip()
        if not stripped.lower().startswith(prefix):
            continue
        value = tidy(stripped[len(prefix) :])
        if value and value.lower() != name.lower():
            return value
    return None


@dataclass(frozen=True)
class _ProjectLine:
    """A header line naming the project, split after its work token."""

    line: str
    remaining: str
    special: bool


def _project_line(line: str, *, lenient: bool) -> Optional[_ProjectLine]:
    name = find_project_name(line)
    if name is None:
        return None
    work = find_work_token(line)
    special = False
    if work is not None:
        token_end = work.end()
    elif lenient:
        # a bare "Project Gutenberg ..." opening line
        token_end = name.end() + 1
        special = True
    else:
        return None
    if token_end >= len(line):
        return None
    following = line[token_end]
    first_char = line[first_content_index(line)]
    accepted = following.isspace() or following in DEPENDENT_PUNCTUATION
    if lenient:
        accepted = accepted or special or first_char == "*"
    return _ProjectLine(line, line[token_end:], special) if accepted else None


def _is_copyright_line(line: str) -> bool:
    lower = line.lower()
    if "of:" in lower or "of the" in lower:
        return False
    return "copyright" in lower


def _starts_with_of(text: str) -> bool:
    return re.match(r"(?:of|is)\b", text) is not None


def _pull_continuation(title: str, line: str, following: str) -> str:
    if is_file_line(following):
        return title
    if line[-1] in DEPENDENT_PUNCTUATION:
        title += line[-1]
    return tidy_title(title + " " + tidy_title(following))


def _needs_continuation(title: str, line: str) -> bool:
    return by_index(line) < 0 and (
        line[-1] in DEPENDENT_PUNCTUATION
        or (line[0] == "*" and line[-1] != "*")
        or title.endswith(CONTINUATION_ENDINGS)
    )


def _title_on_next_line(line: str, following: str, remaining: str) -> bool:
    """``*...*`` line after the project line that holds the real title."""
    if not (following.startswith("*") and following.endswith("*")):
        return False
    if find_work_token(following) is not None or is_file_line(following):
        return False
    if by_index(line) >= 0:
        return False
    of_index = line.lower().find(" of ")
    return (
        of_index < 0
        or of_index > len(line) * 3 // 4
        or remaining.lower().endswith(" folio")
    )


def _title_in_block(lines: Sequence[str]) -> Optional[str]:
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if _is_copyright_line(line):
            continue
        found = _project_line(line, lenient=True)
        if found is None:
            continue
        remaining = tidy_title(found.remaining)
        if _starts_with_of(remaining):
            remaining = tidy_title(remaining[2:])
            if not remaining and i < len(lines):
                remaining = tidy_title(lines[i])
                i += 1
        if not remaining:
            continue
        title = None
        if has_letter_or_digit(remaining):
            title = tidy_title(remaining)
            if i < len(lines) and _needs_continuation(title, line):
                title = _pull_continuation(title, line, lines[i])
                i += 1
        if i < len(lines) and _title_on_next_line(line, lines[i], remaining):
            candidate = tidy_title(lines[i])
            if has_letter_or_digit(candidate):
                title = candidate
        return title
    return None


TitleRule = Callable[[HeaderText], Optional[str]]


def title_from_property(header: HeaderText) -> Optional[str]:
    return property_value(header, "title")


def title_from_project_line(header: HeaderText) -> Optional[str]:
    """Title following ``Project Gutenberg Etext of`` on a header block line."""
    for lines in header.header_blocks():
        title = _title_in_block(lines)
        if title is not None:
            return title
    return None


def title_after_transition(header: HeaderText) -> Optional[str]:
    """The line after one ending in ``Etext of:``."""
    pending = False
    for line in header.lines():
        if pending:
            return line
        pending = line.strip().lower().endswith(TRANSITION)
    return None


TITLE_RULES: Tuple[TitleRule, ...] = (
    title_from_property,
    title_from_project_line,
    title_after_transition,
)


def extract_title(header: HeaderText) -> Optional[str]:
    raw = next((t for t in (rule(header) for rule in TITLE_RULES) if t is not None), None)
    title = tidy_title(raw) if raw is not None else ""
    return title or None


AuthorRule = Callable[[HeaderText, Optional[str]], Optional[str]]


def _is_degenerate(author: str) -> bool:
    return author.lower().startswith(DEGENERATE_AUTHORS)


def author_from_property(header: HeaderText, title: Optional[str] = None) -> Optional[str]:
    author = property_value(header, "author") or property_value(header, "authors")
    # "Authors: Several"
    if author is not None and author.strip().lower().startswith("several"):
        return None
    return author


def _project_lines(header: HeaderText) -> Iterator[_ProjectLine]:
    for lines in header.header_blocks():
        for line in lines:
            found = _project_line(line, lenient=False)
            if found is not None:
                yield found


def author_from_project_line(header: HeaderText, title: Optional[str] = None) -> Optional[str]:
    """Author after "by" on the ``Project Gutenberg Etext of ...`` line."""
    for found in _project_lines(header):
        by = by_index(found.remaining)
        if by < 0:
            continue
        author = tidy_author(found.remaining[by + 2 :])
        if has_letter_or_digit(author) and author.lower() not in DEGENERATE_AUTHORS:
            return author
    return None


def _by_line_candidates(header: HeaderText) -> Iterator[str]:
    """Names following a free-standing "by" on header block lines."""
    for lines in header.header_blocks():
        next_line_is_author = False
        for line in lines:
            if is_file_line(line) or _project_line(line, lenient=False) is not None:
                continue
            if next_line_is_author:
                next_line_is_author = False
                if has_letter_or_digit(line):
                    yield line
                continue
            by = by_index(line)
            if by < 0:
                continue
            used = line.lower().find("used ")
            candidate = tidy_author(line[by + 2 :])
            if has_letter_or_digit(candidate) and (used < 0 or used != by - len("used ")):
                yield candidate
            elif line.strip().endswith(" by"):
                next_line_is_author = True


def author_from_by_line(header: HeaderText, title: Optional[str] = None) -> Optional[str]:
    return next((c for c in _by_line_candidates(header) if not _is_degenerate(c)), None)


def author_from_possession(header: HeaderText, title: Optional[str] = None) -> Optional[str]:
    """Owner in a possessive title such as ``Shakespeare's First Folio``.

    Only consulted when no other rule names an author.
    """
    for found in _project_lines(header):
        remaining = found.remaining
        by = by_index(remaining)
        if by >= 0:
            remaining = tidy_author(remaining[by + 2 :])
            if has_letter_or_digit(remaining) and remaining.lower() not in DEGENERATE_AUTHORS:
                continue
        possession = remaining.lower().find("'s")
        if possession <= 0:
            continue
        start = max(remaining.rfind(ch, 0, possession) for ch in TRIM_CHARACTERS) + 1
        word = remaining[start:possession]
        if word and not word.lower().startswith("everybody"):
            return tidy_author(word)
    return None


def author_from_edited_line(header: HeaderText, title: Optional[str] = None) -> Optional[str]:
    """"by" after the title or after "edited" in a block outside the boilerplate."""
    for lines in header.other_blocks():
        if any(has_project_name(line) for line in lines):
            continue
        for line in lines:
            lower = line.lower()
            start = -1
            if title:
                start = lower.find(title.lower())
                if start >= 0:
                    start += len(title)
            if start < 0:
                start = lower.find("edited")
                if start >= 0:
                    start += len("edited")
            if start < 0:
                continue
            by = by_index(line[start:])
            if by < 0:
                continue
            author = tidy_author(line[start + by + 2 :])
            if has_letter_or_digit(author):
                return author
    return None


AUTHOR_RULES: Tuple[AuthorRule, ...] = (
    author_from_property,
    author_from_project_line,
    author_from_by_line,
    author_from_edited_line,
)


def _refine_with_by_line(header: HeaderText, author: str) -> str:
    """A later by-line ending with ``author`` is a fuller form of the name."""
    return next(
        (
            c
            for c in _by_line_candidates(header)
            if c.lower().endswith(author.lower()) and not _is_degenerate(c)
        ),
        author,
    )


def _override_with_by_property(header: HeaderText, author: Optional[str]) -> Optional[str]:
    by_author = property_value(header, "by", " ")
    if by_author is None or len(by_author) >= MAX_BY_AUTHOR_LENGTH:
        return author
    if "project gutenberg-tm" in by_author.lower():
        return author
    if author is None:
        return by_author
    if (
        len(by_author) > len(author)
        and author.lower() in by_author.lower()
        and not is_file_line(by_author)
    ):
        return by_author
    return author


def extract_author(header: HeaderText, title: Optional[str] = None) -> Optional[str]:
    rule, author = next(
        ((r, a) for r, a in ((r, r(header, title)) for r in AUTHOR_RULES) if a is not None),
        (None, None),
    )
    if rule is not author_from_property:
        if rule is author_from_project_line and author is not None:
            author = _refine_with_by_line(header, author)
        author = _override_with_by_property(header, author)
        if author is None:
            author = author_from_possession(header, title)
    author = tidy_author(author) if author is not None else ""
    return author or None


def extract_description(header: HeaderText) -> Optional[str]:
    """Lines of the title header block, minus the file and copyright-laws lines."""
    lines = next(header.header_blocks(), None)
    if lines is None:
        return None
    trim = TRIM_CHARACTERS + "*"
    pieces = [
        line.strip(trim)
        for line in lines
        if not is_file_line(line) and "copyright laws" not in line.lower()
    ]
    description = " ".join(p for p in pieces if p)
    return description or None


def extract_language(header: HeaderText) -> Optional[str]:
    return property_value(header, "language")


def extract_metadata(blocks: Sequence[Block]) -> Metadata:
    """Extract the four metadata fields from the header blocks ``blocks``."""

    header = HeaderText.from_blocks(blocks)
    title = extract_title(header)
    metadata = Metadata(
        title=title,
        author=extract_author(header, title),
        description=extract_description(header),
        language=extract_language(header),
    )
    found = [k for k, v in metadata.as_dict().items() if v is not None]
    logger.info("metadata fields found: %s", ", ".join(found) or "none")
    return metadata


def metadata_within(blocks: Sequence[Block], header: Optional[Boundary]) -> Metadata:
    """Extract metadata from the ``header`` range of ``blocks``."""

    if not any(has_project_name(b.text) for b in blocks):
        logger.info("no project name in document, skipping metadata")
        return Metadata()
    if header is None:
        logger.info("no header located, skipping metadata")
        return Metadata()
    return extract_metadata(header.select(blocks))


def extract_document_metadata(blocks: Sequence[Block]) -> Metadata:
    """Locate the header of a whole document and extract its metadata."""

    return metadata_within(blocks, locate_header(blocks))


def etext_id(filename: str) -> str:
    """Identifier of a work from its file name.

    The extension and the trailing one or two digit version number are
    dropped; letters after the version are kept behind a hyphen
    (``test12a.txt`` becomes ``test-a``).
    """

    name = PurePath(filename).name
    stem = name.rsplit(".", 1)[0] if "." in name else name
    end = len(stem)
    while end > 0 and not stem[end - 1].isdigit():
        end -= 1
    if end == 0:
        return stem
    begin = end - 1
    if begin > 0 and stem[begin - 1].isdigit():
        begin -= 1
    suffix = "-" + stem[end:] if end < len(stem) else ""
    return stem[:begin] + suffix
