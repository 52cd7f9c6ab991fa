"""Value types flowing between the segmentation and metadata stages."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterator, NamedTuple, Optional, Sequence, Union


class Line(NamedTuple):
    """A physical source line and its 1-based position in the input."""

    text: str
    number: int = 0


class HeadingKind(Enum):
    """Heading categories reported by a line classifier.

    ``NONE`` marks body text. ``TITLE`` is a correctly capitalized short line and
    ``SUB`` an all-capitals line; the remaining members name the structural
    heading the line announces.
    """

    NONE = "none"
    TITLE = "title"
    SUB = "sub"
    CONTENTS = "contents"
    PREFACE = "preface"
    FOREWORD = "foreword"
    INTRODUCTION = "introduction"
    AFTERWORD = "afterword"
    BIBLIOGRAPHY = "bibliography"
    GLOSSARY = "glossary"
    INDEX = "index"
    VOLUME = "volume"
    BOOK = "book"
    ARTICLE = "article"
    PART = "part"
    CHAPTER = "chapter"
    ACT = "act"
    SCENE = "scene"


def _lines_from_text(text: str, first_number: int) -> tuple[Line, ...]:
    return tuple(Line(t, first_number + i) for i, t in enumerate(text.split("\n")))


@dataclass(frozen=True)
class Paragraph:
    lines: tuple[Line, ...]

    @classmethod
    def from_text(cls, text: str, first_number: int = 1) -> Paragraph:
        return cls(_lines_from_text(text, first_number))

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(line.text for line in self.lines)

    @property
    def text(self) -> str:
        """Line texts joined by explicit line breaks."""
        return "\n".join(self.texts)


@dataclass(frozen=True)
class Heading:
    kind: HeadingKind
    lines: tuple[Line, ...]

    @classmethod
    def from_text(cls, kind: HeadingKind, text: str, first_number: int = 1) -> Heading:
        return cls(kind, _lines_from_text(text, first_number))

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(line.text for line in self.lines)

    @property
    def text(self) -> str:
        return "\n".join(self.texts)


@dataclass(frozen=True)
class Break:
    """A decorative divider line kept apart from the prose."""

    line: Line

    @classmethod
    def from_text(cls, text: str, number: int = 1) -> Break:
        return cls(Line(text, number))

    @property
    def lines(self) -> tuple[Line, ...]:
        return (self.line,)

    @property
    def texts(self) -> tuple[str, ...]:
        return (self.line.text,)

    @property
    def text(self) -> str:
        return self.line.text


Block = Union[Paragraph, Heading, Break]


@dataclass(frozen=True)
class LineSpacingProfile:
    """Formatting conventions inferred once per document.

    ``line_spacing`` is the number of physical lines (blanks included) that make
    up one logical line; ``paragraph_sensing`` tells the segmenter to infer
    paragraph ends from line lengths because blank lines are too sparse.
    """

    line_spacing: int = 1
    paragraph_sensing: bool = False

    def __post_init__(self) -> None:
        if self.line_spacing < 1:
            raise ValueError(f"line spacing must be at least 1, got {self.line_spacing}")


@dataclass(frozen=True)
class Boundary:
    """Half-open block range ``[start, end)`` of a header or footer.

    A header whose small print was found apart from its opening lines carries
    that second range in ``small_print``; both ranges form one logical region.
    """

    start: int
    end: int
    small_print: Optional[tuple[int, int]] = None

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end:
            raise ValueError(f"invalid boundary range [{self.start}, {self.end})")
        if self.small_print is not None:
            sp_start, sp_end = self.small_print
            if not self.end <= sp_start <= sp_end:
                raise ValueError(f"invalid small print range [{sp_start}, {sp_end})")

    def indices(self) -> Iterator[int]:
        yield from range(self.start, self.end)
        if self.small_print is not None:
            yield from range(*self.small_print)

    def select(self, blocks: Sequence[Block]) -> list[Block]:
        """Return the blocks of this region, in document order."""
        return [blocks[i] for i in self.indices() if i < len(blocks)]

    def __contains__(self, index: object) -> bool:
        if not isinstance(index, int):
            return False
        if self.start <= index < self.end:
            return True
        return self.small_print is not None and self.small_print[0] <= index < self.small_print[1]

    def __len__(self) -> int:
        extra = self.small_print[1] - self.small_print[0] if self.small_print else 0
        return self.end - self.start + extra

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"start": self.start, "end": self.end}
        if self.small_print is not None:
            data["small_print"] = list(self.small_print)
        return data


@dataclass(frozen=True)
class Metadata:
    """Bibliographic fields recovered from a header; any of them may be absent."""

    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(asdict(self).values())

    def as_dict(self) -> dict[str, Optional[str]]:
        return asdict(self)


def block_type(block: Block) -> str:
    if isinstance(block, Break):
        return "break"
    if isinstance(block, Heading):
        return "heading"
    return "paragraph"


def block_to_row(block: Block, **extra: Any) -> dict[str, Any]:
    """Flatten ``block`` into a JSON-serializable row."""

    row: dict[str, Any] = {
        "type": block_type(block),
        "text": block.text,
        "lines": [line.number for line in block.lines],
    }
    if isinstance(block, Heading):
        row["heading"] = block.kind.value
    return {**row, **extra}
