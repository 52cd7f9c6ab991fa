from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from etext_segmenter.models import Block, Paragraph  # noqa: E402


def paragraphs(*texts: str) -> List[Block]:
    """One single-line paragraph per text, numbered consecutively."""
    return [Paragraph.from_text(t, first_number=i + 1) for i, t in enumerate(texts)]


def write_lines(path: Path, lines: Iterable[str], encoding: str = "utf-8") -> Path:
    path.write_text("\n".join(lines) + "\n", encoding=encoding)
    return path


ETEXT_LINES = [
    "The Project Gutenberg Etext of Evangeline, by Henry W. Longfellow",
    "",
    "Copyright laws are changing all over the world, be sure to check",
    "",
    "Language: English",
    "",
    "***The Project Gutenberg's Etext of Evangeline***",
    "",
    "*****This file should be named evang10.txt or evang10.zip*****",
    "",
    "**START**THE SMALL PRINT!**FOR PUBLIC DOMAIN ETEXTS**START**",
    "",
    "*END*THE SMALL PRINT! FOR PUBLIC DOMAIN ETEXTS*Ver.04.29.93*END*",
    "",
    "EVANGELINE",
    "",
    "this is the forest primeval. The murmuring pines and the hemlocks,",
    "bearded with moss, and in garments green, indistinct in the twilight,",
    "",
    "stand like Druids of eld, with voices sad and prophetic,",
    "stand like harpers hoar, with beards that rest on their bosoms.",
    "",
    "loud from its rocky caverns, the deep-voiced neighboring ocean",
    "speaks, and in accents disconsolate answers the wail of the forest.",
    "",
    "this is the forest primeval; but where are the hearts that beneath it",
    "leaped like the roe, when he hears in the woodland the voice of the huntsman?",
    "",
    "End of The Project Gutenberg Etext of Evangeline",
]


@pytest.fixture
def etext_path(tmp_path: Path) -> Path:
    return write_lines(tmp_path / "evang10.txt", ETEXT_LINES)
