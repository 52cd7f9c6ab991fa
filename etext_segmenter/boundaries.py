"""Location of the front-matter and back-matter envelope of an etext.

The header is found with one forward scan that keeps several candidate
markers at once, because no single marker is reliable across texts; the
footer is found with a backward scan for its opening block. Both results are
:class:`~etext_segmenter.models.Boundary` ranges over the block sequence, or
``None`` when the document has no recognizable envelope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from etext_segmenter.characters import TRIM_CHARACTERS
from etext_segmenter.markers import (
    SMALL_PRINT,
    SMALL_PRINT_END,
    SMALL_PRINT_START,
    find_work_token,
    has_project_name,
    is_footer_end,
    is_header_end,
    is_small_print_start,
)
from etext_segmenter.models import Block, Boundary

logger = logging.getLogger(__name__)

DIVIDER = "***"
SEND_MONEY = "*want* to send money"
START_OF_TEXT = "start of the project gutenberg"
# blocks left at the end of the document before the header is assumed to run out
END_PROXIMITY = 4
# an explicit header end closer than this to the end is not trusted
MIN_TAIL = 5
MAX_DIVIDER_MONEY_GAP = 50
# small print starting within this many blocks after the divider is contiguous with it
SMALL_PRINT_SLACK = 10


@dataclass
class _HeaderScan:
    divider: int = -1
    money: int = -1
    small_print: int = -1

    def observe(self, index: int, text: str) -> bool:
        """Record a marker in block ``index``; ``False`` when it holds none."""
        lower = text.lower()
        if text.strip(TRIM_CHARACTERS) == DIVIDER and self.divider < 0:
            self.divider = index
        elif SEND_MONEY in lower:
            self.money = index
        elif START_OF_TEXT in lower and self.divider < 0:
            self.divider = index
        elif self.small_print < 0 and is_small_print_start(text):
            self.small_print = index
        elif is_footer_end(text) and self.small_print < 0:
            # the small print follows a footer that precedes it
            self.small_print = index + 1
        else:
            return False
        return True

    def best_divider(self) -> int:
        if self.divider < 0:
            return self.money
        if self.money >= 0 and abs(self.money - self.divider) > MAX_DIVIDER_MONEY_GAP:
            return self.money
        return self.divider


def locate_header(blocks: Sequence[Block]) -> Optional[Boundary]:
    """Return the header range of ``blocks`` or ``None``.

    An explicit small-print end wins outright unless it sits among the last
    few blocks. Otherwise the header is assumed to run up to the best divider,
    and when the small print was seen well after that divider it is returned
    as a second, separate range.
    """

    n = len(blocks)
    scan = _HeaderScan()
    for i, block in enumerate(blocks):
        text = block.text
        if scan.observe(i, text):
            continue
        if not (is_header_end(text) or i > n - END_PROXIMITY):
            continue
        divider = scan.best_divider()
        if i < n - MIN_TAIL:
            logger.debug("header end marker at block %d", i)
            return Boundary(0, i + 1)
        if divider < 0:
            continue
        logger.debug(
            "header falls back to divider at block %d (small print at %d)",
            divider,
            scan.small_print,
        )
        if scan.small_print < divider + SMALL_PRINT_SLACK:
            return Boundary(0, divider + 1)
        return Boundary(0, divider + 1, small_print=(scan.small_print, i + 1))
    return None


def locate_footer(blocks: Sequence[Block], header: Optional[Boundary] = None) -> Optional[Boundary]:
    """Return the footer range, from its opening block to the document end."""

    for i in range(len(blocks) - 1, -1, -1):
        if header is not None and i in header:
            continue
        if is_footer_end(blocks[i].text):
            logger.debug("footer starts at block %d", i)
            return Boundary(i, len(blocks))
    return None


@dataclass(frozen=True)
class Envelope:
    """A block sequence split into its header, body and footer."""

    header: List[Block] = field(default_factory=list)
    body: List[Block] = field(default_factory=list)
    footer: List[Block] = field(default_factory=list)
    header_range: Optional[Boundary] = None
    footer_range: Optional[Boundary] = None


def split_envelope(blocks: Sequence[Block]) -> Envelope:
    """Separate header and footer blocks from the body, keeping document order."""

    header = locate_header(blocks)
    footer = locate_footer(blocks, header)
    in_header = set(header.indices()) if header else set()
    footer_start = footer.start if footer else len(blocks)
    logger.info(
        "header %s, footer %s",
        "found" if header else "not found",
        "found" if footer else "not found",
    )
    return Envelope(
        header=[b for i, b in enumerate(blocks) if i in in_header],
        body=[b for i, b in enumerate(blocks[:footer_start]) if i not in in_header],
        footer=[b for i, b in enumerate(blocks) if i >= footer_start and i not in in_header],
        header_range=header,
        footer_range=footer,
    )


def is_etext(blocks: Sequence[Block]) -> bool:
    """Return ``True`` when the boilerplate markers appear in their usual order.

    A block naming the project with a work token must come first, then the
    start of the small print, then its end.
    """

    checks = (
        lambda text: has_project_name(text) and find_work_token(text) is not None,
        lambda text: SMALL_PRINT in text.lower() and SMALL_PRINT_START in text.lower(),
        lambda text: SMALL_PRINT in text.lower() and SMALL_PRINT_END in text.lower(),
    )
    stage = 0
    for block in blocks:
        if checks[stage](block.text):
            stage += 1
            if stage == len(checks):
                return True
    return False
