from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from etext_segmenter.characters import (
    LEFT_QUOTES,
    PHRASE_PUNCTUATION,
    ends_phrase,
    first_content_index,
    is_blank,
    last_content_index,
    sanitize,
)
from etext_segmenter.heading_detection import LineClassifier, ProseLineClassifier
from etext_segmenter.line_buffer import MAX_PRELOAD, LineBuffer
from etext_segmenter.line_statistics import calibrate
from etext_segmenter.models import (
    Block,
    Break,
    Heading,
    HeadingKind,
    Line,
    LineSpacingProfile,
    Paragraph,
)

logger = logging.getLogger(__name__)

# break lines are strictly longer than this
MIN_BREAK_LENGTH = 10
SHORT_LINE_RATIO = 0.75
SHORT_SENTENCE_RATIO = 0.85


class ParagraphSegmenter:
    """Turns buffered lines into paragraph, heading and break blocks.

    The segmenter holds no per-document state: everything it learns about a
    document arrives in the :class:`LineSpacingProfile` passed to each call, so
    one instance may serve any number of documents.
    """

    def __init__(self, classifier: Optional[LineClassifier] = None) -> None:
        self.classifier: LineClassifier = classifier or ProseLineClassifier()

    def next_block(self, buffer: LineBuffer, profile: LineSpacingProfile) -> Optional[Block]:
        """Return the next block, or ``None`` once ``buffer`` is exhausted."""
        while True:
            block = self._read_block(buffer, profile)
            if block is not None or buffer.at_end():
                return block

    def iter_blocks(self, buffer: LineBuffer, profile: LineSpacingProfile) -> Iterator[Block]:
        while (block := self.next_block(buffer, profile)) is not None:
            yield block

    def _starts_new_block(self, text: str, heading: HeadingKind) -> bool:
        """Heading and quotation checks for a line inside a sensed paragraph."""
        first_char = text[first_content_index(text)]
        last_char = text[last_content_index(text)]
        if heading is HeadingKind.NONE:
            kind = self.classifier.classify_heading(text)
            # title-like lines that start or end a phrase are usually prose
            if kind is not HeadingKind.NONE and (
                kind is not HeadingKind.TITLE
                or (first_char not in PHRASE_PUNCTUATION and last_char not in PHRASE_PUNCTUATION)
            ):
                return True
        return first_char in LEFT_QUOTES

    def _ends_paragraph(self, text: str, average: float, buffer: LineBuffer) -> bool:
        """Length heuristic for the last line of a sensed paragraph.

        A page number directly after a short line is dropped and the paragraph
        continues across it.
        """
        first = first_content_index(text)
        last = last_content_index(text)
        length = last - first + 1
        short = length < average * SHORT_LINE_RATIO or (
            length < average * SHORT_SENTENCE_RATIO and ends_phrase(text[last])
        )
        if not short:
            return False
        following = buffer.pull()
        if following is not None and self.classifier.is_page_number(following.text):
            return False
        if following is not None:
            buffer.push_back(following)
        return True

    def _read_block(self, buffer: LineBuffer, profile: LineSpacingProfile) -> Optional[Block]:
        line = buffer.pull()
        while line is not None and is_blank(line.text):
            line = buffer.pull()

        accepted: List[Line] = []
        length_sum = 0
        line_number = 1
        heading = HeadingKind.NONE
        is_last = False
        while line is not None and not is_last:
            current = Line(sanitize(line.text), line.number)
            text = current.text
            keep = True
            if not is_blank(text):
                if len(text) > MIN_BREAK_LENGTH and self.classifier.is_break(text):
                    if accepted:
                        buffer.push_back(current)
                        break
                    return Break(current)
                if not accepted:
                    kind = self.classifier.classify_heading(text)
                    if kind is not HeadingKind.TITLE:
                        heading = kind
                elif heading is not HeadingKind.NONE:
                    if self.classifier.classify_heading(text) is not heading:
                        buffer.push_back(current)
                        break
                if profile.paragraph_sensing:
                    if self.classifier.is_page_number(text):
                        keep = False
                    elif accepted:
                        if self._starts_new_block(text, heading):
                            buffer.push_back(current)
                            break
                        is_last = self._ends_paragraph(text, length_sum / len(accepted), buffer)
                if keep:
                    accepted.append(current)
                    length_sum += len(text)
                    line_number = 2
            else:
                if line_number > profile.line_spacing:
                    break
                line_number += 1
            if not is_last:
                line = buffer.pull()

        if not accepted:
            return None
        if heading is not HeadingKind.NONE:
            return Heading(heading, tuple(accepted))
        return Paragraph(tuple(accepted))


def segment_lines(
    lines: Iterable[str],
    classifier: Optional[LineClassifier] = None,
    *,
    max_preload: int = MAX_PRELOAD,
) -> Tuple[LineSpacingProfile, List[Block]]:
    """Calibrate on ``lines`` and segment them into blocks."""

    buffer = LineBuffer(lines)
    profile = calibrate(buffer, max_preload)
    blocks = list(ParagraphSegmenter(classifier).iter_blocks(buffer, profile))
    logger.debug("segmented %d blocks", len(blocks))
    return profile, blocks
