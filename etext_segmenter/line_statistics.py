"""Calibration of line spacing and paragraph sensing from a buffered sample.

Two steps run over the preloaded window before segmentation starts:
``collapse_blank_runs`` shortens anomalously long blank-line runs (scanned page
gaps and the like) and ``sample_line_spacing`` derives a
:class:`~etext_segmenter.models.LineSpacingProfile` from the middle of the
window, where front matter no longer dominates.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from etext_segmenter.characters import is_blank, is_independent_punctuation, last_content_index
from etext_segmenter.line_buffer import MAX_PRELOAD, LineBuffer
from etext_segmenter.models import Line, LineSpacingProfile

logger = logging.getLogger(__name__)

MAX_BLANK_RUN = 5
ENDING_PUNCTUATION_FRACTION = 0.85
PARAGRAPH_SENSING_THRESHOLD = 1.04


def collapse_blank_runs(lines: Sequence[Line], max_run: int = MAX_BLANK_RUN) -> List[Line]:
    """Return ``lines`` with blank runs longer than ``max_run`` shortened.

    A long run keeps as many blank lines as the running lines-per-content-line
    average suggests (floored), counting every line up to and including the one
    that ends the run. Runs before the first content line are left alone since
    no average exists yet. Each line is counted exactly once.
    """

    out: List[Line] = []
    run: List[Line] = []
    seen = 0
    non_blank = 0

    def _flush() -> None:
        keep = seen // non_blank if non_blank else len(run)
        if len(run) > max_run and keep < len(run):
            logger.debug(
                "collapsed blank run at line %d from %d to %d lines",
                run[0].number,
                len(run),
                keep,
            )
            out.extend(run[:keep])
        else:
            out.extend(run)
        run.clear()

    for line in lines:
        seen += 1
        if is_blank(line.text):
            run.append(line)
            continue
        non_blank += 1
        _flush()
        out.append(line)
    _flush()
    return out


def _ends_independently(text: str) -> bool:
    last = last_content_index(text)
    return last >= 0 and is_independent_punctuation(text[last])


def sample_line_spacing(lines: Sequence[Line]) -> LineSpacingProfile:
    """Infer the line spacing profile from a sampling sub-window of ``lines``."""

    start = len(lines) // 4
    window = lines[start : start + len(lines) * 2 // 3]
    total = len(window)
    texts = [line.text for line in window if not is_blank(line.text)]
    non_blank = len(texts)
    if not non_blank:
        logger.debug("no content lines in sample window of %d lines", total)
        return LineSpacingProfile()

    ending = sum(1 for t in texts if _ends_independently(t))
    fraction = ending / non_blank
    spacing = 1 if fraction > ENDING_PUNCTUATION_FRACTION else max(1, total // non_blank)
    normalized = (total - non_blank * (spacing - 1)) / non_blank
    logger.debug(
        "sampled %d lines (%d non-blank), ending punctuation %.3f, normalized %.3f",
        total,
        non_blank,
        fraction,
        normalized,
    )
    return LineSpacingProfile(
        line_spacing=spacing,
        paragraph_sensing=normalized < PARAGRAPH_SENSING_THRESHOLD,
    )


def calibrate(buffer: LineBuffer, max_preload: int = MAX_PRELOAD) -> LineSpacingProfile:
    """Preload ``buffer``, tidy its blank runs and sample its line spacing.

    The collapsed window replaces the buffered lines so segmentation sees the
    same lines the sample was taken from.
    """

    buffer.preload(max_preload)
    collapsed = collapse_blank_runs(buffer.pending())
    buffer.replace_pending(collapsed)
    profile = sample_line_spacing(collapsed)
    logger.info(
        "line spacing %d, paragraph sensing %s",
        profile.line_spacing,
        "on" if profile.paragraph_sensing else "off",
    )
    return profile
