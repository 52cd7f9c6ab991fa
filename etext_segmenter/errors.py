"""Exception taxonomy for the segmentation pipeline.

Heuristic misses (no title, no header, no footer) are never raised; they are
reported as ``None`` or empty fields. Only broken preconditions are errors, and
I/O failures from the line source propagate untouched.
"""

from __future__ import annotations


class SegmenterError(Exception):
    """Base class for errors raised by :mod:`etext_segmenter`."""


class PreconditionError(SegmenterError, ValueError):
    """A structural anchor required by an operation is missing."""

    def __init__(self, anchor: str, detail: str | None = None) -> None:
        self.anchor = anchor
        message = f"precondition not met: missing {anchor}"
        super().__init__(f"{message} ({detail})" if detail else message)
