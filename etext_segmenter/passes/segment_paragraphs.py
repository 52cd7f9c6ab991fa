from __future__ import annotations

from dataclasses import dataclass, field

from etext_segmenter.errors import PreconditionError
from etext_segmenter.framework import Artifact, register
from etext_segmenter.line_buffer import MAX_PRELOAD
from etext_segmenter.segmenter import segment_lines


@dataclass
class _SegmentParagraphsPass:
    """Segment ``{"type": "lines"}`` payloads into blocks."""

    name: str = field(default="segment_paragraphs", init=False)
    input_type: type = field(default=dict, init=False)  # {"type": "lines", "lines": [...]}
    output_type: type = field(default=dict, init=False)  # {"type": "blocks", "blocks": [...]}
    max_preload: int = MAX_PRELOAD

    def __post_init__(self) -> None:
        if self.max_preload < 1:
            raise ValueError("max_preload must be positive")

    def __call__(self, a: Artifact) -> Artifact:
        if a.kind != "lines":
            raise PreconditionError("lines", "read input text first")
        lines = list(a.payload.get("lines") or [])
        profile, blocks = segment_lines(lines, max_preload=self.max_preload)
        doc = {
            "type": "blocks",
            "source_path": a.payload.get("source_path"),
            "blocks": blocks,
        }
        return a.with_metrics(
            self.name,
            doc,
            lines=len(lines),
            blocks=len(blocks),
            line_spacing=profile.line_spacing,
            paragraph_sensing=profile.paragraph_sensing,
        )


segment_paragraphs = register(_SegmentParagraphsPass())
