from __future__ import annotations

from etext_segmenter.boundaries import is_etext, locate_footer, locate_header
from etext_segmenter.errors import PreconditionError
from etext_segmenter.framework import Artifact, register


class _LocateBoundariesPass:
    """Annotate a blocks payload with its header and footer ranges."""

    name = "locate_boundaries"
    input_type = dict
    output_type = dict

    def __call__(self, a: Artifact) -> Artifact:
        if a.kind != "blocks":
            raise PreconditionError("blocks", "run segment_paragraphs first")
        blocks = a.payload.get("blocks") or []
        header = locate_header(blocks)
        footer = locate_footer(blocks, header)
        etext = is_etext(blocks)
        doc = {**a.payload, "header": header, "footer": footer, "is_etext": etext}
        return a.with_metrics(
            self.name,
            doc,
            header_found=header is not None,
            footer_found=footer is not None,
            is_etext=etext,
        )


locate_boundaries = register(_LocateBoundariesPass())
