from __future__ import annotations

from etext_segmenter.errors import PreconditionError
from etext_segmenter.framework import Artifact, register
from etext_segmenter.metadata import etext_id, metadata_within


class _ExtractMetadataPass:
    """Attach title, author, description and language from the located header."""

    name = "extract_metadata"
    input_type = dict
    output_type = dict

    def __call__(self, a: Artifact) -> Artifact:
        if a.kind != "blocks" or "header" not in a.payload:
            raise PreconditionError("header", "run locate_boundaries first")
        metadata = metadata_within(a.payload.get("blocks") or [], a.payload["header"])
        source = a.payload.get("source_path")
        doc = {
            **a.payload,
            "metadata": metadata,
            "etext_id": etext_id(source) if source else None,
        }
        found = sorted(k for k, v in metadata.as_dict().items() if v is not None)
        return a.with_metrics(self.name, doc, fields=found)


extract_metadata = register(_ExtractMetadataPass())
