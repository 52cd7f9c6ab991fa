# Importing the package registers its pipeline passes.
from . import passes  # noqa: F401
from .metadata import extract_document_metadata, extract_metadata
from .models import Boundary, Break, Heading, HeadingKind, Line, Metadata, Paragraph
from .segmenter import ParagraphSegmenter, segment_lines

__all__ = [
    "Boundary",
    "Break",
    "Heading",
    "HeadingKind",
    "Line",
    "Metadata",
    "Paragraph",
    "ParagraphSegmenter",
    "extract_document_metadata",
    "extract_metadata",
    "segment_lines",
]
