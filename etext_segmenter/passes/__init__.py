"""Pipeline passes; importing this package registers each of them."""

from importlib import import_module

# in pipeline order
PASS_MODULES = (
    "segment_paragraphs",
    "locate_boundaries",
    "extract_metadata",
)

for _name in PASS_MODULES:
    import_module(f".{_name}", __name__)

__all__ = list(PASS_MODULES)
