"""JSON-lines emitter: one object per block row."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from etext_segmenter.framework import Artifact


def _rows(payload: Any) -> list[dict[str, Any]]:
    """Rows of a list payload, or of the ``rows`` entry of a mapping payload."""
    if isinstance(payload, Mapping):
        payload = payload.get("rows")
    return list(payload) if isinstance(payload, list) else []


def _text_only(rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [{"text": row.get("text", "")} for row in rows]


def write(rows: Iterable[Mapping[str, Any]], path: str | Path | None) -> None:
    """Write ``rows`` as JSON lines to ``path``; nothing happens without a path."""
    if not path:
        return
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fh:
        for row in rows:
            fh.write(json.dumps(row, ensure_ascii=False))
            fh.write("\n")


def maybe_write(artifact: Artifact, options: Mapping[str, Any]) -> None:
    """Write the artifact's rows per ``options`` (``output_path``, ``drop_meta``)."""
    rows = _rows(artifact.payload)
    if options.get("drop_meta"):
        rows = _text_only(rows)
    write(rows, options.get("output_path"))
