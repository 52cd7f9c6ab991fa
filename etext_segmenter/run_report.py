"""Run report: what ran, how long it took, and what it found.

The report is written after every ``convert`` run, including failed ones, so a
batch over many etexts leaves a trace per document.
"""

from __future__ import annotations

import inspect
import json
import platform
import sys
from collections import Counter
from collections.abc import Iterable, Mapping
from hashlib import md5
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from etext_segmenter.framework import Pass

# distribution names, not import names
TRACKED_DISTRIBUTIONS = ("pydantic", "PyYAML", "typer")


def _installed_version(distribution: str) -> str | None:
    try:
        return version(distribution)
    except PackageNotFoundError:
        return None


def source_digest(p: Pass) -> str:
    """MD5 of the source file defining ``p``'s class, or ``""`` when unavailable."""
    try:
        source = inspect.getsource(type(p))
    except (OSError, TypeError):
        return ""
    return md5(source.encode("utf-8")).hexdigest()


def environment(passes: Iterable[Pass]) -> dict[str, Any]:
    digests = {p.name: source_digest(p) for p in passes}
    return {
        "sys_version": sys.version,
        "platform": platform.platform(),
        "dependencies": {d: _installed_version(d) for d in TRACKED_DISTRIBUTIONS},
        "passes": {name: d for name, d in digests.items() if d},
    }


def document_summary(payload: Any) -> dict[str, Any]:
    """Block and region counts of a converted payload."""
    if not isinstance(payload, Mapping):
        return {}
    rows = payload.get("rows") or []
    summary: dict[str, Any] = {
        "source_path": payload.get("source_path"),
        "block_types": dict(Counter(r["type"] for r in rows)),
    }
    regions = Counter(r["region"] for r in rows if "region" in r)
    if regions:
        summary["regions"] = dict(regions)
    return summary


def assemble_report(
    timings: Mapping[str, float],
    meta: Mapping[str, Any],
    passes: Iterable[Pass],
    payload: Any = None,
) -> dict[str, Any]:
    """Assemble run report data without performing IO."""
    report: dict[str, Any] = {
        "timings": dict(timings),
        "metrics": {**(meta.get("metrics") or {}), "env": environment(passes)},
        "warnings": list(meta.get("warnings") or []),
        "document": document_summary(payload),
    }
    if "error" in meta:
        report["error"] = meta["error"]
    return report


def write(report: Mapping[str, Any], path: str | Path) -> None:
    Path(path).write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
