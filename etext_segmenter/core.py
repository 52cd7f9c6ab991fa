from __future__ import annotations

import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields, is_dataclass, replace
from typing import Any, Final

import etext_segmenter.passes  # noqa: F401  registers the passes
from etext_segmenter import run_report
from etext_segmenter.adapters import emit_jsonl, io_text
from etext_segmenter.config import PipelineSpec
from etext_segmenter.errors import PreconditionError
from etext_segmenter.framework import Artifact, Pass, registry
from etext_segmenter.models import Boundary, Metadata, block_to_row

DEFAULT_PIPELINE: Final[tuple[str, ...]] = (
    "segment_paragraphs",
    "locate_boundaries",
    "extract_metadata",
)

# step -> step that must run before it
_PREREQUISITES: Final[Mapping[str, str]] = {
    "locate_boundaries": "segment_paragraphs",
    "extract_metadata": "locate_boundaries",
}

# pipeline entries handled by the runner rather than the registry
_OUTPUT_STEPS: Final[frozenset[str]] = frozenset({"emit_jsonl"})


def _pass_steps(spec: PipelineSpec) -> list[str]:
    """Filter pipeline steps to registered passes; error on unknown ones."""
    regs = registry()
    unknown = [s for s in spec.pipeline if s not in regs and s not in _OUTPUT_STEPS]
    if unknown:
        raise KeyError(f"unknown steps: {unknown}")
    return [s for s in spec.pipeline if s in regs]


def _ensure_prerequisites(steps: Sequence[str]) -> None:
    """Raise when a step runs before the step whose output it reads."""
    for index, step in enumerate(steps):
        required = _PREREQUISITES.get(step)
        if required is not None and required not in steps[:index]:
            raise PreconditionError(required, f"{step} requires {required} to run beforehand")


def _enforce_invariants(spec: PipelineSpec) -> list[str]:
    """Return the runnable steps of ``spec`` after checking their order."""
    steps = _pass_steps(spec)
    _ensure_prerequisites(steps)
    return steps


def _prepare_pass(pass_obj: Pass, overrides: Mapping[str, Any]) -> Pass:
    """Return ``pass_obj`` with matching dataclass fields replaced by ``overrides``."""
    if not overrides or not is_dataclass(pass_obj):
        return pass_obj
    names = {f.name for f in fields(pass_obj) if f.init}
    updates = {k: v for k, v in overrides.items() if k in names}
    if not updates:
        return pass_obj
    # replace() reruns __post_init__ validation
    return replace(pass_obj, **updates)


def configure_pass(pass_obj: Pass, opts: Mapping[str, Any]) -> Pass:
    """Return a new pass with ``opts`` merged without mutating ``pass_obj``."""
    return _prepare_pass(pass_obj, opts)


def input_artifact(path: str, spec: PipelineSpec | None = None) -> Artifact:
    """Load ``path`` honoring the ``read_text`` options of ``spec``."""
    payload = io_text.read(path, encoding=(spec or PipelineSpec()).read_text().encoding)
    return Artifact(payload=payload, meta={"metrics": {}, "input": payload["source_path"]})


def _region(index: int, header: Boundary | None, footer: Boundary | None) -> str:
    if header is not None and index in header:
        return "header"
    if footer is not None and index in footer:
        return "footer"
    return "body"


def _rows_from_payload(payload: Any) -> list[dict[str, Any]]:
    """Return one row per block, tagged with its region once boundaries are known."""
    if not isinstance(payload, Mapping) or payload.get("type") != "blocks":
        return []
    blocks = payload.get("blocks") or []
    if "header" not in payload:
        return [block_to_row(b) for b in blocks]
    header, footer = payload.get("header"), payload.get("footer")
    return [block_to_row(b, region=_region(i, header, footer)) for i, b in enumerate(blocks)]


def _run_passes(passes: Iterable[Pass], a: Artifact, timings: dict[str, float]) -> Artifact:
    for p in passes:
        a = _timed(p, a, timings)
    return a


def _configured_passes(spec: PipelineSpec) -> list[Pass]:
    steps = _enforce_invariants(spec)
    return [configure_pass(registry()[s], spec.step_options(s)) for s in steps]


def convert(path: str, spec: PipelineSpec) -> list[dict[str, Any]]:
    """Convert the text at ``path`` using ``spec`` and return one row per block."""
    passes = _configured_passes(spec)
    artifact = _run_passes(passes, input_artifact(path, spec), {})
    return _rows_from_payload(artifact.payload)


def document_metadata(a: Artifact) -> dict[str, Any]:
    """Metadata record of a converted artifact, as plain values."""
    payload = a.payload if isinstance(a.payload, Mapping) else {}
    metadata = payload.get("metadata") or Metadata()
    header, footer = payload.get("header"), payload.get("footer")
    return {
        **metadata.as_dict(),
        "etext_id": payload.get("etext_id"),
        "is_etext": payload.get("is_etext"),
        "header": header.as_dict() if header else None,
        "footer": footer.as_dict() if footer else None,
    }


def describe(path: str, spec: PipelineSpec) -> dict[str, Any]:
    """Run ``spec`` on the text at ``path`` and return its metadata record."""
    passes = _configured_passes(spec)
    return document_metadata(_run_passes(passes, input_artifact(path, spec), {}))


def _maybe_emit_jsonl(rows: list[dict[str, Any]], spec: PipelineSpec) -> None:
    """Write JSONL output when the pipeline requests ``emit_jsonl``."""
    if "emit_jsonl" in spec.pipeline:
        emit_jsonl.maybe_write(Artifact(payload=rows), spec.emit_jsonl().model_dump())


def _no_header(payload: Mapping[str, Any]) -> bool:
    return "header" in payload and payload["header"] is None


def _no_metadata(payload: Mapping[str, Any]) -> bool:
    metadata = payload.get("metadata")
    return metadata is not None and metadata.is_empty()


def _collect_warnings(a: Artifact) -> list[str]:
    """Names of the expected document features the run did not find."""
    payload = a.payload if isinstance(a.payload, Mapping) else {}
    checks = (
        ("header_not_found", _no_header(payload)),
        ("metadata_not_found", _no_metadata(payload)),
    )
    return [name for name, flag in checks if flag]


def write_run_report(spec: PipelineSpec, report: Mapping[str, Any]) -> None:
    """Write ``report`` to the ``run_report.output_path`` of ``spec``."""
    run_report.write(report, spec.run_report().output_path)


def _timed(p: Pass, a: Artifact, timings: dict[str, float]) -> Artifact:
    """Run ``p``, recording its wall time under its name even when it raises."""
    started = time.perf_counter()
    try:
        return p(a)
    finally:
        timings[p.name] = time.perf_counter() - started


def run_convert(a: Artifact, spec: PipelineSpec) -> tuple[Artifact, dict[str, float]]:
    """Run the passes of ``spec``, emit JSONL rows and write the run report.

    The report is written on failure too, with the error message, before the
    exception propagates.
    """
    passes = _configured_passes(spec)
    a = Artifact(payload=a.payload, meta={**(a.meta or {}), "options": dict(spec.options)})
    timings: dict[str, float] = {}
    try:
        a = _run_passes(passes, a, timings)
    except Exception as exc:
        meta = {**(a.meta or {}), "warnings": _collect_warnings(a), "error": str(exc)}
        write_run_report(spec, run_report.assemble_report(timings, meta, passes, a.payload))
        raise
    rows = _rows_from_payload(a.payload)
    _maybe_emit_jsonl(rows, spec)
    meta = {**(a.meta or {}), "warnings": _collect_warnings(a)}
    payload = {**a.payload, "rows": rows} if isinstance(a.payload, Mapping) else a.payload
    write_run_report(spec, run_report.assemble_report(timings, meta, passes, payload))
    return Artifact(payload=payload, meta=meta), timings


def run_inspect() -> dict[str, dict[str, str]]:
    """Registered passes with the payload types they take and return."""
    return {
        name: {"input": p.input_type.__name__, "output": p.output_type.__name__}
        for name, p in sorted(registry().items())
    }
