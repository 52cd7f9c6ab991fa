from __future__ import annotations

import os
import pathlib
import warnings
from functools import reduce
from importlib import import_module
from typing import Any, Dict, Iterable, List, Mapping, Optional, cast

from pydantic import BaseModel, Field, field_validator

yaml = cast(Any, import_module("yaml"))

DEFAULT_SPEC_PATH = "pipeline.yaml"


class ReadTextOptions(BaseModel):
    """Decoding of the input file; a byte-order mark overrides ``encoding``."""

    encoding: Optional[str] = None


class EmitJsonlOptions(BaseModel):
    output_path: Optional[str] = None
    drop_meta: bool = False


class RunReportOptions(BaseModel):
    output_path: str = "run_report.json"


# option sections consumed by the runner rather than by a pass
AMBIENT_SECTIONS: Mapping[str, type[BaseModel]] = {
    "read_text": ReadTextOptions,
    "emit_jsonl": EmitJsonlOptions,
    "run_report": RunReportOptions,
}


class PipelineSpec(BaseModel):
    """Pass names to run, in order, and per-pass options."""

    pipeline: List[str] = Field(default_factory=list)
    options: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @field_validator("pipeline")
    @classmethod
    def _strip_steps(cls, steps: List[str]) -> List[str]:
        cleaned = [s.strip() for s in steps]
        if not all(cleaned):
            raise ValueError("pipeline steps must be non-empty names")
        return cleaned

    def step_options(self, step: str) -> Dict[str, Any]:
        return dict(self.options.get(step) or {})

    def read_text(self) -> ReadTextOptions:
        return ReadTextOptions.model_validate(self.step_options("read_text"))

    def emit_jsonl(self) -> EmitJsonlOptions:
        return EmitJsonlOptions.model_validate(self.step_options("emit_jsonl"))

    def run_report(self) -> RunReportOptions:
        return RunReportOptions.model_validate(self.step_options("run_report"))


def _read_yaml(path: str | os.PathLike | None) -> Dict[str, Any]:
    """Return the YAML mapping at ``path``, or ``{}`` when there is none."""
    if not path:
        return {}
    p = pathlib.Path(path)
    if not p.exists():
        return {}
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError("pipeline.yaml must contain a top-level mapping")
    return data


def _coerce(value: str) -> Any:
    try:
        return yaml.safe_load(value)
    except yaml.YAMLError:
        return value


def _env_overrides(environ: Mapping[str, str] | None = None) -> Dict[str, Dict[str, Any]]:
    """Options from ``SEGMENT_PARAGRAPHS__MAX_PRELOAD=500`` style variables.

    Step and key are lower-cased; values are YAML-coerced, so ``500`` arrives
    as an int and ``true`` as a bool.
    """
    out: Dict[str, Dict[str, Any]] = {}
    for name, value in (os.environ if environ is None else environ).items():
        step, sep, key = name.lower().partition("__")
        if sep and step and key:
            out.setdefault(step, {})[key] = _coerce(value)
    return out


def _merge_options(
    base: Dict[str, Dict[str, Any]], override: Dict[str, Dict[str, Any]]
) -> Dict[str, Dict[str, Any]]:
    """Shallow-merge per-step options; ``override`` wins."""
    steps = set(base) | set(override)
    return {s: {**(base.get(s) or {}), **(override.get(s) or {})} for s in steps}


def _warn_unknown_options(pipeline: Iterable[str], opts: Mapping[str, Any]) -> None:
    known = set(pipeline) | set(AMBIENT_SECTIONS)
    unknown = sorted(s for s in opts if s not in known)
    if unknown:
        warnings.warn(f"Unknown pipeline options: {', '.join(unknown)}", stacklevel=3)


def load_spec(
    path: str | os.PathLike | None = DEFAULT_SPEC_PATH,
    overrides: Dict[str, Dict[str, Any]] | None = None,
) -> PipelineSpec:
    """Load the YAML spec at ``path``; environment, then ``overrides``, take precedence."""
    data = _read_yaml(path)
    layers = [data.get("options") or {}, _env_overrides(), overrides or {}]
    merged = reduce(_merge_options, (layer for layer in layers if layer), {})
    pipeline = data.get("pipeline") or []
    _warn_unknown_options(pipeline, merged)
    for section, model in AMBIENT_SECTIONS.items():
        model.model_validate(merged.get(section) or {})
    return PipelineSpec.model_validate({**data, "pipeline": pipeline, "options": merged})
