from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer

from etext_segmenter.config import DEFAULT_SPEC_PATH, PipelineSpec, load_spec
from etext_segmenter.core import (
    DEFAULT_PIPELINE,
    describe,
    input_artifact,
    run_convert,
    run_inspect,
)

_PACKAGE_DIR = Path(__file__).resolve().parent


def _resolve_spec_path(path: str | Path) -> Path:
    """First existing spec among ``path`` as given, then beside and inside the package."""
    candidate = Path(path)
    searched = (candidate, _PACKAGE_DIR.parent / candidate, _PACKAGE_DIR / candidate)
    return next((p for p in searched if p.exists()), candidate)


def _format_timings(timings: Mapping[str, float]) -> str:
    return "\n".join(f"{name}: {seconds:.2f}s" for name, seconds in timings.items())


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn any exception into ``error: <message>`` on stderr and exit status 1."""
    try:
        yield
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise typer.Exit(1) from exc


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _overrides(out: Path | None = None, encoding: str | None = None) -> dict[str, dict[str, Any]]:
    overrides: dict[str, dict[str, Any]] = {}
    if out:
        overrides["emit_jsonl"] = {"output_path": str(out)}
    if encoding:
        overrides["read_text"] = {"encoding": encoding}
    return overrides


def _load(spec: str, overrides: dict[str, dict[str, Any]]) -> PipelineSpec:
    """Load ``spec``, running the full default pipeline when it names no steps."""
    loaded = load_spec(_resolve_spec_path(spec), overrides=overrides)
    if loaded.pipeline:
        return loaded
    return loaded.model_copy(update={"pipeline": [*DEFAULT_PIPELINE, "emit_jsonl"]})


app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def convert(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    out: Path | None = typer.Option(None, "--out", help="JSONL output path."),
    spec: str = typer.Option(DEFAULT_SPEC_PATH, "--spec"),
    encoding: str | None = typer.Option(None, "--encoding", help="Charset when no BOM."),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    """Segment a plain-text file into JSON lines, one per block."""
    with _reported_errors():
        _configure_logging(verbose)
        s = _load(spec, _overrides(out, encoding))
        _, timings = run_convert(input_artifact(str(input_path), s), s)
        if verbose:
            print(_format_timings(timings))
        print("convert: OK")


@app.command()
def metadata(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    spec: str = typer.Option(DEFAULT_SPEC_PATH, "--spec"),
    encoding: str | None = typer.Option(None, "--encoding", help="Charset when no BOM."),
) -> None:
    """Print the title, author, description and language of an etext as JSON."""
    with _reported_errors():
        s = _load(spec, _overrides(encoding=encoding))
        s = s.model_copy(update={"pipeline": list(DEFAULT_PIPELINE)})
        print(json.dumps(describe(str(input_path), s), indent=2, ensure_ascii=False))


@app.command()
def inspect() -> None:
    """List the registered passes."""
    print(json.dumps(run_inspect(), indent=2))


if __name__ == "__main__":
    app()
