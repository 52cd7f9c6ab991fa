from __future__ import annotations

import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _run_cli(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "etext_segmenter.cli", *args],
        capture_output=True,
        text=True,
        env={**os.environ, "PYTHONPATH": str(ROOT), "COLUMNS": "200"},
        cwd=cwd,
    )


def _rows(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_convert_cli_writes_jsonl(etext_path: Path, tmp_path: Path) -> None:
    out_file = tmp_path / "out.jsonl"
    result = _run_cli("convert", str(etext_path), "--out", str(out_file), cwd=tmp_path)
    assert result.returncode == 0, result.stderr
    assert "convert: OK" in result.stdout
    rows = _rows(out_file)
    assert len(rows) == 13
    assert rows[7]["type"] == "heading"
    assert (tmp_path / "run_report.json").exists()


def test_convert_cli_verbose_prints_timings(etext_path: Path, tmp_path: Path) -> None:
    result = _run_cli(
        "convert", str(etext_path), "--out", str(tmp_path / "o.jsonl"), "--verbose", cwd=tmp_path
    )
    assert result.returncode == 0, result.stderr
    assert "segment_paragraphs:" in result.stdout


def test_metadata_cli_prints_json(etext_path: Path, tmp_path: Path) -> None:
    result = _run_cli("metadata", str(etext_path), cwd=tmp_path)
    assert result.returncode == 0, result.stderr
    record = json.loads(result.stdout)
    assert record["title"] == "Evangeline"
    assert record["author"] == "Henry W. Longfellow"
    assert record["etext_id"] == "evang"


def test_inspect_lists_passes() -> None:
    result = _run_cli("inspect")
    assert result.returncode == 0, result.stderr
    assert {"segment_paragraphs", "locate_boundaries", "extract_metadata"} <= set(
        json.loads(result.stdout)
    )


def test_convert_missing_file_exits_nonzero(tmp_path: Path) -> None:
    result = _run_cli("convert", "missing.txt", cwd=tmp_path)
    assert result.returncode != 0
    err = result.stderr.lower()
    assert "does not exist" in err or "no such file" in err


def test_unknown_step_reports_error(etext_path: Path, tmp_path: Path) -> None:
    spec = tmp_path / "custom.yaml"
    spec.write_text(
        textwrap.dedent(
            """
            pipeline: [segment_paragraphs, not_a_pass]
            """
        )
    )
    result = _run_cli("convert", str(etext_path), "--spec", str(spec), cwd=tmp_path)
    assert result.returncode == 1
    assert "error:" in result.stderr
    assert "unknown steps" in result.stderr
