"""Nox automation sessions for etext_segmenter."""

from __future__ import annotations

from pathlib import Path

import nox

nox.options.sessions = ("lint", "typecheck", "tests")
nox.options.reuse_existing_virtualenvs = True

PROJECT_ROOT = Path(__file__).parent
SOURCES = ("etext_segmenter", "tests", "noxfile.py")


def _install_project(session: nox.Session) -> None:
    session.install("-e", f"{PROJECT_ROOT}[test]")


@nox.session()
def lint(session: nox.Session) -> None:
    session.install("black", "flake8")
    session.run("black", "--check", *SOURCES)
    session.run("flake8", *SOURCES)


@nox.session()
def typecheck(session: nox.Session) -> None:
    session.install("mypy", "types-PyYAML")
    _install_project(session)
    session.run("mypy", "etext_segmenter")


@nox.session()
def tests(session: nox.Session) -> None:
    _install_project(session)
    session.run("pytest", *(session.posargs or ["tests"]))


@nox.session()
def smoke(session: nox.Session) -> None:
    """Run the installed console script end to end on the registry."""
    _install_project(session)
    session.run("etext_segmenter", "inspect")
