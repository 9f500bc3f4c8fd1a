from pathlib import Path
from typing import Annotated

import typer

from fussel.cli.console import handle_error
from fussel.core.traverse import Printer, traverse
from fussel.core.tree import Project
from fussel.errors import LintRunError


def _load(target: Path) -> Project:
    try:
        return Project.load(target)
    except OSError as exc:
        raise LintRunError(f"Cannot load project at {target}") from exc


def tree(
    current_dir: Annotated[
        Path | None,
        typer.Option("-C", "--current-dir", help="Run as if fussel was started in this directory."),
    ] = None,
    root: Annotated[Path | None, typer.Option("--root", help="Print this directory instead.")] = None,
) -> None:
    """Load the project tree and print its outline."""
    start = (current_dir or Path.cwd()).resolve()
    target = root.resolve() if root is not None else start
    try:
        project = _load(target)
    except LintRunError as exc:
        handle_error(exc)
    traverse(project, Printer())
