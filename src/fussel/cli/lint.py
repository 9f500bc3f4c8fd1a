import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer

from fussel.cli.console import EXIT_FAULTS, err_console, handle_error
from fussel.config import FusselConfig, discover_config
from fussel.core.engine import FileSource, TreeSource, WalkerSource, run_lints
from fussel.core.ports.ignore import IgnoreResolver
from fussel.core.tree import Project
from fussel.core.walker import WalkerBuilder
from fussel.errors import FusselError, LintRunError
from fussel.fs.local import LocalFileSystem
from fussel.lints import build_lints
from fussel.vcs.git import GitIgnoreResolver, discover_work_tree


def resolve_root(
    start: Path,
    root: Path | None,
    config_path: Path | None,
    respect_gitignore: bool,
) -> tuple[Path, IgnoreResolver | None]:
    """Pick the directory to lint and the ignore resolver to apply to it.

    Without ``--root`` the git work tree is linted when ignore rules are
    respected; otherwise the directory holding the configuration file, or the
    start directory when there is none.
    """
    if root is not None:
        lint_root = root.resolve()
        if not respect_gitignore:
            return lint_root, None
        return lint_root, GitIgnoreResolver.discover(lint_root)
    if respect_gitignore:
        work_tree = discover_work_tree(start)
        return work_tree, GitIgnoreResolver(work_tree)
    if config_path is not None:
        return config_path.resolve().parent, None
    return start, None


def build_source(settings: FusselConfig, lint_root: Path, resolver: IgnoreResolver | None, use_tree: bool) -> FileSource:
    fs = LocalFileSystem()
    if use_tree or settings.walk.front_end == "tree":
        try:
            project = Project.open(lint_root, fs)
        except OSError as exc:
            raise LintRunError(f"Cannot open project at {lint_root}") from exc
        return TreeSource(project, resolver)
    walker = WalkerBuilder(
        root=lint_root,
        fs=fs,
        respect_gitignore=resolver is not None,
        ignore_resolver=resolver,
    ).build()
    return WalkerSource(walker, fs)


def lint(
    current_dir: Annotated[
        Path | None,
        typer.Option("-C", "--current-dir", help="Run as if fussel was started in this directory."),
    ] = None,
    config: Annotated[Path | None, typer.Option("--config", help="Path to a Fussel.toml file.")] = None,
    root: Annotated[
        Path | None, typer.Option("--root", help="Lint this directory instead of the git work tree.")
    ] = None,
    no_gitignore: Annotated[bool, typer.Option("--no-gitignore", help="Do not apply git ignore rules.")] = False,
    use_tree: Annotated[bool, typer.Option("--tree", help="Walk a lazily loaded project tree.")] = False,
) -> None:
    """Run the enabled lints and print their diagnostics."""
    start = (current_dir or Path.cwd()).resolve()
    try:
        settings, config_path = discover_config(start, config)
        lints = build_lints(settings)
        respect_gitignore = settings.walk.respect_gitignore and not no_gitignore
        lint_root, resolver = resolve_root(start, root, config_path, respect_gitignore)
        try:
            source = build_source(settings, lint_root, resolver, use_tree)
            sys.stdout.flush()
            summary = asyncio.run(run_lints(lints, source, sys.stdout.buffer, settings.walk.channel_capacity))
        finally:
            if isinstance(resolver, GitIgnoreResolver):
                resolver.close()
    except FusselError as exc:
        handle_error(exc)

    if summary.total:
        err_console.print(
            f"[yellow]{summary.total} fault(s)[/yellow]: {summary.errors} error(s), {summary.warnings} warning(s)"
        )
        raise typer.Exit(EXIT_FAULTS)
