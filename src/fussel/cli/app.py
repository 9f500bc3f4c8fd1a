import logging

import typer
from rich.logging import RichHandler

from fussel import __version__
from fussel.cli.console import err_console
from fussel.cli.lint import lint
from fussel.cli.tree import tree
from fussel.config import log_level

app = typer.Typer(
    name="fussel",
    help="fussel: lint a source tree and report rustc-style diagnostics.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


app.command("lint")(lint)
app.command("tree")(tree)


@app.command("version")
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


def main() -> None:
    app()
