from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from fussel.errors import iter_causes

EXIT_FAULTS = 1
EXIT_ERROR = 2

err_console = Console(stderr=True, soft_wrap=True)


def handle_error(error: BaseException) -> NoReturn:
    """Print *error* and every chained cause, then exit with ``EXIT_ERROR``."""
    err_console.print(f"[bold red]error:[/bold red] {escape(str(error))}")
    for cause in iter_causes(error):
        err_console.print(f"[bold blue]caused by:[/bold blue] {escape(str(cause))}")
    raise typer.Exit(EXIT_ERROR)
