import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from codex_focus.cli.extract import extract, scopes
from codex_focus.config import get_log_level

app = typer.Typer(
    name="codex-focus",
    help="Codex Focus CLI — extract the focused code context around a cursor.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("extract")(extract)
app.command("scopes")(scopes)


def main() -> None:
    app()
