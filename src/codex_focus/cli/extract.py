from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from codex_focus.core.exceptions import UnsupportedLanguageError
from codex_focus.core.finder import FocusedCodeFinder, finder_for_document
from codex_focus.models import CursorRange, Document

console = Console()

_LineOption = Annotated[int, typer.Option("--line", "-l", min=0, help="Zero-based cursor line.")]
_CharacterOption = Annotated[int, typer.Option("--character", "-c", min=0, help="Zero-based cursor character.")]
_PathArgument = Annotated[str | None, typer.Argument(help="Path to code file.")]
_CodeOption = Annotated[str | None, typer.Option(help="Source code string to use instead of a file path.")]
_LanguageOption = Annotated[str | None, typer.Option(help="Language name (python, go, c).")]


def _load(
    path: str | None,
    code: str | None,
    language: str | None,
    max_lines: int | None = None,
) -> tuple[Document, FocusedCodeFinder]:
    if code is None and path is None:
        raise typer.BadParameter("Either PATH or --code must be given.")
    if code is not None:
        document = Document.from_text(code)
    else:
        assert path is not None
        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise typer.BadParameter(f"File not found: {path}") from None
        document = Document.from_text(content, uri=str(file_path))
    try:
        finder = finder_for_document(document, language, max_lines)
    except UnsupportedLanguageError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return document, finder


def _target(line: int, character: int, end_line: int | None, end_character: int | None) -> CursorRange:
    end = (end_line if end_line is not None else line, end_character if end_character is not None else character)
    if end < (line, character):
        raise typer.BadParameter("Selection end precedes its start.")
    return CursorRange.between((line, character), end)


def extract(
    line: _LineOption,
    character: _CharacterOption,
    path: _PathArgument = None,
    code: _CodeOption = None,
    language: _LanguageOption = None,
    end_line: Annotated[int | None, typer.Option(min=0, help="Zero-based selection end line.")] = None,
    end_character: Annotated[int | None, typer.Option(min=0, help="Zero-based selection end character.")] = None,
    max_lines: Annotated[int | None, typer.Option(help="Maximum number of output lines.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
) -> None:
    """Extract the focused code around a cursor position."""
    document, finder = _load(path, code, language, max_lines)
    focused = finder.extract(document, _target(line, character, end_line, end_character))

    if as_json:
        typer.echo(focused.model_dump_json(indent=2))
        return

    for entry in (*focused.context.includes, *focused.context.imports):
        console.print(escape(entry), style="dim", highlight=False)
    for scope in focused.scope_signatures:
        console.print(escape(scope.signature), style="cyan", highlight=False)
    console.print(
        Syntax(
            focused.code,
            finder.language,
            line_numbers=True,
            start_line=focused.code_range.start.line + 1,
        )
    )
    if focused.truncated:
        console.print("[yellow]Focused code truncated to fit the line budget.[/yellow]")


def scopes(
    line: _LineOption,
    character: _CharacterOption,
    path: _PathArgument = None,
    code: _CodeOption = None,
    language: _LanguageOption = None,
) -> None:
    """List the scopes enclosing a cursor position, outermost first."""
    document, finder = _load(path, code, language)
    context = finder.collect_context(document, CursorRange.at(line, character))

    table = Table(show_lines=False)
    for header in ("kind", "name", "signature", "range", "code range"):
        table.add_column(header)
    for node in context.nodes:
        table.add_row(
            node.kind.value,
            escape(node.name),
            escape(node.signature),
            f"{node.range.start.line}:{node.range.start.character}-{node.range.end.line}:{node.range.end.character}",
            "yes" if node.can_be_used_as_code_range else "no",
        )
    console.print(table)
    console.print(f"({len(context.nodes)} scopes)")
