"""
CLI Mutation Commands

edit, batch
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.syntax import Syntax

from sourcepin.exceptions import ConfigError
from sourcepin.mutation import MutationFacade
from sourcepin.schemas import EditResult
from .config import CLIConfig
from .output import get_console, print_error, print_json

console = get_console()


def _make_facade(root: Path, backup: Optional[bool], json_output: bool) -> MutationFacade:
    try:
        return MutationFacade(root, backup=backup)
    except ConfigError as e:
        print_error("CONFIG_ERROR", str(e), json_output)
        raise typer.Exit(code=2)


def _print_result(result: EditResult) -> None:
    if result.success:
        console.print(f"[green]✓[/green] {escape(result.message)}")
        if result.diff:
            console.print(Syntax(result.diff, "diff", theme="ansi_dark"))
    else:
        console.print(f"[red]✗[/red] {escape(result.file_path)} ({escape(result.kind)}): {escape(result.message)}")


def edit_cmd(
    file: str = typer.Argument(..., help="File to edit, relative to --root or absolute"),
    line: int = typer.Option(..., "--line", "-l", help="1-based line of the opening tag"),
    column: int = typer.Option(..., "--column", "-c", help="0-based column of the opening tag"),
    kind: str = typer.Option(..., "--kind", "-k", help="Edit kind: style, content or attribute"),
    value: str = typer.Option(..., "--value", "-v", help="New className, text or attribute value"),
    attribute: Optional[str] = typer.Option(None, "--attribute", "-a", help="Attribute name (kind=attribute)"),
    original: Optional[str] = typer.Option(None, "--original", help="Value the source must still hold"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root for relative paths", file_okay=False),
    backup: Optional[bool] = typer.Option(None, "--backup/--no-backup", help="Back up the file first (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Apply one visual edit to the element whose opening tag starts at LINE:COLUMN.

    Only the className literal, the first text child or the named attribute
    is rewritten; the rest of the file is left byte-for-byte as it was.
    """
    facade = _make_facade(root, backup, json_output)
    result = facade.apply_edit({
        "filePath": file,
        "line": line,
        "column": column,
        "kind": kind,
        "newValue": value,
        "originalValue": original,
        "attributeName": attribute,
    })

    if CLIConfig.is_machine_mode() or json_output:
        print_json(result.to_wire())
    else:
        _print_result(result)

    if not result.success:
        raise typer.Exit(code=1)


def batch_cmd(
    requests_file: Path = typer.Argument(..., help="JSON file with a list of edit requests", exists=True, dir_okay=False),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root for relative paths", file_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Apply an ordered list of edits.

    The file holds a JSON array of edit requests, or an object with the
    array under "updates" or "requests". A failing edit does not stop the
    batch; the exit code is 1 if any edit failed.
    """
    try:
        payload = json.loads(requests_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        print_error("INVALID_REQUESTS", f"Failed to read {requests_file}: {e}", json_output,
                    input_value=str(requests_file))
        raise typer.Exit(code=2)

    if isinstance(payload, dict):
        payload = payload.get("updates", payload.get("requests"))
    if not isinstance(payload, list):
        print_error("INVALID_REQUESTS", "Requests must be a JSON array", json_output,
                    input_value=str(requests_file),
                    suggestions=['[{"filePath": "src/App.tsx", "line": 3, "column": 4, "kind": "style", "newValue": "p-4"}]'])
        raise typer.Exit(code=2)

    facade = _make_facade(root, None, json_output)
    batch = facade.apply_batch(payload)

    if CLIConfig.is_machine_mode() or json_output:
        print_json(batch.to_wire())
    else:
        for result in batch.results:
            _print_result(result)
        summary = batch.summary
        color = "green" if summary.failed == 0 else "yellow"
        console.print(f"[{color}]{summary.success}/{summary.total} edits applied, {summary.failed} failed[/{color}]")

    if batch.summary.failed:
        raise typer.Exit(code=1)
