"""
CLI Annotation Commands

annotate, locate, inspect
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from sourcepin.annotation import annotate_file, collect_scopes, compute_element_metadata
from sourcepin.config import get_attribute_prefix, validate_attribute_prefix
from sourcepin.exceptions import ConfigError
from sourcepin.logging_config import logger
from sourcepin.mutation import ElementLocator, MutationFacade, NotFound
from .config import CLIConfig
from .output import get_console, print_error, print_json

console = get_console()


def _resolve_prefix(prefix: Optional[str], json_output: bool) -> str:
    try:
        return get_attribute_prefix() if prefix is None else validate_attribute_prefix(prefix)
    except ConfigError as e:
        print_error("CONFIG_ERROR", str(e), json_output)
        raise typer.Exit(code=2)


def annotate_cmd(
    file: Path = typer.Argument(..., help="Source file to annotate", exists=True, dir_okay=False),
    prefix: Optional[str] = typer.Option(None, "--prefix", "-p", help="Attribute prefix (default from config)"),
    write: bool = typer.Option(False, "--write", "-w", help="Write the result back to FILE"),
    json_output: bool = typer.Option(False, "--json", help="Output a JSON summary"),
):
    """
    Inject source-location metadata into every element of FILE.

    Prints the annotated source unless --write is given. Files that do not
    parse are left unchanged and reported.
    """
    attribute_prefix = _resolve_prefix(prefix, json_output)
    errors: List[str] = []

    try:
        annotated = annotate_file(
            file,
            {"attributePrefix": attribute_prefix},
            write=write,
            filename=str(file),
            on_error=lambda name, message: errors.append(message),
        )
    except (OSError, UnicodeDecodeError) as e:
        print_error("FILE_READ_ERROR", f"Failed to read {file}: {e}", json_output, input_value=str(file))
        raise typer.Exit(code=1)

    if json_output:
        data = {
            "status": "error" if errors else "ok",
            "file": str(file),
            "written": write and not errors,
            "errors": errors,
        }
        if not write:
            data["code"] = annotated
        print_json(data)
    elif errors:
        print_error("PARSE_ERROR", f"{file}: {errors[0]}", input_value=str(file))
    elif write:
        console.print(f"[green]Annotated[/green] {escape(str(file))}")
    else:
        typer.echo(annotated, nl=False)

    if errors:
        raise typer.Exit(code=1)


def locate_cmd(
    file: Path = typer.Argument(..., help="Source file", exists=True, dir_okay=False),
    line: int = typer.Option(..., "--line", "-l", min=1, help="1-based line of the opening tag"),
    column: int = typer.Option(..., "--column", "-c", min=0, help="0-based column of the opening tag"),
    prefix: Optional[str] = typer.Option(None, "--prefix", "-p", help="Attribute prefix (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the element whose opening tag starts at LINE:COLUMN.
    """
    attribute_prefix = _resolve_prefix(prefix, json_output)
    try:
        found = ElementLocator(attribute_prefix).locate_file(file, line, column, filename=str(file))
    except (OSError, UnicodeDecodeError) as e:
        print_error("FILE_READ_ERROR", f"Failed to read {file}: {e}", json_output, input_value=str(file))
        raise typer.Exit(code=1)

    if isinstance(found, NotFound):
        code = "PARSE_ERROR" if found.parse_failed else "ELEMENT_NOT_FOUND"
        print_error(code, f"{file}:{line}:{column}: {found.reason}", json_output,
                    input_value=f"{file}:{line}:{column}")
        raise typer.Exit(code=1)

    element = found.element
    scope = collect_scopes(found.tree).get(element.node.start_byte)
    metadata = compute_element_metadata(element, str(file), scope)
    open_tag = found.original_text(element.open_start, element.open_end)
    logger.debug(f"Located <{element.name}> at {file}:{line}:{column}")

    if CLIConfig.is_machine_mode() or json_output:
        data = metadata.to_wire()
        data["openTag"] = open_tag
        print_json(data)
        return

    table = Table(title=f"<{escape(element.name)}> at {escape(str(metadata.location))}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Element id", escape(metadata.element_id))
    table.add_row("Component", escape(metadata.component_name or "-"))
    table.add_row("Function", escape(metadata.function_name or "-"))
    table.add_row("Static text", "yes" if metadata.is_static_text else "no")
    table.add_row("Opening tag", escape(open_tag))
    console.print(table)


def inspect_cmd(
    element_id: str = typer.Argument(..., help="Element id, e.g. src/App.tsx:12:4_div-card"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root for relative paths", file_okay=False),
    radius: int = typer.Option(CLIConfig.DEFAULT_CONTEXT_RADIUS, "--radius", min=0, help="Context lines around the target"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Print the source lines an element id points at.
    """
    try:
        facade = MutationFacade(root)
    except ConfigError as e:
        print_error("CONFIG_ERROR", str(e), json_output)
        raise typer.Exit(code=2)

    context = facade.get_source_context(element_id, radius)
    if context is None:
        print_error("SOURCE_NOT_FOUND", f"No source found for element id '{element_id}'", json_output,
                    input_value=element_id)
        raise typer.Exit(code=1)

    if CLIConfig.is_machine_mode() or json_output:
        print_json(context.to_wire())
        return

    console.print(f"[bold]{escape(str(context.location))}[/bold] ({context.total_lines} lines)")
    for number, text in enumerate(context.context_lines, start=context.context_start):
        if number == context.location.line:
            console.print(f"[yellow]{number:>5} >[/yellow] {escape(text)}")
        else:
            console.print(f"[dim]{number:>5}  [/dim] {escape(text)}")
