import typer

from sourcepin import __version__
from sourcepin.logging_config import logger, setup_logging
from sourcepin.cli import annotation, mutations
from sourcepin.cli.config import CLIConfig
from sourcepin.config import load_config
from sourcepin.exceptions import ConfigError

app = typer.Typer()


def _console_level():
    """DEBUG when the configuration asks for verbose output."""
    try:
        verbose = load_config()["annotate"]["verbose"]
    except ConfigError as e:
        # The command itself reports the broken configuration
        logger.debug(f"Using default log level: {e}")
        return None
    return "DEBUG" if verbose else None


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables, colors and diffs (also via SOURCEPIN_HUMAN_MODE env var)"
    ),
):
    """
    sourcepin: tie rendered UI elements to the source that produced them.

    Machine mode is the default (pure JSON, no formatting).
    Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)
        setup_logging(level=_console_level(), suppress_console=False, force=True)
    else:
        # Keep stdout clean for JSON consumers
        setup_logging(suppress_console=True, force=True)


app.command(name="annotate")(annotation.annotate_cmd)
app.command(name="locate")(annotation.locate_cmd)
app.command(name="inspect")(annotation.inspect_cmd)
app.command(name="edit")(mutations.edit_cmd)
app.command(name="batch")(mutations.batch_cmd)


@app.command()
def version():
    """
    Prints the current version of sourcepin.
    """
    typer.echo(f"sourcepin v{__version__}")


@app.command()
def serve():
    """
    Start the MCP server on stdio.
    """
    from sourcepin.mcp import run_server

    setup_logging(suppress_console=True, force=True)
    logger.info("Starting sourcepin MCP server")
    run_server()


if __name__ == "__main__":
    app()
