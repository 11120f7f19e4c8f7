"""
Logging for annotation and edit runs.

Two loguru sinks:
- stderr, for people running the CLI in human mode
- an opt-in rotating file under .sourcepin/logs/, which keeps a record of
  applied edits after the console has scrolled away

stdout is never used, so JSON output from the CLI and the MCP stdio
transport stay clean.
"""

import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Configure the global logger.

    Args:
        level: Console level. Defaults to SOURCEPIN_LOG_LEVEL, then INFO.
        suppress_console: Drop the stderr sink. If None, SOURCEPIN_MACHINE_MODE decides.
        enable_file_logging: Add the file sink. If None, SOURCEPIN_FILE_LOGGING decides.
        force: Reconfigure even if logging was already set up (CLI callback, tests).
    """
    global _logging_configured

    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("SOURCEPIN_LOG_LEVEL", "INFO").upper()
    if suppress_console is None:
        suppress_console = _env_flag("SOURCEPIN_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = _env_flag("SOURCEPIN_FILE_LOGGING")

    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging:
        from sourcepin.paths import get_paths
        paths = get_paths()
        paths.ensure_dirs()

        # Edits are logged at INFO; per-element DEBUG noise stays out of the file
        logger.add(
            paths.logs_dir / "sourcepin.log",
            level="INFO",
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            catch=True,
        )


# Configure on import; machine mode is read from the environment
setup_logging()
