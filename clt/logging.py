"""
Logging for clt.

All diagnostics go to stderr so that the live session mirrored on stdout
during recording stays clean.

Example:
    from clt.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Replaying tests/basic.rec")
    logger.debug("Sending command: %s", command)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

CLT_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "clt.success": "bold green",
    "clt.input": "cyan",
    "clt.notice": "bold yellow",
})

# Global console instance
console = Console(theme=CLT_THEME, stderr=True)

_initialized = False


def setup_logging(
    level: str = "WARNING",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> None:
    """
    init clt's logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks

    Note:
        Only the first call configures handlers; later calls just
        adjust the level.
    """
    global _initialized

    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    if _initialized:
        logging.getLogger().setLevel(numeric_level)
        return

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True,
    )

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class CltLogger:
    """
    clt-specific logger

    Wraps standard logger with helpers for the lines clt prints itself.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(message, *args, **kwargs)

    def success(self, message: str) -> None:
        """Print a success line."""
        self.console.print(f"[clt.success]✓[/clt.success] {escape(message)}")

    def notice(self, message: str) -> None:
        """Print a one-line notice that must be seen regardless of log level."""
        self.console.print(f"[clt.notice]{escape(message)}[/clt.notice]")

    def command(self, command: str, duration_ms: Optional[int] = None) -> None:
        """
        Log a finished command at debug level.

        Args:
            command: Command text sent to the shell
            duration_ms: How long it ran
        """
        first_line = command.splitlines()[0] if command else ""
        if duration_ms is None:
            self.logger.debug("$ %s", first_line)
        else:
            self.logger.debug("$ %s (%dms)", first_line, duration_ms)


def get_clt_logger(name: str) -> CltLogger:
    """
    Get a CltLogger instance for the given module.

    Example:
        logger = get_clt_logger(__name__)
        logger.success("Replay finished")
    """
    return CltLogger(name)
