"""Central logging configuration."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from hedgehog.config import LogLevel

_CONFIGURED = False

_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def configure_logging(level: LogLevel | str = LogLevel.WARN) -> None:
    """Install a rich stderr handler on the root logger once."""
    global _CONFIGURED
    numeric = _LEVELS.get(getattr(level, "value", level), logging.WARNING)
    if _CONFIGURED:
        logging.getLogger().setLevel(numeric)
        return

    logging.basicConfig(
        level=numeric,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    _CONFIGURED = True
