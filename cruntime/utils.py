"""Utility functions for the container runtime."""

import logging
import os
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cruntime.config import config

# Set up logging
logging.basicConfig(
    level=config.log_level,
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True)],
)

logger = logging.getLogger("cruntime")
console = Console(stderr=True)


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Adjust the runtime log level and optionally mirror records to a file."""
    logger.setLevel((level or config.log_level).upper())

    if log_file:
        path = os.path.abspath(log_file)
        for existing in logger.handlers:
            if isinstance(existing, logging.FileHandler) and existing.baseFilename == path:
                return

        handler = logging.FileHandler(path)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)


def print_table(
    title: str,
    headers: List[str],
    rows: List[List[str]],
    show_lines: bool = True,
) -> None:
    """Print a formatted table using rich."""
    table = Table(title=title, show_lines=show_lines)

    for header in headers:
        table.add_column(header, style="cyan")

    for row in rows:
        table.add_row(*row)

    Console().print(table)
