"""Console output for the command line, built on rich.

Results are dumped as JSON on stdout; informational and error messages go to
stderr so piping the output stays clean.
"""

import json
import logging
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

logger = logging.getLogger(__name__)


class ConsoleDisplay:
    """Writes command results and messages with rich consoles."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def display_json(self, data: Any) -> None:
        """Prints `data` as indented JSON."""
        self.console.print_json(json.dumps(data, ensure_ascii=False, default=str))

    def display_info(self, message: str) -> None:
        self.err_console.print(Text(message, style="dim cyan"))

    def display_error(self, message: str, title: Optional[str] = None) -> None:
        logger.debug(f"display_error called: {message}")
        self.err_console.print(Panel(Text(message, style="bold red"), title=title or "Error", border_style="red"))
