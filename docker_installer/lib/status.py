from __future__ import annotations

import logging
from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class StatusReporter:
    """Human-facing status lines.

    ok/info go to stdout, warn/error to stderr. Warnings and errors are also
    written to the run log so nothing reported to the operator is lost.
    """

    def __init__(
        self,
        *,
        color: bool = True,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        # A Console without a file follows sys.stdout/sys.stderr as they are swapped.
        common = dict(highlight=False, emoji=False, soft_wrap=True, no_color=not color)
        self._out = Console(file=out, **common)
        self._err = Console(file=err, stderr=err is None, **common)

    def _emit(self, console: Console, style: str, glyph: str, message: str) -> None:
        console.print(f"[{style}]{glyph}[/{style}] {escape(message)}")

    def ok(self, message: str) -> None:
        self._emit(self._out, "green", "✓", message)

    def info(self, message: str) -> None:
        self._emit(self._out, "blue", "ℹ", message)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self._emit(self._err, "bold yellow", "⚠", message)

    def error(self, message: str) -> None:
        logger.error(message)
        self._emit(self._err, "bold red", "✗", message)

    def line(self, text: str = "") -> None:
        self._out.print(text, markup=False)
