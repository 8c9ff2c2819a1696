from __future__ import annotations

import io
import logging
import os
import sys
import termios
import tty
from typing import Optional, TextIO

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

logger = logging.getLogger(__name__)

CONTROLLING_TTY = "/dev/tty"


class _LinePrompt(Prompt):
    # Callers supply their own "Selection: " style prompt.
    prompt_suffix = ""


def is_interactive() -> bool:
    """True when both stdin and stdout are attached to a terminal."""

    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def open_tty(path: str) -> TextIO:
    """Open a terminal device for both reading and writing.

    Terminals are not seekable, so the usual ``open(path, "r+")`` (which wraps
    a BufferedRandom) fails on them. The raw file is wrapped directly instead.
    """

    raw = io.FileIO(path, "r+")
    try:
        return io.TextIOWrapper(raw, encoding="utf-8", line_buffering=True)
    except Exception:
        raw.close()
        raise


class Prompter:
    """Reads operator answers from the best available channel.

    Preference order:
    1. The controlling terminal (/dev/tty), so prompts still work when the
       installer itself arrives on stdin (``curl ... | sudo python3 -``).
    2. stdin/stdout, when both are terminals.
    3. No channel: every prompt returns its default.
    """

    def __init__(self, *, tty_path: str = CONTROLLING_TTY) -> None:
        self._tty_path = tty_path
        self._tty: Optional[TextIO] = None
        self._tty_checked = False

    def _open_tty(self) -> Optional[TextIO]:
        if self._tty_checked:
            return self._tty
        self._tty_checked = True
        try:
            self._tty = open_tty(self._tty_path)
        except OSError as e:
            logger.debug("Controlling terminal %s not available: %s", self._tty_path, e)
            self._tty = None
        return self._tty

    def has_channel(self) -> bool:
        return self._open_tty() is not None or is_interactive()

    def _channel(self) -> tuple[Optional[TextIO], Optional[TextIO]]:
        t = self._open_tty()
        if t is not None:
            return t, t
        if is_interactive():
            return sys.stdin, sys.stdout
        return None, None

    def read_line(self, prompt: str, default: str = "") -> str:
        src, dst = self._channel()
        if src is None or dst is None:
            return default
        console = Console(file=dst, highlight=False, emoji=False)
        return _LinePrompt.ask(Text(prompt), console=console, stream=src, default=default, show_default=False)

    def read_choice(self, prompt: str, default: str = "") -> str:
        """Read a single keystroke (no Enter needed when the channel is a terminal)."""

        src, dst = self._channel()
        if src is None or dst is None:
            return default
        console = Console(file=dst, highlight=False, emoji=False)
        console.print(Text(prompt), end="")
        dst.flush()

        try:
            fd = src.fileno()
            is_tty = os.isatty(fd)
        except (AttributeError, OSError, ValueError):
            is_tty = False

        if not is_tty:
            line = src.readline()
            return line[:1] if line.strip() else default

        old = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd, termios.TCSANOW)
            ch = os.read(fd, 1).decode("utf-8", errors="ignore")
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old)
        console.print()
        if ch in ("\n", "\r", ""):
            return default
        return ch

    def close(self) -> None:
        if self._tty is not None:
            try:
                self._tty.close()
            finally:
                self._tty = None
