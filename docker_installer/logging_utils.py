from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .config import default_log_path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    also_console: bool = False,
) -> str:
    """Configure the append-only run log.

    Notes:
    - The log is opened in append mode and never rotated within a run.
    - Console output is normally left to the status reporter; set
      ``also_console`` to mirror log records on stderr as well.
    - If the requested path is not writable we fall back to a file of the
      same name in the working directory.

    Returns the actual file path being used.
    """

    log_path = log_path or default_log_path()

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_docker_installer_configured", False):
        return getattr(logger, "_docker_installer_log_path", log_path)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers: list[logging.Handler] = []

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        chosen_path = log_path
    except OSError:
        fallback = str(Path.cwd() / os.path.basename(log_path))
        file_handler = logging.FileHandler(fallback, mode="a", encoding="utf-8")
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_docker_installer_configured", True)
    setattr(logger, "_docker_installer_handlers", handlers)
    setattr(logger, "_docker_installer_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Detach handlers installed by configure_logging()."""

    logger = logging.getLogger()
    if not getattr(logger, "_docker_installer_configured", False):
        return
    for h in getattr(logger, "_docker_installer_handlers", []):
        logger.removeHandler(h)
        h.close()
    setattr(logger, "_docker_installer_handlers", [])
    setattr(logger, "_docker_installer_configured", False)
