from __future__ import annotations

import logging
from typing import Optional, Protocol

from .command import run_cmd, which

logger = logging.getLogger(__name__)


class ContainerRuntime(Protocol):
    def version(self) -> Optional[str]:
        ...

    def compose_version(self) -> Optional[str]:
        ...


class DockerCli:
    """Read-only probes of the installed docker CLI."""

    def __init__(self, *, binary: str = "docker") -> None:
        self.binary = binary

    def _query(self, *args: str) -> Optional[str]:
        if not which(self.binary):
            return None
        r = run_cmd([self.binary, *args], check=False)
        if r.returncode != 0:
            return None
        return (r.stdout or "").strip() or None

    def version(self) -> Optional[str]:
        return self._query("--version")

    def compose_version(self) -> Optional[str]:
        return self._query("compose", "version")
