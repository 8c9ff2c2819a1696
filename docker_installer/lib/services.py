from __future__ import annotations

import logging
from typing import Protocol

from .command import run_cmd

logger = logging.getLogger(__name__)


class ServiceManager(Protocol):
    def enable(self, name: str) -> None:
        ...

    def start(self, name: str) -> None:
        ...

    def is_enabled(self, name: str) -> bool:
        ...

    def is_active(self, name: str) -> bool:
        ...


class SystemdServiceManager:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def enable(self, name: str) -> None:
        run_cmd(["systemctl", "enable", name], dry_run=self.dry_run)

    def start(self, name: str) -> None:
        run_cmd(["systemctl", "start", name], dry_run=self.dry_run)

    def is_enabled(self, name: str) -> bool:
        r = run_cmd(["systemctl", "is-enabled", "--quiet", name], check=False)
        return r.returncode == 0

    def is_active(self, name: str) -> bool:
        r = run_cmd(["systemctl", "is-active", "--quiet", name], check=False)
        return r.returncode == 0
