from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from ..config import InstallerConfig
from .os_release import HostProfile, detect_host
from .virt import VirtualizationSignal, detect_virtualization

logger = logging.getLogger(__name__)


class EnvironmentProbe(Protocol):
    def is_root(self) -> bool:
        ...

    def detect_host(self) -> HostProfile:
        ...

    def detect_virtualization(self) -> VirtualizationSignal:
        ...

    def entropy_avail(self) -> Optional[int]:
        ...


class HostProbe:
    """Read-only facts about the machine we are running on."""

    def __init__(self, cfg: InstallerConfig) -> None:
        self.cfg = cfg

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def detect_host(self) -> HostProfile:
        return detect_host(
            os_release_path=self.cfg.os_release_path,
            distro_id=self.cfg.distro_id,
            min_version=self.cfg.min_version,
        )

    def detect_virtualization(self) -> VirtualizationSignal:
        return detect_virtualization(
            cpuinfo_path=self.cfg.cpuinfo_path,
            known_hypervisors=self.cfg.known_hypervisors,
            is_root=self.is_root(),
        )

    def entropy_avail(self) -> Optional[int]:
        try:
            return int(Path(self.cfg.entropy_avail_path).read_text(encoding="utf-8").strip())
        except (OSError, ValueError):
            return None
