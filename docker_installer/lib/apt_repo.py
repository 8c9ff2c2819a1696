from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .command import run_cmd
from .os_release import HostProfile

logger = logging.getLogger(__name__)


def sources_line(*, arch: str, key_path: str, repo_url: str, codename: str, channel: str = "stable") -> str:
    """Render the one-line apt source for the Docker repository.

    Example:
      deb [arch=amd64 signed-by=/etc/apt/keyrings/docker.asc] https://download.docker.com/linux/ubuntu noble stable
    """

    if not codename:
        raise RuntimeError("Cannot build apt source line without a release codename")
    return f"deb [arch={arch} signed-by={key_path}] {repo_url} {codename} {channel}\n"


class Repository(Protocol):
    def ensure_keyring_dir(self) -> bool:
        ...

    def keyring_dir_present(self) -> bool:
        ...

    def key_valid(self) -> bool:
        ...

    def install_key(self) -> None:
        ...

    def sources_present(self) -> bool:
        ...

    def write_sources(self, host: HostProfile, arch: str) -> None:
        ...


class AptRepository:
    """Signing key + sources.list.d entry for an external apt repository.

    Both writes are one-time: the key is fetched only when missing or not a
    parseable OpenPGP key, the sources file only when absent.
    """

    def __init__(
        self,
        *,
        keyring_dir: str,
        key_path: str,
        key_url: str,
        sources_path: str,
        repo_url: str,
        channel: str = "stable",
        dry_run: bool = False,
    ) -> None:
        self.keyring_dir = Path(keyring_dir)
        self.key_path = Path(key_path)
        self.key_url = key_url
        self.sources_path = Path(sources_path)
        self.repo_url = repo_url
        self.channel = channel
        self.dry_run = dry_run

    def keyring_dir_present(self) -> bool:
        return self.keyring_dir.is_dir()

    def ensure_keyring_dir(self) -> bool:
        """Create the keyring directory (0755). Returns True if it was created."""

        if self.keyring_dir.is_dir():
            return False
        run_cmd(["install", "-m", "0755", "-d", str(self.keyring_dir)], dry_run=self.dry_run)
        return True

    def key_valid(self) -> bool:
        if not self.key_path.is_file() or self.key_path.stat().st_size == 0:
            return False
        r = run_cmd(
            ["gpg", "--batch", "--quiet", "--show-keys", str(self.key_path)],
            check=False,
        )
        return r.returncode == 0

    def install_key(self) -> None:
        run_cmd(["curl", "-fsSL", self.key_url, "-o", str(self.key_path)], dry_run=self.dry_run)
        run_cmd(["chmod", "a+r", str(self.key_path)], dry_run=self.dry_run)
        logger.info("Installed repository signing key: %s", str(self.key_path))

    def sources_present(self) -> bool:
        return self.sources_path.is_file()

    def write_sources(self, host: HostProfile, arch: str) -> None:
        line = sources_line(
            arch=arch,
            key_path=str(self.key_path),
            repo_url=self.repo_url,
            codename=host.codename,
            channel=self.channel,
        )
        if self.dry_run:
            logger.info("Would write %s: %s", str(self.sources_path), line.strip())
            return
        self.sources_path.parent.mkdir(parents=True, exist_ok=True)
        self.sources_path.write_text(line, encoding="utf-8")
        logger.info("Configured apt repository: %s", line.strip())
