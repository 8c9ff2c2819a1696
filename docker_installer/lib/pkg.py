from __future__ import annotations

import logging
from typing import Iterable, Protocol, Sequence, Set

from .command import run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "update"], env=APT_ENV, dry_run=dry_run)


def apt_install(
    packages: Sequence[str],
    *,
    with_recommends: bool = True,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    argv = ["apt-get", "install", "-y"]
    if not with_recommends:
        argv.append("--no-install-recommends")
    run_cmd([*argv, *packages], env=APT_ENV, dry_run=dry_run)


def apt_remove(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(["apt-get", "remove", "-y", *packages], env=APT_ENV, dry_run=dry_run)


def dpkg_installed(packages: Iterable[str]) -> Set[str]:
    """Return the subset of ``packages`` that dpkg reports as installed.

    Matches exact package names, so e.g. "containerd" is not confused with
    "containerd.io".
    """

    wanted = list(dict.fromkeys(packages))
    if not wanted:
        return set()

    # Unknown names make dpkg-query exit 1 but it still prints the known ones.
    r = run_cmd(
        ["dpkg-query", "-W", "-f=${Package} ${Status}\n", *wanted],
        check=False,
    )
    installed: Set[str] = set()
    for line in (r.stdout or "").splitlines():
        parts = line.split()
        if len(parts) >= 4 and parts[-1] == "installed" and parts[-3] == "install":
            name = parts[0].split(":", 1)[0]
            if name in wanted:
                installed.add(name)
    return installed


def dpkg_architecture() -> str:
    r = run_cmd(["dpkg", "--print-architecture"])
    arch = (r.stdout or "").strip()
    if not arch:
        raise RuntimeError("dpkg --print-architecture returned nothing")
    return arch


class PackageManager(Protocol):
    def update(self) -> None:
        ...

    def install(self, packages: Sequence[str]) -> None:
        ...

    def remove(self, packages: Sequence[str]) -> None:
        ...

    def installed(self, packages: Iterable[str]) -> Set[str]:
        ...

    def is_installed(self, package: str) -> bool:
        ...

    def architecture(self) -> str:
        ...


class AptPackageManager:
    """apt/dpkg backed PackageManager. Queries always run; mutations honour dry_run."""

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def update(self) -> None:
        apt_update(dry_run=self.dry_run)

    def install(self, packages: Sequence[str]) -> None:
        apt_install(packages, dry_run=self.dry_run)

    def remove(self, packages: Sequence[str]) -> None:
        apt_remove(packages, dry_run=self.dry_run)

    def installed(self, packages: Iterable[str]) -> Set[str]:
        return dpkg_installed(packages)

    def is_installed(self, package: str) -> bool:
        return package in dpkg_installed([package])

    def architecture(self) -> str:
        return dpkg_architecture()
