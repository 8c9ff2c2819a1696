"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

import pytest

from docker_installer.config import InstallerConfig
from docker_installer.context import InstallCtx
from docker_installer.lib.accounts import Account
from docker_installer.lib.os_release import HostProfile
from docker_installer.lib.status import StatusReporter
from docker_installer.lib.virt import VirtualizationSignal
from docker_installer.logging_utils import reset_logging


class FakePackages:
    def __init__(self, installed: Iterable[str] = (), *, fail_remove: bool = False) -> None:
        self._installed: Set[str] = set(installed)
        self.fail_remove = fail_remove
        self.calls: List[tuple] = []

    def update(self) -> None:
        self.calls.append(("update",))

    def install(self, packages: Sequence[str]) -> None:
        self.calls.append(("install", tuple(packages)))
        self._installed.update(packages)

    def remove(self, packages: Sequence[str]) -> None:
        self.calls.append(("remove", tuple(packages)))
        if self.fail_remove:
            raise RuntimeError("E: Unable to locate package")
        self._installed.difference_update(packages)

    def installed(self, packages: Iterable[str]) -> Set[str]:
        return self._installed & set(packages)

    def is_installed(self, package: str) -> bool:
        return package in self._installed

    def architecture(self) -> str:
        return "amd64"


class FakeServices:
    def __init__(self, enabled: Iterable[str] = (), active: Iterable[str] = ()) -> None:
        self.enabled = set(enabled)
        self.active = set(active)
        self.calls: List[tuple] = []

    def enable(self, name: str) -> None:
        self.calls.append(("enable", name))
        self.enabled.add(name)

    def start(self, name: str) -> None:
        self.calls.append(("start", name))
        self.active.add(name)

    def is_enabled(self, name: str) -> bool:
        return name in self.enabled

    def is_active(self, name: str) -> bool:
        return name in self.active


class FakeRepository:
    def __init__(self, *, key: bool = False, sources: bool = False, keyring_dir: bool = False) -> None:
        self.key = key
        self.sources = sources
        self.keyring_dir = keyring_dir
        self.calls: List[tuple] = []

    def keyring_dir_present(self) -> bool:
        return self.keyring_dir

    def ensure_keyring_dir(self) -> bool:
        if self.keyring_dir:
            return False
        self.calls.append(("mkdir",))
        self.keyring_dir = True
        return True

    def key_valid(self) -> bool:
        return self.key

    def install_key(self) -> None:
        self.calls.append(("install_key",))
        self.key = True

    def sources_present(self) -> bool:
        return self.sources

    def write_sources(self, host: HostProfile, arch: str) -> None:
        self.calls.append(("write_sources", host.codename, arch))
        self.sources = True


class FakeAccounts:
    def __init__(self, accounts: Sequence[Account] = (), members: Iterable[str] = (), *, fail_for: Iterable[str] = ()) -> None:
        self.accounts = list(accounts)
        self.members = set(members)
        self.fail_for = set(fail_for)
        self.calls: List[tuple] = []
        self.list_calls = 0

    def list_accounts(self) -> List[Account]:
        self.list_calls += 1
        return list(self.accounts)

    def user_exists(self, name: str) -> bool:
        return any(a.name == name for a in self.accounts)

    def in_group(self, name: str, group: str) -> bool:
        return name in self.members

    def add_to_group(self, name: str, group: str) -> None:
        self.calls.append(("add_to_group", name, group))
        if name in self.fail_for:
            raise RuntimeError(f"usermod: user '{name}' failed")
        self.members.add(name)


class FakeRuntime:
    """Reports docker as present once its packages are installed in ``packages``."""

    def __init__(self, packages: FakePackages, *, compose: bool = True) -> None:
        self.packages = packages
        self.compose = compose

    def version(self) -> Optional[str]:
        if self.packages.is_installed("docker-ce"):
            return "Docker version 27.3.1, build ce12230"
        return None

    def compose_version(self) -> Optional[str]:
        if self.compose and self.packages.is_installed("docker-compose-plugin"):
            return "Docker Compose version v2.29.7"
        return None


class FakeProbe:
    def __init__(
        self,
        *,
        root: bool = True,
        host: Optional[HostProfile] = None,
        error: Optional[Exception] = None,
        signal: Optional[VirtualizationSignal] = None,
        entropy: Optional[int] = 256,
    ) -> None:
        self.root = root
        self.host = host or HostProfile("ubuntu", "24.04", "noble", "Ubuntu 24.04.1 LTS")
        self.error = error
        self.signal = signal or VirtualizationSignal("none", "none", "high", "systemd-detect-virt")
        self.entropy = entropy
        self.virt_calls = 0

    def is_root(self) -> bool:
        return self.root

    def detect_host(self) -> HostProfile:
        if self.error is not None:
            raise self.error
        return self.host

    def detect_virtualization(self) -> VirtualizationSignal:
        self.virt_calls += 1
        return self.signal

    def entropy_avail(self) -> Optional[int]:
        return self.entropy


class ScriptedPrompter:
    def __init__(self, lines: Sequence[str] = (), choices: Sequence[str] = (), *, channel: bool = True) -> None:
        self.lines = list(lines)
        self.choices = list(choices)
        self.channel = channel
        self.prompts: List[str] = []
        self.closed = False

    def has_channel(self) -> bool:
        return self.channel

    def read_line(self, prompt: str, default: str = "") -> str:
        self.prompts.append(prompt)
        if not self.channel or not self.lines:
            return default
        return self.lines.pop(0)

    def read_choice(self, prompt: str, default: str = "") -> str:
        self.prompts.append(prompt)
        if not self.channel or not self.choices:
            return default
        return self.choices.pop(0)

    def close(self) -> None:
        self.closed = True


@dataclass
class Host:
    """A fake machine bundling every OS-facing interface."""

    packages: FakePackages = field(default_factory=FakePackages)
    services: FakeServices = field(default_factory=FakeServices)
    repository: FakeRepository = field(default_factory=FakeRepository)
    accounts: FakeAccounts = field(default_factory=FakeAccounts)
    probe: FakeProbe = field(default_factory=FakeProbe)
    prompter: ScriptedPrompter = field(default_factory=ScriptedPrompter)
    compose: bool = True
    out: io.StringIO = field(default_factory=io.StringIO)
    err: io.StringIO = field(default_factory=io.StringIO)

    def ctx(self, cfg: InstallerConfig) -> InstallCtx:
        return InstallCtx(
            cfg=cfg,
            probe=self.probe,
            packages=self.packages,
            services=self.services,
            repository=self.repository,
            accounts=self.accounts,
            runtime=FakeRuntime(self.packages, compose=self.compose),
            prompter=self.prompter,
            reporter=StatusReporter(color=False, out=self.out, err=self.err),
        )

    def mutations(self) -> List[tuple]:
        mutating = {"update", "install", "remove", "enable", "start", "mkdir", "install_key", "write_sources", "add_to_group"}
        calls = self.packages.calls + self.services.calls + self.repository.calls + self.accounts.calls
        return [c for c in calls if c[0] in mutating]


ALL_PACKAGES = (
    "ca-certificates",
    "curl",
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
)


@pytest.fixture
def cfg(tmp_path) -> InstallerConfig:
    return InstallerConfig(log_path=str(tmp_path / "install-docker.log"), color=False)


@pytest.fixture
def fresh_host() -> Host:
    """Supported Ubuntu with nothing installed and two regular users."""

    return Host(
        accounts=FakeAccounts([Account("alice", 1000, "/bin/bash"), Account("bob", 1001, "/bin/zsh")]),
    )


@pytest.fixture
def provisioned_host() -> Host:
    """Supported Ubuntu where everything is already in place."""

    return Host(
        packages=FakePackages(ALL_PACKAGES),
        services=FakeServices(enabled={"docker"}, active={"docker"}),
        repository=FakeRepository(key=True, sources=True, keyring_dir=True),
        accounts=FakeAccounts([Account("alice", 1000, "/bin/bash")], members={"alice"}),
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()
