from __future__ import annotations

from dataclasses import dataclass

from .config import InstallerConfig
from .lib.accounts import AccountDatabase, PosixAccountDatabase
from .lib.apt_repo import AptRepository, Repository
from .lib.pkg import AptPackageManager, PackageManager
from .lib.probe import EnvironmentProbe, HostProbe
from .lib.runtime import ContainerRuntime, DockerCli
from .lib.services import ServiceManager, SystemdServiceManager
from .lib.status import StatusReporter
from .lib.terminal import Prompter


@dataclass(frozen=True)
class InstallCtx:
    """Everything a step may touch. Tests substitute fakes for the OS-facing parts."""

    cfg: InstallerConfig
    probe: EnvironmentProbe
    packages: PackageManager
    services: ServiceManager
    repository: Repository
    accounts: AccountDatabase
    runtime: ContainerRuntime
    prompter: Prompter
    reporter: StatusReporter

    @property
    def dry_run(self) -> bool:
        return self.cfg.dry_run


def build_context(cfg: InstallerConfig) -> InstallCtx:
    return InstallCtx(
        cfg=cfg,
        probe=HostProbe(cfg),
        packages=AptPackageManager(dry_run=cfg.dry_run),
        services=SystemdServiceManager(dry_run=cfg.dry_run),
        repository=AptRepository(
            keyring_dir=cfg.keyring_dir,
            key_path=cfg.key_path,
            key_url=cfg.key_url,
            sources_path=cfg.sources_path,
            repo_url=cfg.repo_url,
            channel=cfg.repo_channel,
            dry_run=cfg.dry_run,
        ),
        accounts=PosixAccountDatabase(
            min_uid=cfg.min_uid,
            max_uid=cfg.max_uid,
            excluded_shell_markers=cfg.excluded_shell_markers,
            dry_run=cfg.dry_run,
        ),
        runtime=DockerCli(),
        prompter=Prompter(),
        reporter=StatusReporter(color=cfg.color),
    )
