from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

DEFAULT_PROGRAM_NAME = "install-docker"


def default_log_path(program: Optional[str] = None) -> str:
    """Return /tmp/<program>.log, derived from the running program's name.

    When streamed into the interpreter (``curl ... | python3 -``) argv[0] is
    ``-`` or empty, so the fixed default name is used instead.
    """

    name = os.path.basename(program if program is not None else (sys.argv[0] if sys.argv else ""))
    for suffix in (".py", ".sh"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    if not name or name in {"-", "__main__", "-c"}:
        name = DEFAULT_PROGRAM_NAME
    return f"/tmp/{name}.log"


@dataclass(frozen=True)
class InstallerConfig:
    log_path: str = field(default_factory=default_log_path)

    # Host compatibility
    distro_id: str = "ubuntu"
    min_version: str = "20.04"

    # Host files
    os_release_path: str = "/etc/os-release"
    cpuinfo_path: str = "/proc/cpuinfo"
    entropy_avail_path: str = "/proc/sys/kernel/random/entropy_avail"

    # Repository
    keyring_dir: str = "/etc/apt/keyrings"
    key_path: str = "/etc/apt/keyrings/docker.asc"
    sources_path: str = "/etc/apt/sources.list.d/docker.list"
    key_url: str = "https://download.docker.com/linux/ubuntu/gpg"
    repo_url: str = "https://download.docker.com/linux/ubuntu"
    repo_channel: str = "stable"

    # Packages
    prerequisite_packages: Tuple[str, ...] = ("ca-certificates", "curl")
    runtime_packages: Tuple[str, ...] = (
        "docker-ce",
        "docker-ce-cli",
        "containerd.io",
        "docker-buildx-plugin",
        "docker-compose-plugin",
    )
    conflicting_packages: Tuple[str, ...] = (
        "docker.io",
        "docker-doc",
        "docker-compose",
        "docker-compose-v2",
        "podman-docker",
        "containerd",
        "runc",
    )
    entropy_package: str = "haveged"

    # Services / groups
    runtime_service: str = "docker"
    entropy_service: str = "haveged"
    docker_group: str = "docker"

    # Virtualization types that warrant the entropy daemon without asking.
    known_hypervisors: Tuple[str, ...] = (
        "kvm",
        "qemu",
        "vmware",
        "virtualbox",
        "xen",
        "microsoft",
        "oracle",
    )

    # Regular accounts: min_uid <= uid < max_uid, login shell not excluded.
    min_uid: int = 1000
    max_uid: int = 65534
    excluded_shell_markers: Tuple[str, ...] = ("false", "nologin")

    color: bool = True
    dry_run: bool = False


_TUPLE_FIELDS = {f.name for f in dataclasses.fields(InstallerConfig) if isinstance(f.default, tuple)}


def _coerce(raw: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in dataclasses.fields(InstallerConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in _TUPLE_FIELDS:
            if not isinstance(value, (list, tuple)):
                raise ValueError(f"config.{key} must be a list of strings")
            value = tuple(str(v).strip() for v in value if str(v).strip())
        elif key in {"min_uid", "max_uid"}:
            value = int(value)
        elif key in {"color", "dry_run"}:
            value = bool(value)
        else:
            value = str(value)
        out[key] = value
    return out


def load_config(path: Optional[str] = None, **overrides: Any) -> InstallerConfig:
    """Build the run configuration.

    Values come from, in increasing priority: built-in defaults, the optional
    YAML file at ``path``, then keyword ``overrides`` (CLI flags). ``None``
    overrides are ignored.
    """

    raw: Dict[str, Any] = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("installer config must be YAML")

        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("PyYAML is required to read the installer config") from e

        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("installer config must contain a mapping/object")
        raw.update(data)

    raw.update({k: v for k, v in overrides.items() if v is not None})
    return InstallerConfig(**_coerce(raw))
