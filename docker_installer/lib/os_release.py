from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

from ..errors import NotSupportedOS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostProfile:
    distro_id: str
    version_id: str
    codename: str = ""
    pretty_name: str = ""


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse an os-release(5) file body into a dict.

    Values may be bare, single- or double-quoted; comments and blank lines
    are ignored.
    """

    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
            value = parts[0] if parts else ""
        except ValueError:
            value = value.strip("\"'")
        out[key.strip()] = value
    return out


def parse_version(version: str) -> Tuple[int, int]:
    """Split "MAJOR[.MINOR[...]]" into integers; a missing minor is 0."""

    parts = version.strip().split(".")
    if not parts[0]:
        raise ValueError(f"Invalid version: {version!r}")
    try:
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 and parts[1] != "" else 0
    except ValueError as e:
        raise ValueError(f"Invalid version: {version!r}") from e
    return major, minor


def version_greater_equal(version: str, minimum: str) -> bool:
    # Numeric, not lexicographic: major first, minor breaks ties.
    return parse_version(version) >= parse_version(minimum)


def read_host_profile(path: str) -> HostProfile:
    p = Path(path)
    if not p.exists():
        raise NotSupportedOS(f"{path} not found; cannot identify the operating system")

    fields = parse_os_release(p.read_text(encoding="utf-8", errors="ignore"))
    return HostProfile(
        distro_id=fields.get("ID", "").lower(),
        version_id=fields.get("VERSION_ID", ""),
        codename=fields.get("UBUNTU_CODENAME") or fields.get("VERSION_CODENAME", ""),
        pretty_name=fields.get("PRETTY_NAME", ""),
    )


def detect_host(*, os_release_path: str, distro_id: str, min_version: str) -> HostProfile:
    """Identify the host and gate on distribution and minimum version."""

    host = read_host_profile(os_release_path)
    if host.distro_id != distro_id:
        raise NotSupportedOS(
            f"This installer requires {distro_id.capitalize()}. Detected OS is {host.distro_id or 'unknown'}."
        )

    try:
        compatible = version_greater_equal(host.version_id, min_version)
    except ValueError as e:
        raise NotSupportedOS(f"Unrecognized {distro_id} version {host.version_id!r}") from e

    if not compatible:
        raise NotSupportedOS(
            f"{distro_id.capitalize()} {host.version_id} is not compatible (< {min_version})"
        )

    logger.info("Host: %s %s (%s)", host.distro_id, host.version_id, host.codename or "no codename")
    return host
