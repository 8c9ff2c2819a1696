from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .command import run_cmd, which

logger = logging.getLogger(__name__)

CATEGORY_NONE = "none"
CATEGORY_HYPERVISOR = "hypervisor"
CATEGORY_UNCERTAIN = "uncertain"

# dmidecode product-name fragments -> virtualization type
_PRODUCT_NAME_MAP = (
    ("vmware", "vmware"),
    ("virtualbox", "virtualbox"),
    ("kvm", "kvm"),
    ("qemu", "kvm"),
)


@dataclass(frozen=True)
class VirtualizationSignal:
    category: str
    virt_type: str
    confidence: str
    source: str

    @property
    def is_virtual(self) -> bool:
        return self.category == CATEGORY_HYPERVISOR


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def _detect_virt_tool() -> Optional[str]:
    """Tier 1: systemd-detect-virt. Returns the reported type, or None if unavailable."""

    if not which("systemd-detect-virt"):
        return None
    # Exits non-zero when it prints "none".
    r = run_cmd(["systemd-detect-virt"], check=False)
    return (r.stdout or "").strip().lower() or "none"


def _cpuinfo_has_hypervisor(cpuinfo_path: str) -> bool:
    """Tier 2: the kernel exposes a 'hypervisor' CPU flag inside guests."""

    txt = _read_text(Path(cpuinfo_path))
    if not txt:
        return False
    for line in txt.splitlines():
        if line.lower().startswith("flags") and "hypervisor" in line.split(":", 1)[-1].split():
            return True
    return False


def _dmi_product_type(is_root: bool) -> Optional[str]:
    """Tier 3: match the DMI product name against known vendors (root only)."""

    if not is_root or not which("dmidecode"):
        return None
    r = run_cmd(["dmidecode", "-s", "system-product-name"], check=False)
    product_name = (r.stdout or "").strip().lower()
    for fragment, virt_type in _PRODUCT_NAME_MAP:
        if fragment in product_name:
            return virt_type
    return None


def classify(virt_type: str, known_hypervisors: Iterable[str]) -> str:
    if virt_type == "none":
        return CATEGORY_NONE
    if virt_type in set(known_hypervisors):
        return CATEGORY_HYPERVISOR
    return CATEGORY_UNCERTAIN


def detect_virtualization(
    *,
    cpuinfo_path: str,
    known_hypervisors: Iterable[str],
    is_root: bool,
) -> VirtualizationSignal:
    """Best-effort classification of the execution environment.

    Tiers are tried in order and the first positive signal wins. With no
    positive signal the result is "none" only if systemd-detect-virt actually
    ran and said so; otherwise we cannot tell and the result is "uncertain".
    """

    known = tuple(known_hypervisors)

    tool_type = _detect_virt_tool()
    if tool_type and tool_type != "none":
        signal = VirtualizationSignal(classify(tool_type, known), tool_type, "high", "systemd-detect-virt")
        logger.info("Detected virtualization: %s (confidence: high)", tool_type)
        return signal

    if _cpuinfo_has_hypervisor(cpuinfo_path):
        logger.info("Hypervisor flag detected in %s (confidence: medium)", cpuinfo_path)
        return VirtualizationSignal(CATEGORY_UNCERTAIN, "vm-detected", "medium", "cpuinfo")

    dmi_type = _dmi_product_type(is_root)
    if dmi_type:
        logger.info("DMI product name matches %s (confidence: medium)", dmi_type)
        return VirtualizationSignal(classify(dmi_type, known), dmi_type, "medium", "dmidecode")

    if tool_type == "none":
        logger.info("No virtualization detected")
        return VirtualizationSignal(CATEGORY_NONE, "none", "high", "systemd-detect-virt")

    logger.info("Virtualization detection inconclusive")
    return VirtualizationSignal(CATEGORY_UNCERTAIN, "unknown", "unknown", "none")
