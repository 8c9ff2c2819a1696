from __future__ import annotations

import logging
from typing import Iterable, Set

from .lib.status import StatusReporter
from .lib.terminal import Prompter
from .lib.virt import CATEGORY_HYPERVISOR, CATEGORY_NONE, VirtualizationSignal

logger = logging.getLogger(__name__)

VM_QUESTION = "Are you running in a virtual machine or VPS? (y/n): "


def should_install_entropy_daemon(
    signal: VirtualizationSignal,
    prompter: Prompter,
    reporter: StatusReporter,
) -> bool:
    """Policy: only virtualized hosts get the entropy daemon.

    "none" and known hypervisors are decided without asking. Anything
    uncertain is put to the operator; no answer or an invalid one means
    bare metal.
    """

    if signal.category == CATEGORY_NONE:
        reporter.info("Running on bare metal - haveged not needed")
        return False

    if signal.category == CATEGORY_HYPERVISOR:
        reporter.info(f"Detected virtualization ({signal.virt_type}) - haveged recommended for entropy")
        return True

    reporter.warn("Unable to reliably detect virtualization environment")
    answer = prompter.read_choice(VM_QUESTION, "n").strip()
    logger.info("Virtualization prompt answer: %r", answer)

    if answer in {"y", "Y"}:
        reporter.info("User confirmed virtualization - will install haveged")
        return True
    if answer in {"n", "N"}:
        reporter.info("User confirmed bare metal - skipping haveged")
        return False
    reporter.info("No response or invalid input - defaulting to bare metal (no haveged)")
    return False


def classify_conflicting_packages(installed: Iterable[str], deny_list: Iterable[str]) -> Set[str]:
    return set(installed) & set(deny_list)
