from __future__ import annotations

import logging
from typing import Any, Dict

from ..decisions import should_install_entropy_daemon
from ..pipeline import STATUS_SKIPPED

logger = logging.getLogger(__name__)


class EntropyDaemonStep:
    """Install haveged on virtualized hosts, where hardware entropy is scarce."""

    step_id = "70_entropy_daemon"
    title = "Entropy daemon setup"
    fatal = False

    def _wanted(self, ctx, state: Dict[str, Any]) -> bool:
        decisions = state.setdefault("execution", {}).setdefault("decisions", {})
        if "entropy_daemon" not in decisions:
            signal = ctx.probe.detect_virtualization()
            state["virtualization"] = signal
            decisions["entropy_daemon"] = should_install_entropy_daemon(signal, ctx.prompter, ctx.reporter)
        return bool(decisions["entropy_daemon"])

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        if not self._wanted(ctx, state):
            return False
        if ctx.packages.is_installed(ctx.cfg.entropy_package):
            ctx.reporter.ok(f"{ctx.cfg.entropy_package} is already installed")
            return True
        return False

    def run(self, ctx, state: Dict[str, Any]) -> str | None:
        if not self._wanted(ctx, state):
            return STATUS_SKIPPED

        pkg = ctx.cfg.entropy_package
        ctx.reporter.info(f"Installing {pkg} for improved entropy in virtualized environment...")
        ctx.packages.install([pkg])
        ctx.services.enable(ctx.cfg.entropy_service)
        ctx.services.start(ctx.cfg.entropy_service)
        ctx.reporter.ok(f"{pkg} installed and started")

        # Informational only; low entropy is not acted upon.
        level = ctx.probe.entropy_avail()
        ctx.reporter.info(f"Current entropy level: {level if level is not None else 'unknown'} bits")
        state["entropy_avail"] = level
        return None
