from __future__ import annotations

import logging
from typing import Any, Dict

from ..decisions import classify_conflicting_packages
from ..pipeline import STATUS_WARNED

logger = logging.getLogger(__name__)


class RemoveConflictsStep:
    """Remove distro packages that clash with Docker's own (best-effort)."""

    step_id = "30_remove_conflicts"
    title = "Conflicting package removal"
    fatal = False

    def _conflicts(self, ctx) -> list[str]:
        deny = ctx.cfg.conflicting_packages
        found = classify_conflicting_packages(ctx.packages.installed(deny), deny)
        # Keep deny-list order for stable output.
        return [p for p in deny if p in found]

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        ctx.reporter.info("Checking for conflicting packages...")
        conflicts = self._conflicts(ctx)
        state.setdefault("execution", {}).setdefault("decisions", {})["conflicting_packages"] = conflicts
        if not conflicts:
            ctx.reporter.ok("No conflicting packages found")
            return True
        return False

    def run(self, ctx, state: Dict[str, Any]) -> str | None:
        conflicts = state["execution"]["decisions"]["conflicting_packages"]
        ctx.reporter.warn(f"Removing conflicting packages: {' '.join(conflicts)}")
        try:
            ctx.packages.remove(conflicts)
        except Exception as e:
            # The install step surfaces its own conflict if this mattered.
            logger.warning("Conflict removal failed: %s", e)
            ctx.reporter.warn("Some packages could not be removed, continuing...")
            state.setdefault("execution", {}).setdefault("warnings", []).append(
                {"step": self.step_id, "warning": str(e)}
            )
            return STATUS_WARNED
        ctx.reporter.ok("Conflicting packages removed")
        return None
