from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError

logger = logging.getLogger(__name__)


class VerifyInstallationStep:
    """Re-check the end state regardless of what earlier steps reported."""

    step_id = "90_verify"
    title = "Installation verification"
    fatal = True

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        return False

    def run(self, ctx, state: Dict[str, Any]) -> None:
        ctx.reporter.line()
        ctx.reporter.info("Installation verification:")

        version = ctx.runtime.version()
        if version:
            ctx.reporter.ok(f"Docker: {version}")
        elif ctx.dry_run:
            ctx.reporter.warn("Docker not present (dry run)")
        else:
            ctx.reporter.error("Docker installation failed")
            raise FatalError("docker is not installed after provisioning")

        compose = ctx.runtime.compose_version()
        if compose:
            ctx.reporter.ok(f"Docker Compose: {compose}")
        else:
            ctx.reporter.warn("Docker Compose plugin may not be working properly")

        state["verified"] = {"docker": version, "compose": compose}
