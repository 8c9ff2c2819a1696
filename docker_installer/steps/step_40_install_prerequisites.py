from __future__ import annotations

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class InstallPrerequisitesStep:
    step_id = "40_install_prerequisites"
    title = "Prerequisite installation"
    fatal = True

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        wanted = ctx.cfg.prerequisite_packages
        if set(wanted) <= ctx.packages.installed(wanted) and ctx.repository.keyring_dir_present():
            ctx.reporter.ok("Prerequisites already installed")
            return True
        return False

    def run(self, ctx, state: Dict[str, Any]) -> None:
        ctx.reporter.info("Installing prerequisites...")
        wanted = ctx.cfg.prerequisite_packages
        missing = [p for p in wanted if p not in ctx.packages.installed(wanted)]
        if missing:
            ctx.packages.update()
            ctx.packages.install(missing)
        ctx.repository.ensure_keyring_dir()
        ctx.reporter.ok("Prerequisites installed")
