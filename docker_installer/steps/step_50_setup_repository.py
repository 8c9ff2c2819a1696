from __future__ import annotations

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class SetupRepositoryStep:
    step_id = "50_setup_repository"
    title = "Docker repository setup"
    fatal = True

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        ctx.reporter.info("Setting up Docker repository...")
        if ctx.repository.key_valid() and ctx.repository.sources_present():
            ctx.reporter.ok("Docker GPG key already present")
            ctx.reporter.ok("Docker repository already configured")
            return True
        return False

    def run(self, ctx, state: Dict[str, Any]) -> None:
        repo = ctx.repository

        if not repo.key_valid():
            ctx.reporter.info("Downloading Docker GPG key...")
            repo.install_key()
        else:
            ctx.reporter.ok("Docker GPG key already present")

        if not repo.sources_present():
            host = state.get("host")
            if host is None:
                host = ctx.probe.detect_host()
                state["host"] = host
            ctx.reporter.info("Adding Docker repository...")
            repo.write_sources(host, ctx.packages.architecture())
            ctx.packages.update()
        else:
            ctx.reporter.ok("Docker repository already configured")

        ctx.reporter.ok("Docker repository setup complete")
