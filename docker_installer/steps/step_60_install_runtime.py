from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError

logger = logging.getLogger(__name__)


class InstallRuntimeStep:
    step_id = "60_install_runtime"
    title = "Docker installation"
    fatal = True

    def _service_up(self, ctx) -> bool:
        name = ctx.cfg.runtime_service
        return ctx.services.is_enabled(name) and ctx.services.is_active(name)

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        version = ctx.runtime.version()
        if version and self._service_up(ctx):
            ctx.reporter.ok(f"Docker is already installed ({version})")
            return True
        return False

    def run(self, ctx, state: Dict[str, Any]) -> None:
        if ctx.runtime.version() is None:
            ctx.reporter.info("Installing Docker packages...")
            ctx.packages.install(list(ctx.cfg.runtime_packages))
        else:
            ctx.reporter.info("Docker is installed but its service is not running; enabling it")

        name = ctx.cfg.runtime_service
        ctx.services.enable(name)
        ctx.services.start(name)

        version = ctx.runtime.version()
        if version is None and not ctx.dry_run:
            ctx.reporter.error("Docker installation failed: docker CLI not available")
            raise FatalError("docker CLI not available after installation")
        ctx.reporter.ok("Docker installation complete")
        if version:
            ctx.reporter.line(version)

        compose = ctx.runtime.compose_version()
        if compose:
            ctx.reporter.ok("Docker Compose plugin installed")
            ctx.reporter.line(compose)
        else:
            ctx.reporter.warn("Docker Compose plugin may not be properly installed")
