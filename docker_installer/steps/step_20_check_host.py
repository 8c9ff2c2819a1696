from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import NotSupportedOS

logger = logging.getLogger(__name__)


class CheckHostStep:
    step_id = "20_check_host"
    title = "Host compatibility check"
    fatal = True

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        return False

    def run(self, ctx, state: Dict[str, Any]) -> None:
        try:
            host = ctx.probe.detect_host()
        except NotSupportedOS as e:
            ctx.reporter.error(str(e))
            raise

        state["host"] = host
        ctx.reporter.ok(
            f"{host.distro_id.capitalize()} {host.version_id} is compatible (>= {ctx.cfg.min_version})"
        )
