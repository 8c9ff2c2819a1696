from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError

logger = logging.getLogger(__name__)


class CheckPrivilegesStep:
    step_id = "10_check_privileges"
    title = "Privilege check"
    fatal = True

    def is_satisfied(self, ctx, state: Dict[str, Any]) -> bool:
        return False

    def run(self, ctx, state: Dict[str, Any]) -> None:
        if not ctx.probe.is_root():
            ctx.reporter.error("This installer must be run as root (use sudo)")
            raise FatalError("not running as root")
        logger.info("Running as root")
