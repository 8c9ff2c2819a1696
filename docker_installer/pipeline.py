from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Sequence

from .errors import FatalError

if TYPE_CHECKING:
    from .context import InstallCtx

logger = logging.getLogger(__name__)

STATUS_RAN = "ran"
STATUS_ALREADY = "already"
STATUS_SKIPPED = "skipped"
STATUS_WARNED = "warned"


class Step(Protocol):
    """A single idempotent step.

    ``is_satisfied`` observes the host; when it holds, ``run`` is not called.
    ``run`` returns one of the STATUS_* values (None means STATUS_RAN).
    """

    step_id: str
    title: str
    fatal: bool

    def is_satisfied(self, ctx: "InstallCtx", state: Dict[str, Any]) -> bool:
        ...

    def run(self, ctx: "InstallCtx", state: Dict[str, Any]) -> Optional[str]:
        ...


@dataclass(frozen=True)
class StepOutcome:
    step_id: str
    status: str
    detail: str = ""


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    outcomes: List[StepOutcome]

    def by_status(self, status: str) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status == status]


def _warn(state: Dict[str, Any], step_id: str, message: str) -> None:
    state.setdefault("execution", {}).setdefault("warnings", []).append(
        {"step": step_id, "warning": message}
    )


def run_pipeline(
    *,
    ctx: "InstallCtx",
    state: Dict[str, Any],
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order.

    A failing fatal step raises FatalError and nothing after it runs. A
    failing non-fatal step is reported as a warning and the run continues.
    """

    outcomes: List[StepOutcome] = []

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id

        try:
            if step.is_satisfied(ctx, state):
                logger.info("Step %s already satisfied", step.step_id)
                outcomes.append(StepOutcome(step.step_id, STATUS_ALREADY))
                continue

            logger.info("Running step %s", step.step_id)
            status = step.run(ctx, state) or STATUS_RAN
            outcomes.append(StepOutcome(step.step_id, status))
        except FatalError:
            state["execution"]["failed_step"] = step.step_id
            raise
        except Exception as e:
            if step.fatal:
                state["execution"]["failed_step"] = step.step_id
                logger.exception("Step %s failed", step.step_id)
                ctx.reporter.error(f"{step.title} failed: {e}")
                raise FatalError(f"{step.title} failed: {e}") from e

            logger.warning("Step %s failed (continuing): %s", step.step_id, e)
            ctx.reporter.warn(f"{step.title} failed, continuing: {e}")
            _warn(state, step.step_id, str(e))
            outcomes.append(StepOutcome(step.step_id, STATUS_WARNED, str(e)))

    state.setdefault("execution", {})["current_step"] = None
    state["execution"]["outcomes"] = {o.step_id: o.status for o in outcomes}
    return PipelineResult(state=state, outcomes=outcomes)
