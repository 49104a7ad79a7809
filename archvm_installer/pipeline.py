from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .config import InstallConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    cfg: InstallConfig
    dry_run: bool = False


class Step(Protocol):
    """A single fallible step; raising stops the run."""

    step_id: str

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    completed_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None


def run_pipeline(
    *,
    ctx: InstallCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order until one raises.

    Nothing is skipped or retried and nothing already done is undone: the
    result names what completed and which step failed with which error.
    """

    completed: List[str] = []

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        try:
            state = step.run(ctx, state)
        except Exception as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            logger.debug("Step %s traceback", step.step_id, exc_info=True)
            state.setdefault("execution", {})["current_step"] = None
            return PipelineResult(state=state, completed_steps=completed, failed_step=step.step_id, error=e)
        completed.append(step.step_id)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, completed_steps=completed)
