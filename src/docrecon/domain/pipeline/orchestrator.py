"""Stage-at-a-time orchestrator for reconciliation runs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .phases import DEFAULT_PHASES
from .state import PipelineStage, PipelineState

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .context import PipelineContext
    from .phases import PipelinePhase

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationPipeline:
    """Run the ordered stages against a ``PipelineState``.

    ``advance`` executes exactly the stage a state names, so any state, fresh
    or taken from an earlier run, can be resumed with ``run``.
    """

    context: PipelineContext
    phases: Sequence[PipelinePhase] = field(default_factory=lambda: DEFAULT_PHASES)
    _by_stage: dict[PipelineStage, PipelinePhase] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_stage = {phase.stage: phase for phase in self.phases}
        missing = [stage for stage in PipelineStage if stage not in self._by_stage]
        if missing:
            raise ValueError(f"Pipeline is missing phases for: {', '.join(missing)}")

    async def advance(self, state: PipelineState) -> PipelineState:
        """Run the stage named by ``state.stage`` and move on to its successor."""

        if state.is_complete:
            return state

        phase = self._by_stage[state.stage]
        log.info("Running stage %s", state.stage)
        result = await phase.run(state, context=self.context)
        successor = state.stage.successor
        if successor is None:
            return result
        return replace(result, stage=successor)

    async def run(self, state: PipelineState | None = None) -> PipelineState:
        """Advance ``state`` (or a fresh one) until the Report stage has completed."""

        current = state if state is not None else PipelineState.start(clock=self.context.clock)
        while not current.is_complete:
            current = await self.advance(current)
        log.info(
            "Pipeline finished with %d document(s), %d conflict(s), %d error(s)",
            len(current.documents),
            len(current.conflicts),
            len(current.errors),
        )
        return current

    async def run_continuous(
        self,
        interval: float,
        stop: asyncio.Event,
        *,
        on_complete: Callable[[PipelineState], None] | None = None,
    ) -> int:
        """Rerun the whole pipeline every ``interval`` seconds until ``stop`` is set.

        ``stop`` is only checked between runs; a run in progress always
        finishes. A run that raises is logged and retried on the next tick.
        Returns the number of completed runs.
        """

        runs = 0
        while not stop.is_set():
            try:
                state = await self.run()
            except Exception:
                log.exception("Reconciliation run failed; retrying in %ss", interval)
            else:
                runs += 1
                if state.errors:
                    log.warning("Run %d recorded %d error(s)", runs, len(state.errors))
                if on_complete is not None:
                    on_complete(state)
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except TimeoutError:
                continue
        log.info("Daemon stopped after %d run(s)", runs)
        return runs
