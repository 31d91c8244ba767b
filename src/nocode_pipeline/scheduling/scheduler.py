"""
Custom step scheduling.

The pipeline driver calls ``schedule_custom_steps`` once per phase with the
groups active in that phase. Matching instructions become CustomOperations
appended to the run's queue; nothing runs until the queue is drained.

Example:
    >>> run = PipelineRun(root=load_instruction_tree("steps.toml"))
    >>> run.schedule(Phase.ON_CALIBRATION_END, groups)
    >>> run.schedule(Phase.ON_POST_PROCESS_END, groups)
    >>> result = run.execute()
    >>> print(result.failure_count)
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ..instructions.extractor import extract_instructions
from ..instructions.tree import InstructionNode
from ..models.frames import FrameGroup
from ..models.phases import Phase
from ..utils.logging import log_context
from .context import CUSTOM_OPERATIONS_LABEL, RunContext
from .matcher import match_instructions
from .operation import CustomOperation, OperationStatus
from .space import chain_space_factors

logger = structlog.get_logger(__name__)

CUSTOM_OPERATIONS_CATEGORY = "customOperation"


class OperationQueue:
    """Ordered operations awaiting execution."""

    def __init__(self) -> None:
        self._operations: list[CustomOperation] = []

    def add_operation(self, operation: CustomOperation) -> None:
        self._operations.append(operation)

    def pending(self) -> list[CustomOperation]:
        return [op for op in self._operations if op.status is OperationStatus.PENDING]

    def run_all(self) -> list[CustomOperation]:
        """Run pending operations in enqueue order, each to completion.

        Returns:
            The operations that ran
        """
        ran = []
        for operation in self.pending():
            operation.run()
            ran.append(operation)
        return ran

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[CustomOperation]:
        return iter(self._operations)

    def __getitem__(self, index: int) -> CustomOperation:
        return self._operations[index]


def schedule_custom_steps(
    groups: Sequence[FrameGroup],
    phase: Phase | int,
    queue: OperationQueue,
    context: RunContext,
    *,
    root: InstructionNode | None,
    is_master_step: bool = False,
) -> list[CustomOperation]:
    """Schedule the custom steps of ``phase`` for ``groups``.

    Operations are appended group by group, each group's chain in order.
    The "Custom Operations" space estimate grows by each operation's
    required space before it is queued.

    Args:
        groups: Frame groups active in this phase; a group's index is its
            identity in the master file cache
        phase: Phase being scheduled
        queue: Queue to append to
        context: Run context
        root: Instruction tree root (None skips the phase)
        is_master_step: Operate on master files instead of frames

    Returns:
        Operations scheduled by this call
    """
    phase = Phase(phase)
    instructions = extract_instructions(root, phase)
    if not instructions:
        return []

    chains = match_instructions(instructions, groups)
    estimate = context.space_estimate(CUSTOM_OPERATIONS_CATEGORY, CUSTOM_OPERATIONS_LABEL)

    scheduled = []
    for index, (group, chain) in enumerate(zip(groups, chains)):
        for sequence, (transform, factor) in enumerate(zip(chain, chain_space_factors(chain))):
            operation = CustomOperation(
                group,
                transform,
                phase,
                sequence,
                context=context,
                group_index=index,
                space_factor=factor,
                is_master_step=is_master_step,
            )
            estimate.add(operation.required_space())
            queue.add_operation(operation)
            scheduled.append(operation)

    logger.info(
        "custom_steps_scheduled",
        phase=phase.step_name,
        groups=len(groups),
        operations=len(scheduled),
        is_master_step=is_master_step,
    )
    return scheduled


@dataclass
class RunResult:
    """Outcome of draining the operation queue."""

    operations: list[CustomOperation] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def done_count(self) -> int:
        return sum(1 for op in self.operations if op.status is OperationStatus.DONE)

    @property
    def failure_count(self) -> int:
        return sum(1 for op in self.operations if op.status is OperationStatus.FAILED)

    @property
    def frames_processed(self) -> int:
        return sum(op.success_count for op in self.operations)

    @property
    def frames_failed(self) -> int:
        return sum(op.failure_count for op in self.operations)


class PipelineRun:
    """One pipeline run: instruction tree, operation queue and run context.

    Usage:
        run = PipelineRun(root, output_dir=Path("out"))
        for phase in Phase:
            run.schedule(phase, groups)
        result = run.execute()
    """

    def __init__(
        self,
        root: InstructionNode | None,
        *,
        output_dir: Path | str = "output",
        context: RunContext | None = None,
    ):
        self.root = root
        self.context = context or RunContext(output_dir=Path(output_dir))
        self.queue = OperationQueue()
        self.run_id = uuid.uuid4().hex[:12]

    def schedule(
        self,
        phase: Phase | int,
        groups: Sequence[FrameGroup],
        *,
        is_master_step: bool | None = None,
    ) -> list[CustomOperation]:
        """Schedule a phase; master mode defaults to the phase's own kind."""
        phase = Phase(phase)
        if is_master_step is None:
            is_master_step = phase.is_master_step
        with log_context(run_id=self.run_id, phase=phase.step_name):
            return schedule_custom_steps(
                groups,
                phase,
                self.queue,
                self.context,
                root=self.root,
                is_master_step=is_master_step,
            )

    def execute(self) -> RunResult:
        """Drain the queue in order; events carry the run id."""
        with log_context(run_id=self.run_id):
            return self._execute()

    def _execute(self) -> RunResult:
        start_time = time.monotonic()
        logger.info("run_started", operations=len(self.queue.pending()))

        result = RunResult(operations=self.queue.run_all())
        result.elapsed_seconds = time.monotonic() - start_time

        logger.info(
            "run_completed",
            done=result.done_count,
            failed=result.failure_count,
            frames_processed=result.frames_processed,
            frames_failed=result.frames_failed,
            elapsed_seconds=round(result.elapsed_seconds, 2),
        )
        return result
