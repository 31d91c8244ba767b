"""
Custom operations.

A CustomOperation applies one transform to one frame group. Operations are
created by the scheduler and run later, strictly in queue order, by the
host's execution loop.

Execution records per-frame outcomes on the frame items and never fails
because of individual frames. The only operation-level failure is a master
step that finds no master files to work on.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from ..errors import OperationError
from ..instructions.tree import NoOperation, Transform
from ..models.frames import FrameGroup, FrameItem
from ..models.phases import Phase, master_combinations
from .context import RunContext
from .space import required_space

logger = structlog.get_logger(__name__)

STEP_CODE_PHASE = 1_000_000
STEP_CODE_SEQUENCE = 1_000


class OperationStatus(str, Enum):
    """Lifecycle of an operation."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


def step_code(phase: Phase, sequence: int) -> int:
    """Status code recorded on frames processed by an operation."""
    return int(phase) * STEP_CODE_PHASE + sequence * STEP_CODE_SEQUENCE


class CustomOperation:
    """One transform applied to one frame group during a phase.

    Usage:
        op = CustomOperation(group, transform, Phase.ON_CALIBRATION_END, 1,
                             context=context, group_index=0)
        status = op.run()
        print(op.status_message)  # "12 processed, 1 failed"
    """

    def __init__(
        self,
        group: FrameGroup,
        transform: Transform,
        phase: Phase,
        sequence: int,
        *,
        context: RunContext,
        group_index: int,
        space_factor: float = 1.0,
        is_master_step: bool = False,
    ):
        """Initialize operation.

        Args:
            group: Frame group to process
            transform: Transform to apply to each frame
            phase: Phase the operation was scheduled for
            sequence: Position in the group's chain (0 is the sentinel)
            context: Run context shared by all operations of the run
            group_index: Identity of the group for the master cache
            space_factor: Accounted output size factor
            is_master_step: Operate on master files instead of frames
        """
        self.group = group
        self.transform = transform
        self.phase = Phase(phase)
        self.sequence = sequence
        self.context = context
        self.group_index = group_index
        self.space_factor = space_factor
        self.is_master_step = is_master_step

        self.status = OperationStatus.PENDING
        self.status_message = ""
        self.has_warnings = False
        self.success_count = 0
        self.failure_count = 0

    @property
    def is_label(self) -> bool:
        """True for the sentinel that only labels a group's chain."""
        return isinstance(self.transform, NoOperation)

    @property
    def name(self) -> str:
        if self.is_label:
            return f"Custom {self.phase.step_name} step(s)"
        return f"  {self.phase.step_name} #{self.sequence}: {self.transform.process_id}"

    @property
    def processed_count(self) -> int:
        return self.success_count + self.failure_count

    @property
    def output_dir(self) -> Path:
        """Per-phase output directory; master steps skip the group folder."""
        base = Path(self.context.output_dir) / self.phase.step_name
        if self.is_master_step:
            return base
        return base / self.group.folder_name()

    def required_space(self) -> float:
        return required_space(self.group, self.space_factor, is_master_step=self.is_master_step)

    def env(self) -> dict[str, Any]:
        """Snapshot for host event reporting."""
        return {
            "name": self.name,
            "status": self.status.value,
            "status_message": self.status_message,
            "group": self.group,
        }

    def run(self) -> OperationStatus:
        """Execute the operation.

        Returns:
            Final status, DONE or FAILED

        Raises:
            OperationError: If the operation already ran
        """
        if self.status is not OperationStatus.PENDING:
            raise OperationError(f"Operation already ran: {self.name.strip()}")

        self.status = OperationStatus.RUNNING
        log = logger.bind(
            operation=self.name.strip(),
            group=self.group.name,
            group_index=self.group_index,
        )

        if self.is_master_step and not self._load_master_files():
            log.warning("master_files_missing")
            self.status_message = "No master files found"
            self.status = OperationStatus.FAILED
            return self.status

        active = self.group.active_frames()
        if self.is_label:
            noun = "master files" if self.is_master_step else "frames"
            self.status_message = f"{len(active)} {noun} queued"
        if not active or self.is_label:
            self.status = OperationStatus.DONE
            return self.status

        output_dir = self.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)

        for item in active:
            if self._process_frame(item, output_dir):
                self.success_count += 1
            else:
                self.failure_count += 1

        self.status_message = f"{self.success_count} processed, {self.failure_count} failed"
        self.has_warnings = self.failure_count > 0
        self.status = OperationStatus.DONE

        log.info(
            "operation_completed",
            succeeded=self.success_count,
            failed=self.failure_count,
        )
        return self.status

    def _load_master_files(self) -> bool:
        """Replace the group's frames with its current master files."""
        masters = self.context.masters
        paths = []
        for master_type, variant in master_combinations():
            path = masters.resolve(self.group_index, self.group, master_type, variant)
            if path:
                paths.append(path)

        self.group.replace_items(paths)
        return bool(paths)

    def _process_frame(self, item: FrameItem, output_dir: Path) -> bool:
        frame_io = self.context.frame_io
        output = output_dir / Path(item.current).name
        saved = False
        try:
            frame = frame_io.open(item.current)
            if frame is None:
                logger.warning("frame_open_failed", path=item.current)
            elif self.transform.execute(frame):
                frame_io.save(frame, str(output))
                saved = True
            else:
                logger.warning(
                    "transform_rejected_frame",
                    transform=self.transform.process_id,
                    path=item.current,
                )
        except Exception as e:
            logger.error(
                "frame_processing_failed",
                transform=self.transform.process_id,
                path=item.current,
                error=str(e),
            )

        if not (saved and output.exists()):
            item.processing_failed()
            return False

        item.processing_succeeded(step_code(self.phase, self.sequence), str(output))
        self._record_master(output)
        logger.debug("frame_processed", output=str(output))
        return True

    def _record_master(self, output: Path) -> None:
        """Cache the output if it replaces one of the group's master files."""
        for master_type, variant in master_combinations():
            existing = self.group.get_master_file_name(master_type, variant)
            if existing and Path(existing).stem == output.stem:
                self.context.masters.record(self.group_index, master_type, variant, str(output))
                return

    def __repr__(self) -> str:
        return (
            f"CustomOperation({self.name.strip()!r}, group={self.group.name!r}, "
            f"status={self.status.value})"
        )
