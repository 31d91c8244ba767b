"""
Scheduling and execution of custom steps.

- match_instructions: per-group instruction chains
- chain_space_factors / required_space: disk space estimation
- schedule_custom_steps: turn a phase's instructions into queued operations
- CustomOperation: runs one transform over one group
- RunContext / MasterFileCache: state shared across phases of a run
- PipelineRun: queue + context for a whole run
"""

from nocode_pipeline.scheduling.context import (
    MasterFileCache,
    RunContext,
    SpaceEstimate,
)
from nocode_pipeline.scheduling.matcher import match_instructions
from nocode_pipeline.scheduling.operation import CustomOperation, OperationStatus, step_code
from nocode_pipeline.scheduling.scheduler import (
    OperationQueue,
    PipelineRun,
    RunResult,
    schedule_custom_steps,
)
from nocode_pipeline.scheduling.space import chain_space_factors, required_space, space_factor

__all__ = [
    "CustomOperation",
    "MasterFileCache",
    "OperationQueue",
    "OperationStatus",
    "PipelineRun",
    "RunContext",
    "RunResult",
    "SpaceEstimate",
    "chain_space_factors",
    "match_instructions",
    "required_space",
    "schedule_custom_steps",
    "space_factor",
    "step_code",
]
