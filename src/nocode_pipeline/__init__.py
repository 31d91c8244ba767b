"""
No-Code Pipeline Builder

Extends a batch astronomical pre-processing pipeline with user-defined
custom steps. Instructions are authored as an annotated tree; at each
phase of the pipeline the matching instructions are scheduled against the
frame groups whose keywords they fit, and executed frame by frame.

Features:
- Attribute inheritance through annotated instruction trees
- Keyword matching of instructions against frame groups
- Space estimation and ordered operation scheduling per phase
- Per-frame status tracking and a run-wide master file cache

Example:
    >>> from nocode_pipeline import PipelineRun, Phase, load_instruction_tree
    >>>
    >>> run = PipelineRun(load_instruction_tree("steps.toml"), output_dir="out")
    >>> run.schedule(Phase.ON_CALIBRATION_END, groups)
    >>> result = run.execute()

For more information run:
    $ nocode-pipeline --help
"""

__version__ = "1.0.2"

from nocode_pipeline.errors import (
    InstructionTreeError,
    ManifestError,
    OperationError,
    PipelineBuilderError,
)
from nocode_pipeline.instructions import (
    AttributeSet,
    InstructionContainer,
    InstructionLeaf,
    extract_instructions,
    load_instruction_tree,
    parse_annotation,
)
from nocode_pipeline.models import FrameGroup, FrameItem, Phase
from nocode_pipeline.scheduling import (
    CustomOperation,
    MasterFileCache,
    OperationQueue,
    PipelineRun,
    RunContext,
    schedule_custom_steps,
)

__all__ = [
    "AttributeSet",
    "CustomOperation",
    "FrameGroup",
    "FrameItem",
    "InstructionContainer",
    "InstructionLeaf",
    "InstructionTreeError",
    "ManifestError",
    "MasterFileCache",
    "OperationError",
    "OperationQueue",
    "Phase",
    "PipelineBuilderError",
    "PipelineRun",
    "RunContext",
    "__version__",
    "extract_instructions",
    "load_instruction_tree",
    "parse_annotation",
    "schedule_custom_steps",
]
