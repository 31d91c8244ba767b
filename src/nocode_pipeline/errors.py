"""
Exception types for the No-Code Pipeline Builder.

Only user-input problems raise. Frame and group failures during execution
are recorded as status, never raised.
"""

from __future__ import annotations


class PipelineBuilderError(Exception):
    """Base class for all pipeline builder errors."""


class InstructionTreeError(PipelineBuilderError):
    """An instruction tree file is malformed or names an unknown transform."""


class ManifestError(PipelineBuilderError):
    """A frame-group manifest is malformed."""


class OperationError(PipelineBuilderError):
    """An operation was used outside its lifecycle."""
