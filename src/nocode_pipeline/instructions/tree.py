"""
Instruction tree nodes and the transform interface.

Users author a tree of processing instructions. Containers group children
and carry an annotation whose attributes are inherited by everything below
them; leaves wrap a concrete transform.

Example:
    >>> root = InstructionContainer("step=onCalibrationEnd")
    >>> root.add(InstructionLeaf(IntegerResample(2), "filter=Ha"))
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .attributes import AttributeSet

if TYPE_CHECKING:
    from ..frames.fits import FrameData


@runtime_checkable
class Transform(Protocol):
    """An opaque processing step applied to one loaded frame.

    ``execute`` modifies the frame in place and returns True on success.
    """

    process_id: str

    def execute(self, frame: FrameData) -> bool: ...


@runtime_checkable
class SpaceFactorProvider(Protocol):
    """Transform capability: output size relative to input size."""

    def space_factor(self) -> float: ...


class NoOperation:
    """Sentinel transform that leaves frames untouched.

    Prepended to every non-empty per-group instruction chain, where it
    carries the phase label for the chain.
    """

    process_id = "NoOperation"

    def execute(self, frame: FrameData) -> bool:
        return True

    def __repr__(self) -> str:
        return "NoOperation()"


@dataclass
class InstructionLeaf:
    """A concrete transform plus an optional annotation."""

    transform: Transform
    annotation: str = ""


@dataclass
class InstructionContainer:
    """A branch of the instruction tree."""

    annotation: str = ""
    children: list[InstructionNode] = field(default_factory=list)

    def add(self, node: InstructionNode) -> InstructionContainer:
        """Append a child (fluent interface)."""
        self.children.append(node)
        return self

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[InstructionNode]:
        return iter(self.children)


InstructionNode = InstructionContainer | InstructionLeaf


@dataclass(frozen=True)
class ExtractedInstruction:
    """A leaf transform paired with its resolved attributes."""

    transform: Transform
    attributes: AttributeSet

    @property
    def process_id(self) -> str:
        return self.transform.process_id
