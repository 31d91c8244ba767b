"""
Instruction tree extraction.

Walks the instruction tree in pre-order, resolving inherited attributes
per branch, and keeps the leaves whose ``step`` attribute names the phase
being scheduled.
"""

from __future__ import annotations

import structlog

from ..models.phases import Phase
from .attributes import AttributeSet
from .tree import ExtractedInstruction, InstructionContainer, InstructionNode

logger = structlog.get_logger(__name__)


def extract_instructions(
    root: InstructionNode | None,
    phase: Phase | int,
) -> list[ExtractedInstruction]:
    """Extract the instructions tagged for ``phase``.

    Args:
        root: Root of the instruction tree (None if not configured)
        phase: Phase being scheduled

    Returns:
        Extracted instructions in tree pre-order. Empty if the tree is
        missing, so the caller can skip the phase.
    """
    phase = Phase(phase)

    if root is None:
        logger.warning(
            "instruction_tree_missing",
            phase=phase.step_name,
            action="skipping custom steps",
        )
        return []

    extracted: list[ExtractedInstruction] = []
    _walk(root, AttributeSet(), phase, extracted)

    logger.debug(
        "instructions_extracted",
        phase=phase.step_name,
        count=len(extracted),
    )
    return extracted


def _walk(
    node: InstructionNode,
    inherited: AttributeSet,
    phase: Phase,
    extracted: list[ExtractedInstruction],
) -> None:
    attributes = inherited.inherit(node.annotation)

    if isinstance(node, InstructionContainer):
        for child in node.children:
            _walk(child, attributes, phase, extracted)
        return

    if Phase.parse(attributes.step) is not phase:
        return

    extracted.append(ExtractedInstruction(node.transform, attributes))
