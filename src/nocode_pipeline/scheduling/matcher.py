"""
Group matching.

Decides which extracted instructions apply to which frame groups. Every
attribute other than ``step`` is a grouping keyword constraint: a group is
excluded only when it declares the keyword with a different value.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from ..instructions.tree import ExtractedInstruction, NoOperation, Transform
from ..models.frames import FrameGroup

logger = structlog.get_logger(__name__)


def is_eligible(group: FrameGroup) -> bool:
    """Only light groups that are not RGB recombinations take custom steps."""
    return group.is_light and not group.is_combined_rgb


def applies_to(instruction: ExtractedInstruction, group: FrameGroup) -> bool:
    """True unless the group declares a constrained keyword with another value.

    Keywords the group does not declare do not exclude the instruction.
    Keyword names match case-insensitively; values are compared as
    case-sensitive strings.
    """
    keywords = {str(k).lower(): str(v) for k, v in group.keywords.items()}
    for key, value in instruction.attributes.constraints().items():
        if key in keywords and keywords[key] != value:
            return False
    return True


def match_group(
    instructions: Sequence[ExtractedInstruction],
    group: FrameGroup,
) -> list[Transform]:
    """Ordered transforms for one group, prefixed with a NoOperation sentinel.

    Returns an empty list if nothing applies.
    """
    if not is_eligible(group):
        return []

    chain: list[Transform] = [i.transform for i in instructions if applies_to(i, group)]
    if chain:
        chain.insert(0, NoOperation())
    return chain


def match_instructions(
    instructions: Sequence[ExtractedInstruction],
    groups: Sequence[FrameGroup],
) -> list[list[Transform]]:
    """Per-group transform chains, in the same order as ``groups``."""
    chains = [match_group(instructions, group) for group in groups]

    logger.debug(
        "instructions_matched",
        instructions=len(instructions),
        groups=len(groups),
        matched=[len(chain) for chain in chains],
    )
    return chains
