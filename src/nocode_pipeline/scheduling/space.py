"""
Disk space estimation for custom steps.

Each instruction has a size factor: its output size relative to its input.
Within a group's chain only the first operation is budgeted, using the
factor of the whole chain; later operations overwrite in the same place and
are budgeted at zero.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..instructions.tree import SpaceFactorProvider, Transform
from ..models.frames import FrameGroup


def space_factor(transform: Transform) -> float:
    """Output size of ``transform`` relative to its input."""
    if isinstance(transform, SpaceFactorProvider):
        return float(transform.space_factor())
    return 1.0


def chain_space_factors(chain: Sequence[Transform]) -> list[float]:
    """Accounted factor per instruction of a group's chain.

    The first entry gets the product of all factors in the chain, the
    rest get zero.

    Example:
        >>> chain_space_factors([IntegerResample(2), Rescale(), Rescale()])
        [0.25, 0.0, 0.0]
    """
    if not chain:
        return []

    total = 1.0
    for transform in chain:
        total *= space_factor(transform)
    return [total] + [0.0] * (len(chain) - 1)


def required_space(group: FrameGroup, factor: float, *, is_master_step: bool = False) -> float:
    """Bytes an operation is expected to write.

    Frames that already failed are not reprocessed and are not counted.
    Master steps process one synthesized file rather than every frame.
    """
    # TODO: count the master files actually resolved instead of assuming one
    count = 1 if is_master_step else len(group.active_frames())
    return count * group.frame_size() * factor
