"""
Run-scoped state shared by scheduling and execution.

A RunContext is created when a pipeline run starts and dropped when it
ends. It owns the master file cache, which later phases consult before
asking a group for its default masters, and the space estimates that
scheduling accumulates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ..frames.fits import FitsFrameIO, FrameIO
from ..models.frames import FrameGroup
from ..models.phases import MasterType, MasterVariant, master_key

logger = structlog.get_logger(__name__)

CUSTOM_OPERATIONS_LABEL = "Custom Operations"


@dataclass
class SpaceEstimate:
    """Projected disk usage of one operation category, in bytes."""

    label: str
    size: float = 0.0

    def add(self, size: float) -> None:
        self.size += size


class MasterFileCache:
    """Master files produced by custom steps, keyed by group index.

    Entries are never removed during a run.
    """

    def __init__(self) -> None:
        self._entries: dict[int, dict[str, str]] = {}

    def record(
        self,
        group_index: int,
        master_type: MasterType,
        variant: MasterVariant,
        path: str,
    ) -> None:
        key = master_key(master_type, variant)
        self._entries.setdefault(group_index, {})[key] = path
        logger.debug("master_cached", group_index=group_index, key=key, path=path)

    def lookup(
        self,
        group_index: int,
        master_type: MasterType,
        variant: MasterVariant,
    ) -> str | None:
        return self._entries.get(group_index, {}).get(master_key(master_type, variant))

    def resolve(
        self,
        group_index: int,
        group: FrameGroup,
        master_type: MasterType,
        variant: MasterVariant,
    ) -> str | None:
        """Cached master if present, otherwise the group's default."""
        cached = self.lookup(group_index, master_type, variant)
        if cached:
            return cached
        return group.get_master_file_name(master_type, variant)

    def entries(self, group_index: int) -> dict[str, str]:
        return dict(self._entries.get(group_index, {}))

    def __contains__(self, group_index: object) -> bool:
        return group_index in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class RunContext:
    """State for one pipeline run.

    Attributes:
        output_dir: Root directory for custom step outputs
        frame_io: Loads and persists frames
        masters: Master file cache
        space: Space estimates by category name
    """

    output_dir: Path = Path("output")
    frame_io: FrameIO = field(default_factory=FitsFrameIO)
    masters: MasterFileCache = field(default_factory=MasterFileCache)
    space: dict[str, SpaceEstimate] = field(default_factory=dict)

    def space_estimate(self, category: str, label: str | None = None) -> SpaceEstimate:
        """Get the estimate for ``category``, creating it on first use."""
        if category not in self.space:
            self.space[category] = SpaceEstimate(label or category)
        return self.space[category]
