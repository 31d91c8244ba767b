"""
Frame groups and frame items.

A FrameGroup is a set of same-role input frames processed together through
a phase. Each FrameItem tracks its own processing status, which custom
operations update once per run.

Example:
    >>> group = FrameGroup(name="M42 Ha", keywords={"filter": "Ha"})
    >>> group.add_frame("/data/light_001.fits")
    >>> [item.current for item in group.active_frames()]
    ['/data/light_001.fits']
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .phases import AssociatedChannel, ImageType, MasterType, MasterVariant


class FrameStatus(str, Enum):
    """Per-phase processing status of a frame."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class FrameItem:
    """One physical input file and its processing state.

    Attributes:
        path: Original input file
        current: File later phases should read (last successful output)
        status: Processing status
        step_code: Code of the step that produced ``current``
    """

    path: str
    current: str = ""
    status: FrameStatus = FrameStatus.PENDING
    step_code: int | None = None

    def __post_init__(self) -> None:
        if not self.current:
            self.current = self.path

    @property
    def is_failed(self) -> bool:
        return self.status is FrameStatus.FAILED

    def processing_succeeded(self, step_code: int, output_path: str) -> None:
        """Record a successful step and move the frame to its output."""
        self.status = FrameStatus.SUCCEEDED
        self.step_code = step_code
        self.current = output_path

    def processing_failed(self) -> None:
        """Mark the frame failed; it drops out of later phases."""
        self.status = FrameStatus.FAILED


@dataclass
class FrameGroup:
    """A named, ordered collection of frames sharing an imaging role.

    Attributes:
        name: Group display name
        image_type: Imaging role (light, dark, bias, flat)
        associated_channel: Channel designation, COMBINED_RGB for recombined groups
        keywords: Grouping keywords (e.g. {"filter": "Ha"})
        is_cfa: Whether frames carry a Bayer/CFA mosaic
        items: Frame items, replaced wholesale by master steps
        master_files: Default master file paths by (type, variant)
        frame_size_bytes: Size of one frame, None to stat the first frame
    """

    name: str
    image_type: ImageType = ImageType.LIGHT
    associated_channel: AssociatedChannel = AssociatedChannel.NONE
    keywords: dict[str, str] = field(default_factory=dict)
    is_cfa: bool = False
    items: list[FrameItem] = field(default_factory=list)
    master_files: dict[tuple[MasterType, MasterVariant], str] = field(default_factory=dict)
    frame_size_bytes: int | None = None

    def add_frame(self, path: str | Path) -> FrameItem:
        item = FrameItem(str(path))
        self.items.append(item)
        return item

    def active_frames(self) -> list[FrameItem]:
        """Frames not already marked failed by an earlier phase."""
        return [item for item in self.items if not item.is_failed]

    def replace_items(self, paths: list[str]) -> None:
        """Replace the frame collection with fresh items for ``paths``."""
        self.items = [FrameItem(path) for path in paths]

    def folder_name(self) -> str:
        """Filesystem-safe folder name derived from the group name."""
        folder = re.sub(r"[^A-Za-z0-9._-]+", "_", self.name).strip("_")
        return folder or "group"

    def frame_size(self) -> int:
        """Size of one frame in bytes.

        Falls back to the size of the first existing frame on disk, or 0.
        """
        if self.frame_size_bytes is not None:
            return self.frame_size_bytes

        for item in self.items:
            path = Path(item.current)
            if path.is_file():
                return path.stat().st_size
        return 0

    def get_master_file_name(
        self,
        master_type: MasterType,
        variant: MasterVariant,
    ) -> str | None:
        """Default master file path for (type, variant), if any."""
        return self.master_files.get((master_type, variant))

    def set_master_file(
        self,
        master_type: MasterType,
        variant: MasterVariant,
        path: str | Path,
    ) -> None:
        self.master_files[(master_type, variant)] = str(path)

    @property
    def is_light(self) -> bool:
        return self.image_type is ImageType.LIGHT

    @property
    def is_combined_rgb(self) -> bool:
        return self.associated_channel is AssociatedChannel.COMBINED_RGB

    def __str__(self) -> str:
        return f"{self.name} ({self.image_type.value}, {len(self.items)} frames)"
