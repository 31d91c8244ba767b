"""
Test factories for frame groups, frames and instruction trees.

Example:
    >>> from tests.fixtures import GroupFactory
    >>>
    >>> group = GroupFactory.create(keywords={"filter": "Ha"}, frame_count=3)
    >>> tree = TreeFactory.leaf("step=onCalibrationEnd")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from astropy.io import fits

from nocode_pipeline.frames.fits import FrameData
from nocode_pipeline.instructions.tree import InstructionContainer, InstructionLeaf
from nocode_pipeline.models.frames import FrameGroup
from nocode_pipeline.models.phases import ImageType


class RecordingTransform:
    """Transform that records the frames it sees and can be told to fail."""

    def __init__(self, process_id: str = "Recording", *, succeed: bool = True, raises: bool = False):
        self.process_id = process_id
        self.succeed = succeed
        self.raises = raises
        self.seen: list[str] = []

    def execute(self, frame: FrameData) -> bool:
        self.seen.append(frame.path)
        if self.raises:
            raise RuntimeError("transform exploded")
        frame.data = frame.data + 1
        return self.succeed

    def __repr__(self) -> str:
        return f"RecordingTransform({self.process_id!r})"


class MemoryFrameIO:
    """In-memory FrameIO: frames live in a dict, saves touch real files.

    Saving writes an empty marker file so that output existence checks
    behave like they do on disk. Paths in ``broken`` raise on open.
    """

    def __init__(
        self,
        unreadable: set[str] | None = None,
        fail_save: bool = False,
        broken: set[str] | None = None,
    ):
        self.unreadable = unreadable or set()
        self.broken = broken or set()
        self.fail_save = fail_save
        self.saved: dict[str, FrameData] = {}

    def open(self, path: str) -> FrameData | None:
        if path in self.broken:
            raise RuntimeError(f"reader crashed on {path}")
        if path in self.unreadable:
            return None
        if path in self.saved:
            stored = self.saved[path]
            return FrameData(stored.data.copy(), stored.header.copy(), path)
        return FrameData(np.zeros((4, 4), dtype=np.float32), fits.Header(), path)

    def save(self, frame: FrameData, path: str) -> None:
        if self.fail_save:
            raise OSError("disk full")
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Path(path).touch()
        self.saved[path] = FrameData(frame.data.copy(), frame.header.copy(), path)


class GroupFactory:
    """Factory for FrameGroup instances with sensible defaults."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        cls._counter = 0

    @classmethod
    def create(
        cls,
        *,
        frame_count: int = 2,
        frame_dir: str = "/data/lights",
        **overrides,
    ) -> FrameGroup:
        """Create a light group with ``frame_count`` frames."""
        cls._counter += 1
        defaults = {
            "name": f"group_{cls._counter}",
            "image_type": ImageType.LIGHT,
            "frame_size_bytes": 1000,
        }
        group = FrameGroup(**{**defaults, **overrides})
        for i in range(frame_count):
            group.add_frame(f"{frame_dir}/{group.name}_{i:03d}.fits")
        return group


class TreeFactory:
    """Helpers for building instruction trees."""

    @staticmethod
    def leaf(annotation: str = "", transform=None) -> InstructionLeaf:
        return InstructionLeaf(transform or RecordingTransform(), annotation)

    @staticmethod
    def container(annotation: str = "", *children) -> InstructionContainer:
        return InstructionContainer(annotation, list(children))


def write_fits(path: Path, shape: tuple[int, ...] = (8, 8), value: float = 1.0) -> Path:
    """Write a small FITS file filled with ``value``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = np.full(shape, value, dtype=np.float32)
    fits.PrimaryHDU(data=data).writeto(path, overwrite=True)
    return path
