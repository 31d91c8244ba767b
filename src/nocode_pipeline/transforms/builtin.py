"""
Builtin transforms.

Only the pieces the engine itself reasons about live here: the no-op
sentinel and integer resampling, whose output size the space estimator
needs to know. Real image processing is supplied by registered plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..instructions.tree import NoOperation

if TYPE_CHECKING:
    from ..frames.fits import FrameData


class IntegerResample:
    """Downsample by an integer factor, averaging each N x N block.

    Follows the host convention where a negative zoom factor means
    downsampling; -2 and 2 both halve each axis.
    """

    process_id = "IntegerResample"

    def __init__(self, zoom_factor: int = 2):
        zoom_factor = int(zoom_factor)
        if zoom_factor == 0:
            raise ValueError("zoom_factor must be non-zero")
        self.zoom_factor = zoom_factor

    @property
    def block_size(self) -> int:
        return abs(self.zoom_factor)

    def space_factor(self) -> float:
        """Downsampling by N shrinks storage by N squared."""
        return 1 / self.zoom_factor / self.zoom_factor

    def execute(self, frame: FrameData) -> bool:
        n = self.block_size
        data = frame.data
        height, width = data.shape[-2:]
        h, w = height // n, width // n
        if h == 0 or w == 0:
            return False

        cropped = data[..., : h * n, : w * n]
        blocks = cropped.reshape(*data.shape[:-2], h, n, w, n)
        frame.data = blocks.mean(axis=(-3, -1)).astype(np.float32)
        frame.header["HISTORY"] = f"IntegerResample zoom={self.zoom_factor}"
        return True

    def __repr__(self) -> str:
        return f"IntegerResample(zoom_factor={self.zoom_factor})"


class Rescale:
    """Linearly rescale pixel values to the [0, 1] range."""

    process_id = "Rescale"

    def execute(self, frame: FrameData) -> bool:
        data = np.asarray(frame.data, dtype=np.float32)
        low, high = float(np.nanmin(data)), float(np.nanmax(data))
        if high > low:
            data = (data - low) / (high - low)
        else:
            data = np.zeros_like(data)
        frame.data = data
        return True

    def __repr__(self) -> str:
        return "Rescale()"


BUILTIN_TRANSFORMS: dict[str, type] = {
    NoOperation.process_id: NoOperation,
    IntegerResample.process_id: IntegerResample,
    Rescale.process_id: Rescale,
}
