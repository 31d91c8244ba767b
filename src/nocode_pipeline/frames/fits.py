"""
FITS frame I/O.

Custom operations never touch files directly: they load frames, hand them
to a transform, and persist the result through a FrameIO. FitsFrameIO is
the default implementation, backed by astropy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import numpy as np
import structlog
from astropy.io import fits

logger = structlog.get_logger(__name__)


@dataclass
class FrameData:
    """A loaded frame: pixel data plus header."""

    data: np.ndarray
    header: fits.Header = field(default_factory=fits.Header)
    path: str = ""


class FrameIO(Protocol):
    """Loads and persists frames for custom operations."""

    def open(self, path: str) -> FrameData | None:
        """Load a frame, or return None if it cannot be read."""
        ...

    def save(self, frame: FrameData, path: str) -> None:
        """Write a frame, overwriting any existing file."""
        ...


class FitsFrameIO:
    """FrameIO reading and writing the primary HDU of FITS files."""

    def open(self, path: str) -> FrameData | None:
        try:
            with fits.open(path) as hdul:
                hdu = hdul[0]
                if hdu.data is None:
                    logger.warning("fits_no_data", path=path)
                    return None
                return FrameData(
                    data=np.array(hdu.data),
                    header=hdu.header.copy(),
                    path=path,
                )
        # Truncated files raise TypeError when the data buffer is read
        except (OSError, ValueError, TypeError) as e:
            logger.warning("fits_open_failed", path=path, error=str(e))
            return None

    def save(self, frame: FrameData, path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        hdu = fits.PrimaryHDU(data=frame.data, header=frame.header)
        hdu.writeto(path, overwrite=True)
        logger.debug("fits_saved", path=path, shape=frame.data.shape)
