"""
Frame I/O and frame group manifests.

- FrameData / FrameIO: loaded frames and the interface to read/write them
- FitsFrameIO: astropy-backed FITS implementation
- load_manifest: build frame groups from a TOML manifest
"""

from nocode_pipeline.frames.fits import FitsFrameIO, FrameData, FrameIO
from nocode_pipeline.frames.manifest import load_manifest

__all__ = [
    "FitsFrameIO",
    "FrameData",
    "FrameIO",
    "load_manifest",
]
