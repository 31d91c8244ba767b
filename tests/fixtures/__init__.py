"""
Test fixtures for the No-Code Pipeline Builder.

This module provides:
- GroupFactory: Create frame groups with sensible defaults
- TreeFactory: Build instruction trees
- RecordingTransform / MemoryFrameIO: Test doubles for transforms and frame I/O
- write_fits: Write small FITS files
"""

from tests.fixtures.factories import (
    GroupFactory,
    MemoryFrameIO,
    RecordingTransform,
    TreeFactory,
    write_fits,
)

__all__ = [
    "GroupFactory",
    "MemoryFrameIO",
    "RecordingTransform",
    "TreeFactory",
    "write_fits",
]
