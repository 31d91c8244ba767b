"""
Data models for the No-Code Pipeline Builder.

- Phase: custom-step entry points of the host timeline
- FrameGroup / FrameItem: runtime frame collections and their status
- MasterType / MasterVariant: master file enumeration
"""

from nocode_pipeline.models.frames import FrameGroup, FrameItem, FrameStatus
from nocode_pipeline.models.phases import (
    AssociatedChannel,
    ImageType,
    MasterType,
    MasterVariant,
    Phase,
    master_combinations,
    master_key,
)

__all__ = [
    "AssociatedChannel",
    "FrameGroup",
    "FrameItem",
    "FrameStatus",
    "ImageType",
    "MasterType",
    "MasterVariant",
    "Phase",
    "master_combinations",
    "master_key",
]
