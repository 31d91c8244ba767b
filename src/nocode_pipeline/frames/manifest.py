"""
Frame group manifests.

A manifest is a TOML file describing the frame groups of a run, used by the
command-line driver in place of the host's group manager. Relative paths are
resolved against the manifest's directory.

Example:
    [[groups]]
    name = "M42 Ha"
    image_type = "light"
    frames_glob = "lights/Ha/*.fits"

    [groups.keywords]
    filter = "Ha"

    [groups.masters]
    MASTER_LIGHT_REGULAR = "masters/master_Ha.fits"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ManifestError
from ..models.frames import FrameGroup
from ..models.phases import AssociatedChannel, ImageType, master_combinations, master_key

logger = structlog.get_logger(__name__)

_MASTER_KEYS = {master_key(t, v): (t, v) for t, v in master_combinations()}


class GroupSpec(BaseModel):
    """One frame group as declared in a manifest."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Group name")
    image_type: ImageType = Field(default=ImageType.LIGHT)
    channel: AssociatedChannel = Field(default=AssociatedChannel.NONE)
    is_cfa: bool = Field(default=False)
    keywords: dict[str, str] = Field(default_factory=dict)
    frames: list[str] = Field(default_factory=list)
    frames_glob: str | None = Field(default=None, description="Glob for frames, sorted")
    masters: dict[str, str] = Field(default_factory=dict)
    frame_size: int | None = Field(default=None, ge=0, description="Bytes per frame")

    @field_validator("keywords", mode="before")
    @classmethod
    def stringify_keywords(cls, v: Any) -> Any:
        """TOML numbers become strings so they compare like annotations."""
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        return v

    @field_validator("masters")
    @classmethod
    def validate_master_keys(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = [key for key in v if key.upper() not in _MASTER_KEYS]
        if unknown:
            raise ValueError(f"unknown master keys: {', '.join(unknown)}")
        return {key.upper(): path for key, path in v.items()}

    def to_group(self, base_dir: Path) -> FrameGroup:
        """Build the runtime FrameGroup, resolving paths against ``base_dir``."""
        group = FrameGroup(
            name=self.name,
            image_type=self.image_type,
            associated_channel=self.channel,
            keywords=dict(self.keywords),
            is_cfa=self.is_cfa,
            frame_size_bytes=self.frame_size,
        )

        for frame in self.frames:
            group.add_frame(_resolve(base_dir, frame))
        if self.frames_glob:
            for path in sorted(base_dir.glob(self.frames_glob)):
                group.add_frame(path)

        for key, path in self.masters.items():
            master_type, variant = _MASTER_KEYS[key]
            group.set_master_file(master_type, variant, _resolve(base_dir, path))

        return group


class Manifest(BaseModel):
    """All frame groups of a run."""

    model_config = ConfigDict(extra="ignore")

    groups: list[GroupSpec] = Field(default_factory=list)


def _resolve(base_dir: Path, path: str) -> str:
    p = Path(path).expanduser()
    return str(p if p.is_absolute() else base_dir / p)


def load_manifest(path: str | Path) -> list[FrameGroup]:
    """Load frame groups from a manifest file.

    Args:
        path: TOML manifest path

    Returns:
        Frame groups in declaration order

    Raises:
        ManifestError: If the file is missing, unparsable or invalid
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    try:
        manifest = Manifest(**data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {path}: {e}") from e

    base_dir = path.resolve().parent
    groups = [spec.to_group(base_dir) for spec in manifest.groups]

    logger.info(
        "manifest_loaded",
        path=str(path),
        groups=len(groups),
        frames=sum(len(g.items) for g in groups),
    )
    return groups
