"""
Phase and master-file enumerations.

A phase is one of the custom-step entry points of the host timeline.
Instructions opt into a phase through their ``step`` attribute, which may
name the phase (``step=onCalibrationEnd``) or give its number (``step=2``).

Example:
    >>> from nocode_pipeline.models import Phase
    >>>
    >>> Phase.parse("onRegistrationEnd")
    <Phase.ON_REGISTRATION_END: 12>
    >>> Phase.ON_REGISTRATION_END.step_name
    'onRegistrationEnd'
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Phase(IntEnum):
    """Custom-step entry points, in timeline order."""

    ON_CALIBRATION_START = 1
    ON_CALIBRATION_END = 2
    ON_LPS_START = 3
    ON_LPS_END = 4
    ON_CC_START = 5
    ON_CC_END = 6
    ON_DEBAYER_START = 7
    ON_DEBAYER_END = 8
    ON_PRE_PROCESS_END = 9
    ON_POST_PROCESS_START = 10
    ON_REGISTRATION_START = 11
    ON_REGISTRATION_END = 12
    ON_LN_START = 13
    ON_LN_END = 14
    ON_INTEGRATION_START = 15
    ON_INTEGRATION_END = 16
    ON_POST_PROCESS_END = 17

    @property
    def step_name(self) -> str:
        """Name used in annotations, operation labels and output folders."""
        return _STEP_NAMES[self]

    @property
    def is_master_step(self) -> bool:
        """True for phases that operate on master files instead of frames."""
        return self in MASTER_PHASES

    @classmethod
    def parse(cls, value: str | int | None) -> Phase | None:
        """Resolve an annotation value to a phase.

        Args:
            value: Step name (case-insensitive) or phase number

        Returns:
            Matching Phase, or None if the value names no phase
        """
        if value is None:
            return None
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None

        text = value.strip()
        if text.isdigit():
            return cls.parse(int(text))
        return _BY_NAME.get(text.lower())


_STEP_NAMES: dict[Phase, str] = {
    Phase.ON_CALIBRATION_START: "onCalibrationStart",
    Phase.ON_CALIBRATION_END: "onCalibrationEnd",
    Phase.ON_LPS_START: "onLPSStart",
    Phase.ON_LPS_END: "onLPSEnd",
    Phase.ON_CC_START: "onCCStart",
    Phase.ON_CC_END: "onCCEnd",
    Phase.ON_DEBAYER_START: "onDebayerStart",
    Phase.ON_DEBAYER_END: "onDebayerEnd",
    Phase.ON_PRE_PROCESS_END: "onPreProcessEnd",
    Phase.ON_POST_PROCESS_START: "onPostProcessStart",
    Phase.ON_REGISTRATION_START: "onRegistrationStart",
    Phase.ON_REGISTRATION_END: "onRegistrationEnd",
    Phase.ON_LN_START: "onLNStart",
    Phase.ON_LN_END: "onLNEnd",
    Phase.ON_INTEGRATION_START: "onIntegrationStart",
    Phase.ON_INTEGRATION_END: "onIntegrationEnd",
    Phase.ON_POST_PROCESS_END: "onPostProcessEnd",
}

_BY_NAME: dict[str, Phase] = {name.lower(): phase for phase, name in _STEP_NAMES.items()}

# Only the final step runs on the integrated masters
MASTER_PHASES = frozenset({Phase.ON_POST_PROCESS_END})


class ImageType(str, Enum):
    """Imaging role of a frame group."""

    LIGHT = "light"
    DARK = "dark"
    BIAS = "bias"
    FLAT = "flat"


class AssociatedChannel(str, Enum):
    """Color channel a group is associated with."""

    NONE = "none"
    RED = "R"
    GREEN = "G"
    BLUE = "B"
    COMBINED_RGB = "combined_rgb"


class MasterType(str, Enum):
    """Kinds of master file produced by integration."""

    MASTER_LIGHT = "MASTER_LIGHT"
    DRIZZLE = "DRIZZLE"
    RECOMBINED = "RECOMBINED"


class MasterVariant(str, Enum):
    """Variants of a master file."""

    REGULAR = "REGULAR"
    CROPPED = "CROPPED"


def master_key(master_type: MasterType, variant: MasterVariant) -> str:
    """Cache key for a master file, e.g. ``MASTER_LIGHT_REGULAR``."""
    return f"{master_type.value}_{variant.value}"


def master_combinations() -> list[tuple[MasterType, MasterVariant]]:
    """All (type, variant) pairs in lookup order, type-major."""
    return [(t, v) for t in MasterType for v in MasterVariant]
