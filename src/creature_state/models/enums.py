"""Enumeration types for creature-state.

Body parts, hit point pools, modifiable stats, vision modes and artifact
passive effects.
"""

from __future__ import annotations

from enum import IntFlag, StrEnum, auto


class BodyPart(StrEnum):
    """Body parts that clothing covers and effects target."""

    TORSO = "torso"
    HEAD = "head"
    EYES = "eyes"
    MOUTH = "mouth"
    ARM_L = "arm_l"
    ARM_R = "arm_r"
    HAND_L = "hand_l"
    HAND_R = "hand_r"
    LEG_L = "leg_l"
    LEG_R = "leg_r"
    FOOT_L = "foot_l"
    FOOT_R = "foot_r"


class HpPart(StrEnum):
    """Separately tracked hit point pools."""

    HEAD = "head"
    TORSO = "torso"
    ARM_L = "arm_l"
    ARM_R = "arm_r"
    LEG_L = "leg_l"
    LEG_R = "leg_r"


class Stat(StrEnum):
    """Primary stats that mutations modify.

    The value is the key used in mutation stat-mod tables.
    """

    STR = "STR"
    DEX = "DEX"
    INT = "INT"
    PER = "PER"

    @property
    def max_field(self) -> str:
        """Name of the maximum-value attribute on the stats component."""
        return f"{self.name.lower()}_max"


class VisionMode(IntFlag):
    """Vision modes, one bit each.

    A combination of members is the cached vision bitset.
    """

    NONE = 0
    DEBUG_NIGHTVISION = auto()
    NV_GOGGLES = auto()
    NIGHTVISION_1 = auto()
    NIGHTVISION_2 = auto()
    NIGHTVISION_3 = auto()
    FULL_ELFA_VISION = auto()
    ELFA_VISION = auto()
    CEPH_VISION = auto()
    FELINE_VISION = auto()
    BIRD_EYE = auto()
    URSINE_VISION = auto()


NIGHT_VISION_MODES = (
    VisionMode.DEBUG_NIGHTVISION
    | VisionMode.NV_GOGGLES
    | VisionMode.NIGHTVISION_1
    | VisionMode.NIGHTVISION_2
    | VisionMode.NIGHTVISION_3
    | VisionMode.FULL_ELFA_VISION
    | VisionMode.ELFA_VISION
    | VisionMode.CEPH_VISION
    | VisionMode.FELINE_VISION
    | VisionMode.URSINE_VISION
)
"""Modes that count as night vision for ``has_nv``."""


class ArtifactEffect(StrEnum):
    """Passive effects an artifact grants while carried."""

    CARRY_MORE = "carry_more"
    GLOW = "glow"
    CLAIRVOYANCE = "clairvoyance"
