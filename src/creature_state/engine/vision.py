"""Vision rules: which vision modes are on, how far a character can see,
and how much light it needs to see anything.

The character caches the results of :func:`compute_sight_limits`; see
``creature_state.models.senses``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from creature_state.core.config import VisionSettings, get_settings
from creature_state.core.constants import (
    BIO_MEMBRANE,
    BIO_NIGHT_VISION,
    BIRD_EYE_RANGE,
    EFFECT_BLIND,
    EFFECT_BOOMERED,
    EFFECT_CONTACTS,
    EFFECT_IN_PIT,
    FLAG_BLIND,
    FLAG_FIX_NEARSIGHT,
    FLAG_NIGHT_VISION,
    FLAG_SWIM_GOGGLES,
    NV_RANGE_MEDIUM,
    NV_RANGE_STRONG,
    NV_RANGE_WEAK,
    POWERED_ARMOR_NV,
    SIGHT_BLIND,
    SIGHT_MYOPIC,
    SIGHT_SHELL,
    SIGHT_SLIME,
    SIGHT_SMOTHERED,
    TRAIT_BIRD_EYE,
    TRAIT_CEPH_EYES,
    TRAIT_DEBUG_NIGHTVISION,
    TRAIT_MEMBRANE,
    TRAIT_MYOPIC,
    TRAIT_PER_SLIME,
    TRAIT_PER_SLIME_OK,
    TRAIT_SHELL2,
    TRAIT_URSINE_EYE,
)
from creature_state.models.enums import NIGHT_VISION_MODES, VisionMode


if TYPE_CHECKING:
    from creature_state.models.character import Character


MUTATION_VISION_MODES: dict[str, VisionMode] = {
    "NIGHTVISION3": VisionMode.NIGHTVISION_3,
    "ELFA_FNV": VisionMode.FULL_ELFA_VISION,
    "CEPH_VISION": VisionMode.CEPH_VISION,
    "ELFA_NV": VisionMode.ELFA_VISION,
    "NIGHTVISION2": VisionMode.NIGHTVISION_2,
    "FEL_NV": VisionMode.FELINE_VISION,
    "URSINE_EYE": VisionMode.URSINE_VISION,
    "NIGHTVISION": VisionMode.NIGHTVISION_1,
}
"""Powered mutations that switch a vision mode on."""

STRONG_NV = (
    VisionMode.NV_GOGGLES
    | VisionMode.NIGHTVISION_3
    | VisionMode.FULL_ELFA_VISION
    | VisionMode.CEPH_VISION
)
MEDIUM_NV = (
    VisionMode.NIGHTVISION_2
    | VisionMode.FELINE_VISION
    | VisionMode.URSINE_VISION
    | VisionMode.ELFA_VISION
)
WEAK_NV = VisionMode.NIGHTVISION_1

_MIN_DIMMING = 0.5


# =============================================================================
# Sight Limits
# =============================================================================


def vision_modes(character: Character) -> VisionMode:
    """Union of every vision mode the character currently has."""
    modes = VisionMode.NONE
    if character.has_trait(TRAIT_DEBUG_NIGHTVISION):
        modes |= VisionMode.DEBUG_NIGHTVISION
    if character.worn_with_flag(FLAG_NIGHT_VISION) or character.has_active_bionic(BIO_NIGHT_VISION):
        modes |= VisionMode.NV_GOGGLES
    if character.is_wearing(POWERED_ARMOR_NV):
        modes |= VisionMode.NIGHTVISION_3
    for trait_id, mode in MUTATION_VISION_MODES.items():
        if character.has_active_mutation(trait_id):
            modes |= mode
    if character.has_trait(TRAIT_BIRD_EYE):
        modes |= VisionMode.BIRD_EYE
    return modes


def sees_underwater(character: Character) -> bool:
    """Whether eyes are protected while submerged."""
    return (
        character.worn_with_flag(FLAG_SWIM_GOGGLES)
        or character.has_trait(TRAIT_MEMBRANE)
        or character.has_trait(TRAIT_CEPH_EYES)
        or character.has_bionic(BIO_MEMBRANE)
    )


def sight_max(character: Character, settings: VisionSettings | None = None) -> int:
    """Sight distance allowed by the most severe impairment."""
    settings = settings if settings is not None else get_settings().vision
    if character.has_effect(EFFECT_BLIND) or character.worn_with_flag(FLAG_BLIND):
        return SIGHT_BLIND
    if (
        character.has_effect(EFFECT_IN_PIT)
        or (character.has_effect(EFFECT_BOOMERED) and not character.has_trait(TRAIT_PER_SLIME_OK))
        or (character.underwater and not sees_underwater(character))
    ):
        return SIGHT_SMOTHERED
    if character.has_active_mutation(TRAIT_SHELL2):
        return SIGHT_SHELL
    if (
        (character.has_trait(TRAIT_MYOPIC) or character.has_trait(TRAIT_URSINE_EYE))
        and not character.worn_with_flag(FLAG_FIX_NEARSIGHT)
        and not character.has_effect(EFFECT_CONTACTS)
    ):
        return SIGHT_MYOPIC
    if character.has_trait(TRAIT_PER_SLIME):
        return SIGHT_SLIME
    return settings.unlimited_sight


def compute_sight_limits(
    character: Character, settings: VisionSettings | None = None
) -> tuple[VisionMode, int]:
    """Recompute vision modes and sight distance from scratch."""
    return vision_modes(character), sight_max(character, settings)


# =============================================================================
# Light Threshold
# =============================================================================


def _night_vision_range(modes: VisionMode) -> float:
    """Range bonus of the strongest night-vision tier present."""
    if modes & STRONG_NV:
        return NV_RANGE_STRONG
    if modes & MEDIUM_NV:
        return NV_RANGE_MEDIUM
    if modes & WEAK_NV:
        return NV_RANGE_WEAK
    return 0.0


def vision_threshold(
    modes: VisionMode,
    light_level: float,
    perception: int,
    eye_encumbrance: int = 0,
    settings: VisionSettings | None = None,
) -> float:
    """Light level needed to see a tile at the given ambient light.

    Lower is better. Perception extends the range at which light is still
    useful; darker surroundings dim that range less. Night vision only adds
    range at or below ``ambient_lit``: in brighter light every mode gets the
    unaided threshold. Debug night vision sees everything at any light. The
    result never drops below ``threshold_floor``.
    """
    settings = settings if settings is not None else get_settings().vision
    if modes & VisionMode.DEBUG_NIGHTVISION:
        return settings.threshold_floor

    light = max(float(light_level), 0.0)
    dimming = 1.0 + (light - settings.ambient_minimal) / (settings.ambient_lit - settings.ambient_minimal)
    dimming = max(dimming, _MIN_DIMMING)

    sight_range = perception / 3.0 - eye_encumbrance / 10.0
    if modes & NIGHT_VISION_MODES and light <= settings.ambient_lit:
        sight_range += _night_vision_range(modes)
    if modes & VisionMode.BIRD_EYE:
        sight_range += BIRD_EYE_RANGE

    return max(settings.threshold_floor, settings.ambient_lit / math.exp(sight_range / dimming))


__all__ = [
    "MUTATION_VISION_MODES",
    "vision_modes",
    "sees_underwater",
    "sight_max",
    "compute_sight_limits",
    "vision_threshold",
]
