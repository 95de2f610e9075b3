"""Small records attached to creatures.

Components:
    StatsComponent: Maximum values of the four primary stats plus bonuses.
    Effect: A timed or permanent effect, optionally on one body part.
    Bionic: An installed bionic and its power state.
    SkillLevel: Level and practice progress in one skill.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from creature_state.models.base import Component
from creature_state.models.enums import BodyPart, Stat


class StatsComponent(Component):
    """Primary stats.

    Maximum values are what mutations modify; bonuses come from effects and
    are recomputed from scratch by ``Creature.reset_stats``.
    """

    str_max: int = Field(default=8)
    dex_max: int = Field(default=8)
    int_max: int = Field(default=8)
    per_max: int = Field(default=8)

    bonuses: dict[Stat, int] = Field(default_factory=dict)

    def get_max(self, stat: Stat) -> int:
        return getattr(self, stat.max_field)

    def get(self, stat: Stat) -> int:
        """Current value: maximum plus bonuses."""
        return self.get_max(stat) + self.bonuses.get(stat, 0)


class Effect(BaseModel):
    """An effect applied to a creature.

    Attributes:
        effect_id: Effect type identifier (e.g. ``blind``).
        duration: Remaining turns; ignored when permanent.
        bp: Targeted body part, None for the whole body.
        permanent: Never expires.
        intensity: Strength of the effect.
        stat_mods: Stat bonuses granted while the effect lasts.
    """

    model_config = ConfigDict(validate_assignment=True)

    effect_id: str = Field(min_length=1)
    duration: int = Field(default=0, ge=0)
    bp: BodyPart | None = Field(default=None)
    permanent: bool = Field(default=False)
    intensity: int = Field(default=0, ge=0)
    stat_mods: dict[Stat, int] = Field(default_factory=dict)


class Bionic(BaseModel):
    """An installed bionic."""

    model_config = ConfigDict(validate_assignment=True)

    bionic_id: str = Field(min_length=1)
    powered: bool = Field(default=False)
    invlet: str | None = Field(default=None)


class SkillLevel(BaseModel):
    """Level and practice progress in one skill."""

    model_config = ConfigDict(validate_assignment=True)

    level: int = Field(default=0, ge=0)
    exercise: int = Field(default=0, ge=0)


__all__ = [
    "StatsComponent",
    "Effect",
    "Bionic",
    "SkillLevel",
]
