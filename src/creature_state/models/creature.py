"""Base creature model.

The parts of a creature that characters build on: a name, primary stats,
active effects and basic needs. Combat, damage and death are handled
elsewhere.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from creature_state.models.components import Effect, StatsComponent
from creature_state.models.enums import BodyPart, Stat


class Creature(BaseModel):
    """Any living thing that has stats and can be affected by effects."""

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="ignore",
        use_enum_values=False,
    )

    name: str = Field(default="", description="Display name")
    stats: StatsComponent = Field(default_factory=StatsComponent)
    effects: list[Effect] = Field(default_factory=list)

    hunger: int = Field(default=0)
    thirst: int = Field(default=0)
    fatigue: int = Field(default=0)

    # =========================================================================
    # Stats
    # =========================================================================

    def get_str(self) -> int:
        return self.stats.get(Stat.STR)

    def get_dex(self) -> int:
        return self.stats.get(Stat.DEX)

    def get_int(self) -> int:
        return self.stats.get(Stat.INT)

    def get_per(self) -> int:
        return self.stats.get(Stat.PER)

    def reset_stats(self) -> None:
        """Recompute stat bonuses from active effects.

        Bonuses are rebuilt from scratch, so calling this any number of
        times gives the same result.
        """
        bonuses: dict[Stat, int] = {}
        for effect in self.effects:
            for stat, value in effect.stat_mods.items():
                bonuses[stat] = bonuses.get(stat, 0) + value
        self.stats.bonuses = bonuses

    # =========================================================================
    # Effects
    # =========================================================================

    def get_effect(self, effect_id: str, bp: BodyPart | None = None) -> Effect | None:
        for effect in self.effects:
            if effect.effect_id == effect_id and effect.bp == bp:
                return effect
        return None

    def has_effect(self, effect_id: str, bp: BodyPart | None = None) -> bool:
        """Whether the effect is present; ``bp=None`` matches any body part."""
        if bp is None:
            return any(effect.effect_id == effect_id for effect in self.effects)
        return self.get_effect(effect_id, bp) is not None

    def add_effect(
        self,
        effect_id: str,
        duration: int,
        bp: BodyPart | None = None,
        permanent: bool = False,
        intensity: int = 0,
        force: bool = False,
        stat_mods: dict[Stat, int] | None = None,
    ) -> Effect | None:
        """Apply an effect, stacking onto an existing one on the same part.

        Stacking adds the durations and keeps the higher intensity.

        Returns:
            The stored effect.
        """
        existing = self.get_effect(effect_id, bp)
        if existing is not None:
            existing.duration += duration
            existing.intensity = max(existing.intensity, intensity)
            existing.permanent = existing.permanent or permanent
            return existing
        effect = Effect(
            effect_id=effect_id,
            duration=duration,
            bp=bp,
            permanent=permanent,
            intensity=intensity,
            stat_mods=stat_mods or {},
        )
        self.effects.append(effect)
        return effect

    def remove_effect(self, effect_id: str, bp: BodyPart | None = None) -> bool:
        """Remove an effect; ``bp=None`` removes it from every body part."""
        kept = [
            effect
            for effect in self.effects
            if not (effect.effect_id == effect_id and (bp is None or effect.bp == bp))
        ]
        removed = len(kept) != len(self.effects)
        self.effects = kept
        return removed


__all__ = ["Creature"]
