"""Tests for the base creature."""

from __future__ import annotations

from creature_state.models.creature import Creature
from creature_state.models.enums import BodyPart, Stat


class TestEffects:
    """Tests for effect bookkeeping."""

    def test_add_and_has_effect(self) -> None:
        creature = Creature()
        creature.add_effect("blind", 5)

        assert creature.has_effect("blind")
        assert not creature.has_effect("in_pit")

    def test_effects_stack_on_same_part(self) -> None:
        creature = Creature()
        creature.add_effect("bleed", 3, BodyPart.ARM_L, intensity=1)
        effect = creature.add_effect("bleed", 4, BodyPart.ARM_L, intensity=2)

        assert effect.duration == 7
        assert effect.intensity == 2
        assert len(creature.effects) == 1

    def test_parts_tracked_separately(self) -> None:
        creature = Creature()
        creature.add_effect("bleed", 3, BodyPart.ARM_L)
        creature.add_effect("bleed", 3, BodyPart.LEG_R)

        assert creature.has_effect("bleed", BodyPart.LEG_R)
        assert not creature.has_effect("bleed", BodyPart.HEAD)
        assert creature.remove_effect("bleed", BodyPart.ARM_L)
        assert creature.has_effect("bleed")

    def test_remove_from_all_parts(self) -> None:
        creature = Creature()
        creature.add_effect("bleed", 3, BodyPart.ARM_L)
        creature.add_effect("bleed", 3, BodyPart.LEG_R)

        assert creature.remove_effect("bleed")
        assert not creature.has_effect("bleed")
        assert not creature.remove_effect("bleed")


class TestStats:
    """Tests for stat values and bonuses."""

    def test_defaults(self) -> None:
        creature = Creature()
        assert (creature.get_str(), creature.get_dex(), creature.get_int(), creature.get_per()) == (8, 8, 8, 8)

    def test_reset_stats_is_idempotent(self) -> None:
        creature = Creature()
        creature.add_effect("drunk", 10, stat_mods={Stat.PER: -2, Stat.STR: 1})

        creature.reset_stats()
        creature.reset_stats()

        assert creature.get_per() == 6
        assert creature.get_str() == 9
        assert creature.stats.per_max == 8

        creature.remove_effect("drunk")
        creature.reset_stats()
        assert creature.get_per() == 8
