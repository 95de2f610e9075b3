"""Carry capacity rules.

Weight and volume limits derive from strength, worn storage, bionics,
mutations and carried artifacts. Every function reads the character and
never changes it.

Example:
    >>> from creature_state.engine.capacity import can_pick_weight
    >>> can_pick_weight(character, 5000, safe=True)
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from creature_state.core.config import CapacitySettings, get_settings
from creature_state.core.constants import BIO_STORAGE
from creature_state.models.enums import ArtifactEffect
from creature_state.models.traits import MutationData, get_trait_database


if TYPE_CHECKING:
    from creature_state.models.character import Character


def _capacity_settings(settings: CapacitySettings | None) -> CapacitySettings:
    return settings if settings is not None else get_settings().capacity


def _present_traits(character: Character) -> list[MutationData]:
    database = get_trait_database()
    present = []
    for trait_id in character.ledger.my_mutations:
        data = database.get(trait_id)
        if data is not None:
            present.append(data)
    return present


def weight_carried(character: Character) -> int:
    """Total weight of every owned item, nested contents included."""
    return character.possessions.weight()


def volume_carried(character: Character) -> int:
    """Total volume of every owned item."""
    return character.possessions.volume()


def weight_capacity(character: Character, settings: CapacitySettings | None = None) -> int:
    """Weight the character can carry without being overloaded."""
    settings = _capacity_settings(settings)
    capacity: float = settings.base_weight_capacity + character.get_str() * settings.weight_per_strength
    for data in _present_traits(character):
        capacity *= data.weight_capacity_modifier
    result = int(capacity)
    if character.has_artifact_with(ArtifactEffect.CARRY_MORE):
        result += settings.carry_more_bonus
    return max(result, 0)


def volume_capacity(character: Character, settings: CapacitySettings | None = None) -> int:
    """Volume the character can carry; never below the base capacity."""
    settings = _capacity_settings(settings)
    capacity: float = settings.base_volume_capacity
    capacity += sum(article.storage for article in character.possessions.worn)
    if character.has_bionic(BIO_STORAGE):
        capacity += settings.storage_bionic_bonus
    traits = _present_traits(character)
    capacity += sum(data.volume_capacity_bonus for data in traits)
    for data in traits:
        capacity *= data.volume_capacity_modifier
    return max(int(capacity), settings.base_volume_capacity)


def can_pick_volume(
    character: Character,
    volume: int,
    safe: bool = False,
    settings: CapacitySettings | None = None,
) -> bool:
    """Whether ``volume`` more fits; a safe check leaves a margin free."""
    settings = _capacity_settings(settings)
    limit = volume_capacity(character, settings)
    if safe:
        limit -= settings.safe_volume_margin
    return volume_carried(character) + volume <= limit


def can_pick_weight(
    character: Character,
    weight: int,
    safe: bool = True,
    settings: CapacitySettings | None = None,
) -> bool:
    """Whether ``weight`` more can be carried.

    A safe check stays within capacity; an unsafe one allows overloading
    up to ``overload_multiplier`` times capacity.
    """
    settings = _capacity_settings(settings)
    limit: float = weight_capacity(character, settings)
    if not safe:
        limit *= settings.overload_multiplier
    return weight_carried(character) + weight <= limit


__all__ = [
    "weight_carried",
    "volume_carried",
    "weight_capacity",
    "volume_capacity",
    "can_pick_volume",
    "can_pick_weight",
]
