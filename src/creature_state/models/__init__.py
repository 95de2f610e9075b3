"""Pydantic V2 models for creature state.

Submodules:
    enums: Body parts, hit point pools, stats, vision modes, artifact effects
    item: Items and recursive containment algorithms
    inventory: The carried-items bag
    possessions: Weapon, worn and inventory roots of ownership
    traits: Trait/mutation definitions and the trait database
    mutations: Per-creature trait/mutation ledger
    components: Stats, effects, bionics and skills
    senses: Sensory cache and its invalidation decorator
    creature: Base creature
    character: Character aggregate

Example:
    >>> from creature_state.models import Character, Item
    >>> hero = Character(name="Ash")
    >>> hero.i_add(Item(type_id="rock", base_weight=500)).invlet
    'a'
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from creature_state.models.enums import (
    NIGHT_VISION_MODES,
    ArtifactEffect,
    BodyPart,
    HpPart,
    Stat,
    VisionMode,
)

# =============================================================================
# Items and Possessions
# =============================================================================
from creature_state.models.item import Item, ItemPredicate, count_items, extract_items_with
from creature_state.models.inventory import Inventory, pick_invlet
from creature_state.models.possessions import PossessionTree

# =============================================================================
# Traits and Mutations
# =============================================================================
from creature_state.models.traits import (
    MutationData,
    TraitData,
    TraitDatabase,
    clear_trait_database,
    get_trait_database,
)
from creature_state.models.mutations import MutationLedger

# =============================================================================
# Creatures
# =============================================================================
from creature_state.models.components import Bionic, Effect, SkillLevel, StatsComponent
from creature_state.models.senses import SensoryCache, invalidates_senses
from creature_state.models.creature import Creature
from creature_state.models.character import Character, MutationEffectResult, PickupResult


__all__ = [
    # Enumerations
    "ArtifactEffect",
    "BodyPart",
    "HpPart",
    "Stat",
    "VisionMode",
    "NIGHT_VISION_MODES",
    # Items and possessions
    "Item",
    "ItemPredicate",
    "extract_items_with",
    "count_items",
    "Inventory",
    "pick_invlet",
    "PossessionTree",
    # Traits and mutations
    "MutationData",
    "TraitData",
    "TraitDatabase",
    "get_trait_database",
    "clear_trait_database",
    "MutationLedger",
    # Creatures
    "StatsComponent",
    "Effect",
    "Bionic",
    "SkillLevel",
    "SensoryCache",
    "invalidates_senses",
    "Creature",
    "Character",
    "PickupResult",
    "MutationEffectResult",
]
