"""creature-state - the stateful core of a game creature.

Tracks what a character owns (wielded weapon, worn gear, a bag of nested
containers), which traits and mutations it has, and what it can see and
carry as a result.

Example:
    >>> from creature_state import Character, Item
    >>> hero = Character(name="Ash")
    >>> pack = hero.i_add(Item(type_id="backpack", storage=8))
    >>> hero.wear(pack)
    True
    >>> hero.volume_capacity()
    10

Modules:
    core: Configuration, logging, and base exceptions.
    models: Items, possessions, the mutation ledger and characters.
    engine: Capacity and vision rules.
"""

from __future__ import annotations

from creature_state.core.config import Settings, get_settings
from creature_state.core.exceptions import CreatureStateError
from creature_state.models import Character, Creature, Item, TraitDatabase, get_trait_database


__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "CreatureStateError",
    "Character",
    "Creature",
    "Item",
    "TraitDatabase",
    "get_trait_database",
]
