"""Character model.

A character is a creature with possessions, a mutation ledger, bionics,
per-part hit points, skills and cached senses. All possession, capacity,
mutation and sight operations are reachable from here; the heavy lifting
lives in the possession tree, the ledger and the rules in
``creature_state.engine``.

Item positions:
    -1          the wielded weapon
    -2 - n      worn item ``n``
    0 .. n      inventory item ``n``

Example:
    >>> hero = Character(name="Ash")
    >>> coat = hero.i_add(Item(type_id="coat", storage=6))
    >>> hero.wear(coat)
    True
    >>> hero.get_item_position(coat)
    -2
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, PrivateAttr

from creature_state.core.config import get_settings
from creature_state.core.constants import NO_MISSION, WEAPON_POSITION
from creature_state.core.logging import character_context, get_logger
from creature_state.engine import capacity, vision
from creature_state.models.components import Bionic, Effect, SkillLevel
from creature_state.models.creature import Creature
from creature_state.models.enums import (
    NIGHT_VISION_MODES,
    ArtifactEffect,
    BodyPart,
    HpPart,
    Stat,
    VisionMode,
)
from creature_state.models.item import Item, ItemPredicate
from creature_state.models.mutations import MutationLedger
from creature_state.models.possessions import PossessionTree
from creature_state.models.senses import SensoryCache, invalidates_senses
from creature_state.models.traits import (
    MutationData,
    TraitData,
    TraitDatabase,
    get_trait_database,
)


logger = get_logger(__name__)

_SENSORY_FIELDS = frozenset({"underwater", "effects", "bionics", "ledger", "possessions"})


class PickupResult(BaseModel):
    """Outcome of :meth:`Character.i_add_or_drop`.

    Attributes:
        added: Items now in the inventory.
        dropped: Items that did not fit; the caller places them.
    """

    added: list[Item] = Field(default_factory=list)
    dropped: list[Item] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return not self.dropped


class MutationEffectResult(BaseModel):
    """Gear that stopped fitting after a mutation was gained.

    Attributes:
        destroyed: Gear torn apart; gone for good.
        dropped: Gear pushed off intact; the caller places it.
    """

    destroyed: list[Item] = Field(default_factory=list)
    dropped: list[Item] = Field(default_factory=list)


class Character(Creature):
    """A player or non-player character."""

    male: bool = Field(default=True)
    possessions: PossessionTree = Field(default_factory=PossessionTree)
    ledger: MutationLedger = Field(default_factory=MutationLedger)
    bionics: list[Bionic] = Field(default_factory=list)
    underwater: bool = Field(default=False)

    hp_cur: dict[HpPart, int] = Field(default_factory=dict)
    hp_max: dict[HpPart, int] = Field(default_factory=dict)
    skills: dict[str, SkillLevel] = Field(default_factory=dict)

    last_item: str = Field(default="", description="Type id of the last item picked up")
    turn_died: int = Field(default=-1)

    _senses: SensoryCache = PrivateAttr(default_factory=SensoryCache)

    def model_post_init(self, context: Any, /) -> None:
        if not self.hp_max:
            self.recalc_hp()

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in _SENSORY_FIELDS:
            self.invalidate_senses()

    # =========================================================================
    # Possession Queries
    # =========================================================================

    def has_item_with(self, predicate: ItemPredicate) -> bool:
        return self.possessions.has_item_with(predicate)

    def items_with(self, predicate: ItemPredicate) -> list[Item]:
        return self.possessions.items_with(predicate)

    def is_worn(self, item: Item) -> bool:
        return self.possessions.is_worn(item)

    def is_wearing(self, type_id: str) -> bool:
        return any(article.type_id == type_id for article in self.possessions.worn)

    def is_wearing_on_bp(self, bp: BodyPart) -> bool:
        return any(article.covers_part(bp) for article in self.possessions.worn)

    def worn_with_flag(self, flag: str) -> bool:
        return any(article.has_flag(flag) for article in self.possessions.worn)

    def has_active_item(self, type_id: str) -> bool:
        return self.has_item_with(lambda it: it.type_id == type_id and it.active)

    def has_mission_item(self, mission_id: int) -> bool:
        return mission_id != NO_MISSION and self.has_item_with(lambda it: it.mission_id == mission_id)

    def has_artifact_with(self, effect: ArtifactEffect) -> bool:
        return self.has_item_with(lambda it: effect in it.artifact_effects)

    def encumbrance(self, bp: BodyPart) -> int:
        """Total encumbrance of worn items covering ``bp``."""
        return sum(article.encumbrance for article in self.possessions.worn if article.covers_part(bp))

    def allocated_invlets(self) -> set[str]:
        return self.possessions.allocated_invlets()

    @staticmethod
    def worn_position_to_index(position: int) -> int:
        """Convert between a worn position and a worn list index.

        The mapping is its own inverse.
        """
        return -2 - position

    def i_at(self, position: int) -> Item:
        """Item at ``position``; the empty item when nothing is there."""
        if position == WEAPON_POSITION:
            return self.possessions.weapon
        if position < WEAPON_POSITION:
            index = self.worn_position_to_index(position)
            if index < len(self.possessions.worn):
                return self.possessions.worn[index]
            return Item.null()
        item = self.possessions.inventory.item_at(position)
        return item if item is not None else Item.null()

    def get_item_position(self, item: Item) -> int | None:
        """Position of a top-level item by identity, None if not found."""
        if not item.is_null and self.possessions.weapon is item:
            return WEAPON_POSITION
        for index, article in enumerate(self.possessions.worn):
            if article is item:
                return self.worn_position_to_index(index)
        return self.possessions.inventory.position_of(item)

    # =========================================================================
    # Possession Changes
    # =========================================================================

    def i_add(self, item: Item) -> Item:
        """Put an item into the inventory and return the stored item."""
        stored = self.possessions.add_to_inventory(item)
        self.last_item = stored.type_id
        return stored

    @invalidates_senses
    def i_rem(self, target: int | Item) -> Item:
        """Remove an item by position or by identity.

        Contents travel with the removed item.

        Returns:
            The removed item, or the empty item if nothing was removed.
        """
        if isinstance(target, Item):
            if target.is_null:
                return Item.null()
            removed = self.possessions.remove_items_with(lambda it: it is target, rehome=False)
            if not removed:
                logger.warning("item_not_owned", type_id=target.type_id, uid=str(target.uid))
                return Item.null()
            return removed[0]

        if target == WEAPON_POSITION:
            return self.possessions.remove_weapon()
        if target < WEAPON_POSITION:
            index = self.worn_position_to_index(target)
            if index < len(self.possessions.worn):
                return self.possessions.worn.pop(index)
            logger.warning("invalid_item_position", position=target)
            return Item.null()
        item = self.possessions.inventory.remove_at(target)
        if item is None:
            logger.warning("invalid_item_position", position=target)
            return Item.null()
        return item

    def i_rem_keep_contents(self, position: int) -> Item:
        """Remove an item but keep its contents in the inventory.

        Returns:
            The removed item, emptied.
        """
        item = self.i_rem(position)
        contents, item.contents = item.contents, []
        for child in contents:
            self.i_add(child)
        return item

    def i_add_or_drop(self, item: Item, qty: int = 1) -> PickupResult:
        """Add ``qty`` copies of ``item`` while they fit.

        The first copy is ``item`` itself, the rest are deep copies with
        fresh ids. Once one copy does not fit, it and all later copies are
        returned as dropped.
        """
        settings = get_settings().capacity
        safe = not settings.dangerous_pickups
        result = PickupResult()
        overflow = False
        for index in range(qty):
            piece = item if index == 0 else item.model_copy(deep=True, update={"uid": uuid4()})
            if not overflow and not (
                self.can_pick_weight(piece.weight(), safe) and self.can_pick_volume(piece.volume())
            ):
                overflow = True
                logger.debug("pickup_overflow", type_id=piece.type_id, remaining=qty - index)
            if overflow:
                result.dropped.append(piece)
            else:
                result.added.append(self.i_add(piece))
        return result

    @invalidates_senses
    def remove_items_with(self, predicate: ItemPredicate) -> list[Item]:
        """Remove every matching owned item; surviving contents are kept."""
        return self.possessions.remove_items_with(predicate)

    @invalidates_senses
    def remove_worn_items_with(self, predicate: ItemPredicate) -> list[Item]:
        return self.possessions.remove_worn_items_with(predicate)

    @invalidates_senses
    def remove_mission_items(self, mission_id: int) -> list[Item]:
        if mission_id == NO_MISSION:
            return []
        return self.possessions.remove_items_with(lambda it: it.mission_id == mission_id)

    def _take_owned(self, item: Item) -> None:
        if self.has_item_with(lambda it: it is item):
            self.possessions.remove_items_with(lambda it: it is item, rehome=False)

    @invalidates_senses
    def wield(self, item: Item) -> bool:
        """Wield ``item``, putting any current weapon into the inventory.

        The item may come from anywhere, including inside a container the
        character owns. Wielding the empty item just frees the hands.
        """
        if item.is_null:
            previous = self.possessions.remove_weapon()
            if not previous.is_null:
                self.i_add(previous)
            return True
        if self.possessions.weapon is item:
            return True
        self._take_owned(item)
        previous = self.possessions.remove_weapon()
        if not previous.is_null:
            self.i_add(previous)
        self.possessions.weapon = item
        logger.debug("item_wielded", type_id=item.type_id)
        return True

    def remove_weapon(self) -> Item:
        return self.possessions.remove_weapon()

    @invalidates_senses
    def wear(self, item: Item) -> bool:
        """Put on an item, taking it from wherever it is owned."""
        if item.is_null or self.is_worn(item):
            return False
        self._take_owned(item)
        self.possessions.worn.append(item)
        logger.debug("item_worn", type_id=item.type_id)
        return True

    @invalidates_senses
    def takeoff(self, item: Item) -> bool:
        """Take off a worn item and put it into the inventory."""
        if not self.is_worn(item):
            logger.warning("takeoff_not_worn", type_id=item.type_id)
            return False
        self.possessions.worn = [article for article in self.possessions.worn if article is not item]
        self.i_add(item)
        return True

    # =========================================================================
    # Capacity
    # =========================================================================

    def weight_carried(self) -> int:
        return capacity.weight_carried(self)

    def volume_carried(self) -> int:
        return capacity.volume_carried(self)

    def weight_capacity(self) -> int:
        return capacity.weight_capacity(self)

    def volume_capacity(self) -> int:
        return capacity.volume_capacity(self)

    def can_pick_volume(self, volume: int, safe: bool = False) -> bool:
        return capacity.can_pick_volume(self, volume, safe)

    def can_pick_weight(self, weight: int, safe: bool = True) -> bool:
        return capacity.can_pick_weight(self, weight, safe)

    # =========================================================================
    # Traits and Mutations
    # =========================================================================

    def has_trait(self, trait_id: str) -> bool:
        return self.ledger.has_trait(trait_id)

    def has_base_trait(self, trait_id: str) -> bool:
        return self.ledger.has_base_trait(trait_id)

    def has_active_mutation(self, trait_id: str) -> bool:
        return self.ledger.has_active_mutation(trait_id)

    def trait_by_invlet(self, letter: str) -> str:
        return self.ledger.trait_by_invlet(letter)

    def get_base_traits(self) -> list[str]:
        return self.ledger.get_base_traits()

    def get_mutations(self) -> list[str]:
        return self.ledger.get_mutations()

    def get_mod(self, trait_id: str, stat: Stat | str) -> int:
        return self.ledger.get_mod(trait_id, stat)

    @invalidates_senses
    def toggle_trait(self, trait_id: str) -> bool:
        return self.ledger.toggle_trait(trait_id)

    @invalidates_senses
    def toggle_mutation(self, trait_id: str) -> bool:
        return self.ledger.toggle_mutation(trait_id)

    @invalidates_senses
    def empty_traits(self) -> None:
        self.ledger.empty_traits()

    @invalidates_senses
    def add_traits(self, trait_ids: Iterable[str]) -> list[str]:
        """Give the character base traits with their full gain effects.

        Traits already present are skipped.

        Returns:
            The ids actually gained.
        """
        gained = []
        for trait_id in trait_ids:
            if self.has_trait(trait_id) or not self.ledger.toggle_trait(trait_id):
                continue
            self.apply_mods(trait_id, True)
            self.mutation_effect(trait_id)
            gained.append(trait_id)
        return gained

    def apply_mods(self, trait_id: str, add: bool, *, powered: bool | None = None) -> None:
        """Add or remove a mutation's current stat modifiers.

        Applying then removing with no change in between restores the
        stats exactly. Remove before toggling the mutation off: once it
        has left the ledger it no longer counts as powered. When that order
        cannot be kept, pass the ``powered`` state the modifiers were
        applied under.
        """
        sign = 1 if add else -1
        strength_changed = False
        for stat in Stat:
            delta = sign * self.ledger.get_mod(trait_id, stat, powered=powered)
            if not delta:
                continue
            setattr(self.stats, stat.max_field, self.stats.get_max(stat) + delta)
            strength_changed = strength_changed or stat is Stat.STR
        if strength_changed:
            self.recalc_hp()

    @invalidates_senses
    def mutation_effect(self, trait_id: str) -> MutationEffectResult:
        """Apply the one-time consequences of gaining a mutation.

        Worn gear covering a restricted body part is pushed off or torn
        apart unless it carries an allowed flag.
        """
        result = MutationEffectResult()
        data = get_trait_database().get(trait_id)
        if data is None:
            return result
        if data.hp_modifier != 1.0:
            self.recalc_hp()
        if not data.restricts_gear:
            return result

        def misfits(article: Item) -> bool:
            return any(article.covers_part(bp) for bp in data.restricts_gear) and not (
                article.flags & data.allowed_gear_flags
            )

        removed = self.possessions.remove_worn_items_with(misfits)
        for article in removed:
            logger.info(
                "gear_destroyed" if data.destroys_gear else "gear_pushed_off",
                trait_id=trait_id,
                type_id=article.type_id,
            )
        if data.destroys_gear:
            result.destroyed = removed
        else:
            result.dropped = removed
        return result

    @invalidates_senses
    def mutation_loss_effect(self, trait_id: str) -> None:
        data = get_trait_database().get(trait_id)
        if data is not None and data.hp_modifier != 1.0:
            self.recalc_hp()

    def _needs_exhausted(self, data: MutationData) -> bool:
        limits = get_settings().mutation
        return (
            (data.hunger and self.hunger > limits.max_hunger)
            or (data.thirst and self.thirst > limits.max_thirst)
            or (data.fatigue and self.fatigue > limits.max_fatigue)
        )

    def _pay_upkeep(self, data: MutationData) -> bool:
        """Charge a mutation's cost; returns whether a limit was exceeded."""
        if data.hunger:
            self.hunger += data.cost
        if data.thirst:
            self.thirst += data.cost
        if data.fatigue:
            self.fatigue += data.cost
        return self._needs_exhausted(data)

    def _set_powered(self, trait_id: str, powered: bool) -> None:
        self.apply_mods(trait_id, False)
        self.ledger.my_mutations[trait_id].powered = powered
        self.apply_mods(trait_id, True)

    @invalidates_senses
    def activate_mutation(self, trait_id: str) -> bool:
        """Switch on an activatable mutation, paying its cost up front."""
        state = self.ledger.my_mutations.get(trait_id)
        data = get_trait_database().get(trait_id)
        if state is None or data is None or not data.activated or state.powered:
            return False
        if self._needs_exhausted(data):
            logger.info("mutation_too_exhausted", trait_id=trait_id)
            return False
        self._pay_upkeep(data)
        self._set_powered(trait_id, True)
        state.charge = data.cooldown
        logger.debug("mutation_activated", trait_id=trait_id)
        return True

    @invalidates_senses
    def deactivate_mutation(self, trait_id: str) -> bool:
        state = self.ledger.my_mutations.get(trait_id)
        if state is None or not state.powered:
            return False
        self._set_powered(trait_id, False)
        logger.debug("mutation_deactivated", trait_id=trait_id)
        return True

    def process_active_mutations(self) -> None:
        """Advance upkeep countdowns by one turn.

        Countdowns only run while powered. When one reaches zero the cost is
        paid and the countdown restarts; a mutation whose upkeep pushes a
        need past its limit is powered down.
        """
        database = get_trait_database()
        with character_context(self.name):
            for trait_id, state in list(self.ledger.my_mutations.items()):
                self._tick_upkeep(database, trait_id, state)

    def _tick_upkeep(self, database: TraitDatabase, trait_id: str, state: TraitData) -> None:
        if not state.powered:
            return
        if state.charge > 0:
            state.charge -= 1
        if state.charge > 0:
            return
        data = database.get(trait_id)
        if data is None or data.cost == 0:
            return
        exhausted = self._pay_upkeep(data)
        state.charge = data.cooldown
        if exhausted:
            logger.info("mutation_upkeep_exhausted", trait_id=trait_id)
            self.deactivate_mutation(trait_id)

    # =========================================================================
    # Health
    # =========================================================================

    def recalc_hp(self) -> None:
        """Recompute maximum hit points, shifting current hit points by the
        same amount and clamping them to the new maximum.
        """
        settings = get_settings().health
        database = get_trait_database()
        multiplier = math.prod(
            data.hp_modifier
            for data in (database.get(trait_id) for trait_id in self.ledger.my_mutations)
            if data is not None
        )
        new_max = max(1, int((settings.base_hp + self.stats.str_max * settings.hp_per_strength) * multiplier))
        for part in HpPart:
            old_max = self.hp_max.get(part, new_max)
            old_cur = self.hp_cur.get(part, old_max)
            self.hp_max[part] = new_max
            self.hp_cur[part] = min(max(old_cur + new_max - old_max, 0), new_max)

    # =========================================================================
    # Effects and Bionics
    # =========================================================================

    def _effect_blocker(self, effect_id: str) -> str | None:
        database = get_trait_database()
        for trait_id in self.ledger.my_mutations:
            data = database.get(trait_id)
            if data is not None and effect_id in data.effect_immunities:
                return trait_id
        return None

    @invalidates_senses
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
        """Apply an effect unless a trait grants immunity to it.

        ``force`` skips the immunity check.

        Returns:
            The stored effect, or None when blocked.
        """
        if not force:
            blocker = self._effect_blocker(effect_id)
            if blocker is not None:
                logger.debug("effect_blocked", effect_id=effect_id, trait_id=blocker)
                return None
        return super().add_effect(effect_id, duration, bp, permanent, intensity, force, stat_mods)

    @invalidates_senses
    def remove_effect(self, effect_id: str, bp: BodyPart | None = None) -> bool:
        return super().remove_effect(effect_id, bp)

    def get_bionic(self, bionic_id: str) -> Bionic | None:
        for bionic in self.bionics:
            if bionic.bionic_id == bionic_id:
                return bionic
        return None

    def has_bionic(self, bionic_id: str) -> bool:
        return self.get_bionic(bionic_id) is not None

    def has_active_bionic(self, bionic_id: str) -> bool:
        bionic = self.get_bionic(bionic_id)
        return bionic is not None and bionic.powered

    @invalidates_senses
    def add_bionic(self, bionic_id: str) -> bool:
        if self.has_bionic(bionic_id):
            return False
        self.bionics.append(Bionic(bionic_id=bionic_id))
        return True

    @invalidates_senses
    def remove_bionic(self, bionic_id: str) -> bool:
        kept = [bionic for bionic in self.bionics if bionic.bionic_id != bionic_id]
        removed = len(kept) != len(self.bionics)
        self.bionics = kept
        return removed

    @invalidates_senses
    def activate_bionic(self, bionic_id: str) -> bool:
        bionic = self.get_bionic(bionic_id)
        if bionic is None or bionic.powered:
            return False
        bionic.powered = True
        return True

    @invalidates_senses
    def deactivate_bionic(self, bionic_id: str) -> bool:
        bionic = self.get_bionic(bionic_id)
        if bionic is None or not bionic.powered:
            return False
        bionic.powered = False
        return True

    # =========================================================================
    # Senses
    # =========================================================================

    def invalidate_senses(self) -> None:
        self._senses.mark_dirty()

    def _sensory_inputs(self) -> tuple[Any, ...]:
        """Fingerprint of everything the sight rules read."""
        return (
            self.underwater,
            tuple((effect.effect_id, effect.bp) for effect in self.effects),
            tuple((bionic.bionic_id, bionic.powered) for bionic in self.bionics),
            frozenset(self.ledger.my_traits),
            frozenset((trait_id, state.powered) for trait_id, state in self.ledger.my_mutations.items()),
            tuple((article.type_id, frozenset(article.flags)) for article in self.possessions.worn),
        )

    def recalc_sight_limits(self) -> None:
        """Recompute the cached vision modes and sight distance now."""
        modes, sight_max = vision.compute_sight_limits(self)
        self._senses.update(modes, sight_max, self._sensory_inputs())
        logger.debug("sight_recalculated", character=self.name, vision_modes=int(modes), sight_max=sight_max)

    def _fresh_senses(self) -> SensoryCache:
        if self._senses.is_stale(self._sensory_inputs()):
            self.recalc_sight_limits()
        return self._senses

    @property
    def vision_modes(self) -> VisionMode:
        return self._fresh_senses().vision_modes

    @property
    def sight_max(self) -> int:
        return self._fresh_senses().sight_max

    def has_nv(self) -> bool:
        return bool(self.vision_modes & NIGHT_VISION_MODES)

    def get_vision_threshold(self, light_level: float) -> float:
        return vision.vision_threshold(
            self.vision_modes,
            light_level,
            self.get_per(),
            self.encumbrance(BodyPart.EYES),
        )

    # =========================================================================
    # Skills and Lifecycle
    # =========================================================================

    def skill_level(self, ident: str) -> SkillLevel:
        """Mutable skill record, created at level 0 on first use."""
        return self.skills.setdefault(ident, SkillLevel())

    def get_skill_level(self, ident: str) -> int:
        skill = self.skills.get(ident)
        return skill.level if skill is not None else 0

    def empty_skills(self) -> None:
        self.skills = {}

    def set_turn_died(self, turn: int) -> None:
        """Record the turn of death; later calls are ignored."""
        if self.turn_died == -1:
            self.turn_died = turn

    @invalidates_senses
    def normalize(self) -> None:
        """Reset derived state of a freshly built character.

        The wielded item, if any, is discarded.
        """
        self.possessions.weapon = Item.null()
        self.reset_stats()
        self.recalc_hp()

    # =========================================================================
    # Persistence
    # =========================================================================

    def store(self) -> dict[str, Any]:
        """JSON-compatible snapshot of the character."""
        return self.model_dump(mode="json")

    @classmethod
    def load(cls, data: dict[str, Any]) -> Character:
        """Rebuild a character from :meth:`store` output.

        The sensory cache starts dirty.
        """
        return cls.model_validate(data)


__all__ = [
    "Character",
    "PickupResult",
    "MutationEffectResult",
]
