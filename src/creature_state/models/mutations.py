"""Mutation/trait ledger.

Two sets are tracked side by side:

- ``my_traits``: base traits chosen at character creation.
- ``my_mutations``: every trait or mutation the creature has right now,
  with its activation letter, upkeep countdown and power state.

A base trait usually also has a mutation entry, but the entry can be lost
later (mutating away a starting trait) while the base membership stays.
Having a trait means having a mutation entry. The toggles here change
membership only: stat mods and gain/loss side effects are applied by the
owning character, so that character creation can batch many toggles.
"""

from __future__ import annotations

from pydantic import Field

from creature_state.core.constants import INVLETS, NO_MUTATION_KEY
from creature_state.core.exceptions import InvariantViolationError
from creature_state.core.logging import get_logger
from creature_state.models.base import Component
from creature_state.models.enums import Stat
from creature_state.models.traits import TraitData, TraitDatabase, resolve_database


logger = get_logger(__name__)


class MutationLedger(Component):
    """Which traits a creature has and their runtime state.

    Attributes:
        my_traits: Ids of base (starting) traits.
        my_mutations: Id to runtime state of every trait/mutation present.
    """

    my_traits: set[str] = Field(default_factory=set)
    my_mutations: dict[str, TraitData] = Field(default_factory=dict)

    # =========================================================================
    # Queries
    # =========================================================================

    def has_trait(self, trait_id: str) -> bool:
        return trait_id in self.my_mutations

    def has_base_trait(self, trait_id: str) -> bool:
        return trait_id in self.my_traits

    def has_active_mutation(self, trait_id: str) -> bool:
        data = self.my_mutations.get(trait_id)
        return data is not None and data.powered

    def trait_by_invlet(self, letter: str) -> str:
        """Id of the mutation activated with ``letter``, or an empty string."""
        if letter == NO_MUTATION_KEY:
            return ""
        for trait_id, data in self.my_mutations.items():
            if data.key == letter:
                return trait_id
        return ""

    def get_base_traits(self) -> list[str]:
        return sorted(self.my_traits)

    def get_mutations(self) -> list[str]:
        return sorted(self.my_mutations)

    def get_mod(
        self,
        trait_id: str,
        stat: Stat | str,
        database: TraitDatabase | None = None,
        *,
        powered: bool | None = None,
    ) -> int:
        """Stat modifier a mutation grants right now.

        Includes the active-only part while the mutation is powered. Unknown
        ids and stats give 0. Never changes the ledger.

        The powered state is read from the ledger, so undoing a powered
        mutation's modifiers must happen before the mutation is toggled off.
        Pass ``powered`` to price the modifiers for a state the ledger no
        longer records.
        """
        data = resolve_database(database).get(trait_id)
        if data is None:
            return 0
        try:
            stat = Stat(stat)
        except ValueError:
            return 0
        if powered is None:
            powered = self.has_active_mutation(trait_id)
        return data.get_mod(stat, active=powered)

    # =========================================================================
    # Membership
    # =========================================================================

    def _free_key(self) -> str:
        used = {data.key for data in self.my_mutations.values()}
        for letter in INVLETS:
            if letter not in used:
                return letter
        return NO_MUTATION_KEY

    def _gain(self, trait_id: str, database: TraitDatabase) -> bool:
        data = database.get(trait_id)
        if data is None:
            logger.warning("undefined_trait_toggled", trait_id=trait_id)
            return False
        self.my_mutations[trait_id] = TraitData(
            key=self._free_key() if data.activated else NO_MUTATION_KEY,
            powered=data.starts_active,
        )
        return True

    def toggle_trait(self, trait_id: str, database: TraitDatabase | None = None) -> bool:
        """Flip base-trait membership and mirror it into the mutation set.

        Fires no gain/loss side effects. Turning a trait on requires it to be
        defined; an undefined id is a no-op.

        Returns:
            Whether the creature has the base trait afterwards.
        """
        database = resolve_database(database)
        if trait_id in self.my_traits:
            self.my_traits.discard(trait_id)
            self.my_mutations.pop(trait_id, None)
            logger.debug("trait_toggled", trait_id=trait_id, present=False)
            return False
        if trait_id not in self.my_mutations and not self._gain(trait_id, database):
            return False
        self.my_traits.add(trait_id)
        logger.debug("trait_toggled", trait_id=trait_id, present=True)
        return True

    def toggle_mutation(self, trait_id: str, database: TraitDatabase | None = None) -> bool:
        """Flip mutation membership without gain/loss side effects.

        Used when rebuilding a creature whose side effects were applied long
        ago. Base-trait membership is left alone.

        Returns:
            Whether the creature has the mutation afterwards.
        """
        if trait_id in self.my_mutations:
            del self.my_mutations[trait_id]
            logger.debug("mutation_toggled", trait_id=trait_id, present=False)
            return False
        gained = self._gain(trait_id, resolve_database(database))
        if gained:
            logger.debug("mutation_toggled", trait_id=trait_id, present=True)
        return gained

    def empty_traits(self) -> None:
        """Forget every trait and mutation."""
        self.my_traits = set()
        self.my_mutations = {}

    # =========================================================================
    # Invariants
    # =========================================================================

    def check_invariants(self, database: TraitDatabase | None = None) -> None:
        """Verify the ledger against itself and the trait database.

        Raises:
            InvariantViolationError: If activation letters collide or are
                invalid, an entry has no definition, or a mutation that can
                never be switched on is powered.
        """
        database = resolve_database(database)
        violations: list[str] = []
        keys: dict[str, str] = {}
        for trait_id, state in self.my_mutations.items():
            if state.key != NO_MUTATION_KEY:
                if state.key not in INVLETS:
                    violations.append(f"{trait_id} has invalid key {state.key!r}")
                elif state.key in keys:
                    violations.append(f"{trait_id} and {keys[state.key]} share key {state.key!r}")
                else:
                    keys[state.key] = trait_id
            data = database.get(trait_id)
            if data is None:
                violations.append(f"{trait_id} is not defined")
            elif state.powered and not (data.activated or data.starts_active):
                violations.append(f"{trait_id} is powered but cannot be activated")
        for trait_id in self.my_traits:
            if not database.is_defined(trait_id):
                violations.append(f"base trait {trait_id} is not defined")
        if violations:
            raise InvariantViolationError("Mutation ledger is inconsistent", violations=violations)


__all__ = ["MutationLedger"]
