"""The possession tree: wielded weapon, worn items and carried bag.

Every item a creature owns hangs off exactly one of three roots, or sits
inside exactly one other item. Searches cover all three roots and recurse
into contents. References returned by searches stay valid only until the
next structural change to the tree.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import Field

from creature_state.core.exceptions import InvariantViolationError
from creature_state.models.base import Component
from creature_state.models.inventory import Inventory
from creature_state.models.item import Item, ItemPredicate, extract_items_with


class PossessionTree(Component):
    """Ownership roots of one creature.

    Attributes:
        weapon: Wielded item; the empty item when unarmed.
        worn: Worn items in layering order.
        inventory: Carried bag.
        assigned_invlets: Remembered shortcut letter to item type id.
    """

    weapon: Item = Field(default_factory=Item.null)
    worn: list[Item] = Field(default_factory=list)
    inventory: Inventory = Field(default_factory=Inventory)
    assigned_invlets: dict[str, str] = Field(default_factory=dict)

    def top_level_items(self) -> Iterator[Item]:
        """Inventory items, then the weapon if any, then worn items."""
        yield from self.inventory.items
        if not self.weapon.is_null:
            yield self.weapon
        yield from self.worn

    def all_items(self) -> Iterator[Item]:
        """Every owned item at any depth."""
        for root in self.top_level_items():
            yield from root.walk()

    # =========================================================================
    # Searches
    # =========================================================================

    def has_item_with(self, predicate: ItemPredicate) -> bool:
        """Whether any owned item, at any depth, matches."""
        if self.inventory.has_item_with(predicate):
            return True
        if not self.weapon.is_null and self.weapon.has_item_with(predicate):
            return True
        return any(article.has_item_with(predicate) for article in self.worn)

    def items_with(self, predicate: ItemPredicate) -> list[Item]:
        """All matching items: inventory first, then weapon, then worn."""
        result = self.inventory.items_with(predicate)
        if not self.weapon.is_null:
            result.extend(self.weapon.items_with(predicate))
        for article in self.worn:
            result.extend(article.items_with(predicate))
        return result

    def is_worn(self, item: Item) -> bool:
        """Identity check against the worn list only."""
        return any(article is item for article in self.worn)

    def allocated_invlets(self) -> set[str]:
        """Letters in use by inventory, weapon and worn items."""
        return self.inventory.invlets() | self._letters_outside_bag()

    def _letters_outside_bag(self) -> set[str]:
        letters: set[str] = set()
        if not self.weapon.is_null and self.weapon.invlet:
            letters.add(self.weapon.invlet)
        letters.update(article.invlet for article in self.worn if article.invlet)
        return letters

    # =========================================================================
    # Extraction
    # =========================================================================

    def add_to_inventory(self, item: Item) -> Item:
        return self.inventory.add(item, self._letters_outside_bag(), self.assigned_invlets)

    def remove_items_with(self, predicate: ItemPredicate, *, rehome: bool = True) -> list[Item]:
        """Remove every matching item wherever it is.

        Surviving contents of a removed weapon or worn item are moved into
        the inventory. With ``rehome=False`` matched items leave with their
        contents and are not searched.

        Returns:
            The removed items.
        """
        result = self.inventory.remove_items_with(
            predicate, self._letters_outside_bag(), self.assigned_invlets, rehome=rehome
        )
        orphans: list[Item] = []

        worn_kept: list[Item] = []
        for article in self.worn:
            if predicate(article):
                result.append(article)
                if rehome:
                    orphans_kept, orphans_removed = extract_items_with(article.contents, predicate)
                    article.contents = []
                    result.extend(orphans_removed)
                    orphans.extend(orphans_kept)
            else:
                article.contents, removed = extract_items_with(
                    article.contents, predicate, rehome=rehome
                )
                result.extend(removed)
                worn_kept.append(article)
        self.worn = worn_kept

        if not self.weapon.is_null:
            weapon_kept, removed = extract_items_with([self.weapon], predicate, rehome=rehome)
            result.extend(removed)
            if not any(node is self.weapon for node in weapon_kept):
                self.weapon = Item.null()
                orphans.extend(weapon_kept)

        for orphan in orphans:
            self.add_to_inventory(orphan)
        return result

    def remove_worn_items_with(self, predicate: ItemPredicate) -> list[Item]:
        """Remove matching worn items without looking at their contents.

        Contents of a removed item stay inside it. Contents of a kept item
        are never touched, even when they would match.
        """
        removed: list[Item] = []
        kept: list[Item] = []
        for article in self.worn:
            (removed if predicate(article) else kept).append(article)
        self.worn = kept
        return removed

    def remove_weapon(self) -> Item:
        """Take the weapon out of the hands; returns the empty item when unarmed."""
        weapon = self.weapon
        self.weapon = Item.null()
        return weapon

    # =========================================================================
    # Aggregates
    # =========================================================================

    def weight(self) -> int:
        return sum(item.weight() for item in self.top_level_items())

    def volume(self) -> int:
        return sum(item.volume() for item in self.top_level_items())

    def check_invariants(self) -> None:
        """Verify single ownership across the whole tree.

        Raises:
            InvariantViolationError: If an item is reachable twice, the tree
                has a cycle, or an empty item sits anywhere but the weapon slot.
        """
        violations: list[str] = []
        seen: set[int] = set()

        def visit(node: Item, path: set[int]) -> None:
            if id(node) in path:
                violations.append(f"cycle through {node.type_id} ({node.uid})")
                return
            if id(node) in seen:
                violations.append(f"{node.type_id} ({node.uid}) is owned twice")
                return
            seen.add(id(node))
            if node.is_null:
                violations.append("empty item stored as a possession")
            for child in node.contents:
                visit(child, path | {id(node)})

        for root in self.top_level_items():
            visit(root, set())
        if violations:
            raise InvariantViolationError("Possession tree is inconsistent", violations=violations)


__all__ = ["PossessionTree"]
