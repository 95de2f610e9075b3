"""The carried-items bag.

Items in the bag are ordered and each may carry a shortcut letter. The
letter is a UI convenience: lookups that matter for correctness go by
identity or by position.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import Field

from creature_state.core.constants import INVLETS
from creature_state.models.base import Component
from creature_state.models.item import Item, ItemPredicate, extract_items_with


def pick_invlet(
    item: Item,
    taken: set[str],
    preferred: Mapping[str, str] | None = None,
) -> str | None:
    """Choose a free shortcut letter for an item.

    The item's current letter wins if it is free, then a free letter
    remembered for the item's type, then the first free letter.

    Args:
        item: Item that needs a letter.
        taken: Letters already in use.
        preferred: Letter to type id preferences.

    Returns:
        A free letter, or None when every letter is taken.
    """
    if item.invlet and item.invlet not in taken:
        return item.invlet
    for letter, type_id in (preferred or {}).items():
        if type_id == item.type_id and letter not in taken:
            return letter
    for letter in INVLETS:
        if letter not in taken:
            return letter
    return None


class Inventory(Component):
    """Bag of carried items.

    Attributes:
        items: Top-level items in insertion order.
    """

    items: list[Item] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.items)

    def invlets(self) -> set[str]:
        """Letters used by items in the bag."""
        return {item.invlet for item in self.items if item.invlet}

    def add(self, item: Item, taken: set[str] | None = None, preferred: Mapping[str, str] | None = None) -> Item:
        """Append an item, assigning a letter if one is free.

        Args:
            item: Item to store. Ownership passes to the bag.
            taken: Letters in use outside the bag (weapon, worn items).
            preferred: Letter to type id preferences.

        Returns:
            The stored item.
        """
        in_use = self.invlets() | (taken or set())
        item.invlet = pick_invlet(item, in_use, preferred)
        self.items.append(item)
        return item

    def position_of(self, item: Item) -> int | None:
        """Index of a top-level item by identity."""
        for index, candidate in enumerate(self.items):
            if candidate is item:
                return index
        return None

    def item_at(self, position: int) -> Item | None:
        if 0 <= position < len(self.items):
            return self.items[position]
        return None

    def remove(self, item: Item) -> Item | None:
        """Remove a top-level item by identity. Contents travel with it."""
        position = self.position_of(item)
        if position is None:
            return None
        return self.items.pop(position)

    def remove_at(self, position: int) -> Item | None:
        if 0 <= position < len(self.items):
            return self.items.pop(position)
        return None

    def has_item_with(self, predicate: ItemPredicate) -> bool:
        return any(item.has_item_with(predicate) for item in self.items)

    def items_with(self, predicate: ItemPredicate) -> list[Item]:
        result: list[Item] = []
        for item in self.items:
            result.extend(item.items_with(predicate))
        return result

    def remove_items_with(
        self,
        predicate: ItemPredicate,
        taken: set[str] | None = None,
        preferred: Mapping[str, str] | None = None,
        *,
        rehome: bool = True,
    ) -> list[Item]:
        """Remove every matching item in the bag, at any depth.

        Surviving contents of a removed top-level item end up in the bag at
        the position the item held and are given letters. With
        ``rehome=False`` contents leave with the removed item.
        """
        kept, removed = extract_items_with(self.items, predicate, rehome=rehome)
        known = {id(item) for item in self.items}
        in_use = {item.invlet for item in kept if item.invlet and id(item) in known}
        in_use |= taken or set()
        for item in kept:
            if id(item) not in known:
                item.invlet = pick_invlet(item, in_use, preferred)
                if item.invlet:
                    in_use.add(item.invlet)
        self.items = kept
        return removed

    def weight(self) -> int:
        return sum(item.weight() for item in self.items)

    def volume(self) -> int:
        return sum(item.volume() for item in self.items)


__all__ = [
    "Inventory",
    "pick_invlet",
]
