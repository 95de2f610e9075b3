"""Item nodes and the recursive containment algorithms.

An :class:`Item` exclusively owns the items in its ``contents`` list, so
a creature's possessions form a tree. Every search in this module is a
depth-first walk over that tree; extraction is expressed as a transform
over a sibling list that returns the nodes to keep and the nodes removed,
which the caller assigns back in one step.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from creature_state.core.constants import NO_MISSION, NULL_ITEM_ID
from creature_state.models.enums import ArtifactEffect, BodyPart


class Item(BaseModel):
    """A single possessable item, possibly containing other items."""

    model_config = ConfigDict(frozen=False, extra="ignore", use_enum_values=False)

    uid: UUID = Field(default_factory=uuid4)
    type_id: str = Field(description="Reference to the item type definition")
    name: str = Field(default="", description="Display name")

    base_weight: int = Field(default=0, ge=0, description="Own weight in grams")
    base_volume: int = Field(default=0, ge=0, description="Own volume")
    storage: int = Field(default=0, ge=0, description="Volume it provides when worn")
    rigid: bool = Field(default=False, description="Contents do not add to its volume")

    flags: set[str] = Field(default_factory=set)
    covers: set[BodyPart] = Field(default_factory=set, description="Body parts covered when worn")
    encumbrance: int = Field(default=0, ge=0)

    active: bool = Field(default=False, description="Whether the item is switched on")
    mission_id: int = Field(default=NO_MISSION)
    artifact_effects: set[ArtifactEffect] = Field(default_factory=set)

    invlet: str | None = Field(default=None, description="Inventory shortcut letter")
    contents: list[Item] = Field(default_factory=list)

    @classmethod
    def null(cls) -> Item:
        """Build a fresh empty item, the content of an empty slot."""
        return cls(type_id=NULL_ITEM_ID, name="none")

    @property
    def is_null(self) -> bool:
        return self.type_id == NULL_ITEM_ID

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def covers_part(self, bp: BodyPart) -> bool:
        return bp in self.covers

    def weight(self) -> int:
        """Total weight including everything inside."""
        return self.base_weight + sum(child.weight() for child in self.contents)

    def volume(self) -> int:
        """Total volume; rigid containers keep their own volume when filled."""
        if self.rigid:
            return self.base_volume
        return self.base_volume + sum(child.volume() for child in self.contents)

    # =========================================================================
    # Recursive Queries
    # =========================================================================

    def walk(self) -> Iterator[Item]:
        """Yield this item and every nested item, depth-first pre-order."""
        yield self
        for child in self.contents:
            yield from child.walk()

    def has_item_with(self, predicate: ItemPredicate) -> bool:
        """Whether this item or anything inside it matches."""
        return any(predicate(node) for node in self.walk())

    def items_with(self, predicate: ItemPredicate) -> list[Item]:
        """Every matching node in this subtree, this item included."""
        return [node for node in self.walk() if predicate(node)]

    def remove_items_with(self, predicate: ItemPredicate) -> list[Item]:
        """Remove matching items from the contents of this item.

        The item itself is never tested. Un-matched contents of a removed
        item move up into the slot it occupied.

        Returns:
            The removed items, each with empty contents.
        """
        self.contents, removed = extract_items_with(self.contents, predicate)
        return removed


ItemPredicate = Callable[[Item], bool]
"""Side-effect free test applied to items during searches."""


def extract_items_with(
    nodes: list[Item],
    predicate: ItemPredicate,
    *,
    rehome: bool = True,
) -> tuple[list[Item], list[Item]]:
    """Split a sibling list into the nodes to keep and the nodes removed.

    Every un-matched node has its own contents filtered recursively, so
    removal is total. With ``rehome`` a matched node leaves with empty
    contents and its surviving descendants take its place in the kept list,
    in order. Without ``rehome`` a matched node leaves whole and is not
    searched.

    Args:
        nodes: Sibling items; not modified.
        predicate: Match test.
        rehome: Whether removed nodes give up their un-matched contents.

    Returns:
        ``(kept, removed)``. Removed items are in depth-first order.
    """
    kept: list[Item] = []
    removed: list[Item] = []
    for node in nodes:
        if predicate(node):
            if rehome:
                children_kept, children_removed = extract_items_with(
                    node.contents, predicate, rehome=True
                )
                node.contents = []
                removed.append(node)
                removed.extend(children_removed)
                kept.extend(children_kept)
            else:
                removed.append(node)
            continue
        node.contents, children_removed = extract_items_with(
            node.contents, predicate, rehome=rehome
        )
        removed.extend(children_removed)
        kept.append(node)
    return kept, removed


def count_items(nodes: list[Item]) -> int:
    """Number of nodes in the given subtrees."""
    return sum(1 for node in nodes for _ in node.walk())


__all__ = [
    "Item",
    "ItemPredicate",
    "extract_items_with",
    "count_items",
]
