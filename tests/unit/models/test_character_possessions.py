"""Tests for the character-level possession API."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from creature_state.models.character import Character
from creature_state.models.enums import ArtifactEffect, BodyPart
from creature_state.models.item import Item


class TestPositions:
    """Tests for position addressing."""

    def test_worn_position_mapping_is_self_inverse(self) -> None:
        for index in range(4):
            position = Character.worn_position_to_index(index)
            assert position == -2 - index
            assert Character.worn_position_to_index(position) == index

    def test_positions_of_each_root(self, character: Character, make_item: Callable[..., Item]) -> None:
        rock = character.i_add(make_item("rock"))
        hat = character.i_add(make_item("hat", covers={BodyPart.HEAD}))
        sword = character.i_add(make_item("sword"))
        character.wear(hat)
        character.wield(sword)

        assert character.get_item_position(rock) == 0
        assert character.get_item_position(hat) == -2
        assert character.get_item_position(sword) == -1
        assert character.i_at(-1) is sword
        assert character.i_at(-2) is hat
        assert character.i_at(0) is rock

    def test_invalid_positions_give_null(self, character: Character) -> None:
        assert character.i_at(3).is_null
        assert character.i_at(-7).is_null
        assert character.i_rem(3).is_null
        assert character.i_rem(-5).is_null
        assert character.get_item_position(Item(type_id="stray")) is None


class TestAddAndRemove:
    """Tests for i_add, i_rem and friends."""

    def test_i_add_records_last_item(self, character: Character, make_item: Callable[..., Item]) -> None:
        stored = character.i_add(make_item("apple"))

        assert stored.invlet == "a"
        assert character.last_item == "apple"

    def test_i_rem_by_identity_takes_contents(
        self, character: Character, backpack: Item
    ) -> None:
        character.i_add(backpack)
        canteen = backpack.contents[0]

        removed = character.i_rem(canteen)

        assert removed is canteen
        assert removed.contents[0].type_id == "water"
        assert backpack.contents == []

    def test_i_rem_unknown_item(self, character: Character, make_item: Callable[..., Item]) -> None:
        assert character.i_rem(make_item("ghost")).is_null

    def test_i_rem_keep_contents(self, character: Character, backpack: Item) -> None:
        character.i_add(backpack)

        removed = character.i_rem_keep_contents(0)

        assert removed is backpack
        assert backpack.contents == []
        assert [item.type_id for item in character.possessions.inventory.items] == ["canteen"]

    def test_i_add_or_drop_splits_when_full(self, character: Character, make_item: Callable[..., Item]) -> None:
        """Test copies beyond the volume limit are returned as dropped."""
        brick = make_item("brick", base_volume=1)

        result = character.i_add_or_drop(brick, qty=4)

        assert len(result.added) == 2
        assert len(result.dropped) == 2
        assert result.added[0] is brick
        assert not result.accepted
        assert len({item.uid for item in result.added + result.dropped}) == 4

    def test_i_add_or_drop_accepts(self, character: Character, make_item: Callable[..., Item]) -> None:
        result = character.i_add_or_drop(make_item("feather"), qty=3)

        assert result.accepted
        assert character.possessions.inventory.size == 3

    def test_scenario_add_find_remove(self, character: Character, make_item: Callable[..., Item]) -> None:
        item_x = make_item("x")
        character.i_add(item_x)

        assert character.has_item_with(lambda it: it is item_x)
        removed = character.remove_items_with(lambda it: it is item_x)
        assert len(removed) == 1 and removed[0] is item_x
        assert not character.has_item_with(lambda it: it is item_x)


class TestWieldAndWear:
    """Tests for wield, wear and takeoff."""

    def test_wield_swaps_weapon_into_inventory(
        self, character: Character, make_item: Callable[..., Item]
    ) -> None:
        knife = character.i_add(make_item("knife"))
        axe = character.i_add(make_item("axe"))

        assert character.wield(knife)
        assert character.wield(axe)

        assert character.possessions.weapon is axe
        assert character.possessions.inventory.items == [knife]
        assert character.possessions.inventory.items[0] is knife

    def test_wield_from_inside_container(self, character: Character, make_item: Callable[..., Item]) -> None:
        pistol = make_item("pistol")
        holster = character.i_add(make_item("holster", pistol))

        character.wield(pistol)

        assert character.possessions.weapon is pistol
        assert holster.contents == []
        character.possessions.check_invariants()

    def test_wield_null_frees_hands(self, character: Character, make_item: Callable[..., Item]) -> None:
        character.wield(make_item("club"))

        assert character.wield(Item.null())
        assert character.possessions.weapon.is_null
        assert character.possessions.inventory.items[0].type_id == "club"

    def test_remove_weapon(self, character: Character, make_item: Callable[..., Item]) -> None:
        club = make_item("club")
        character.wield(club)

        assert character.remove_weapon() is club
        assert character.remove_weapon().is_null

    def test_wear_and_takeoff(self, character: Character, make_item: Callable[..., Item]) -> None:
        gloves = character.i_add(make_item("gloves", covers={BodyPart.HAND_L, BodyPart.HAND_R}))

        assert character.wear(gloves)
        assert not character.wear(gloves)
        assert character.is_worn(gloves)
        assert character.is_wearing("gloves")
        assert character.is_wearing_on_bp(BodyPart.HAND_L)
        assert character.possessions.inventory.size == 0

        assert character.takeoff(gloves)
        assert not character.takeoff(gloves)
        assert not character.is_wearing_on_bp(BodyPart.HAND_L)
        assert character.possessions.inventory.items[0] is gloves

    def test_encumbrance_by_part(self, character: Character, make_item: Callable[..., Item]) -> None:
        character.wear(make_item("goggles", covers={BodyPart.EYES}, encumbrance=10))
        character.wear(make_item("mask", covers={BodyPart.EYES, BodyPart.MOUTH}, encumbrance=5))

        assert character.encumbrance(BodyPart.EYES) == 15
        assert character.encumbrance(BodyPart.MOUTH) == 5
        assert character.encumbrance(BodyPart.TORSO) == 0


class TestItemQueries:
    """Tests for flag, mission, activity and artifact queries."""

    def test_worn_with_flag(self, character: Character, make_item: Callable[..., Item]) -> None:
        character.wear(make_item("blindfold", flags={"BLIND"}))
        assert character.worn_with_flag("BLIND")
        assert not character.worn_with_flag("FIX_NEARSIGHT")

    def test_has_active_item(self, character: Character, make_item: Callable[..., Item]) -> None:
        character.i_add(make_item("flashlight"))
        assert not character.has_active_item("flashlight")
        character.i_add(make_item("flashlight", active=True))
        assert character.has_active_item("flashlight")

    def test_mission_items(self, character: Character, make_item: Callable[..., Item]) -> None:
        letter = make_item("letter", mission_id=7)
        character.i_add(make_item("satchel", letter, make_item("pen")))

        assert character.has_mission_item(7)
        assert not character.has_mission_item(-1)

        removed = character.remove_mission_items(7)

        assert removed == [letter] and removed[0] is letter
        assert not character.has_mission_item(7)
        assert character.has_item_with(lambda it: it.type_id == "pen")

    def test_artifact_anywhere(self, character: Character, make_item: Callable[..., Item]) -> None:
        charm = make_item("charm", artifact_effects={ArtifactEffect.CARRY_MORE})
        character.wear(make_item("necklace", charm))

        assert character.has_artifact_with(ArtifactEffect.CARRY_MORE)
        assert not character.has_artifact_with(ArtifactEffect.GLOW)


@pytest.mark.parametrize("position", [0, -1, -2])
def test_i_rem_by_position_keeps_tree_consistent(
    character: Character, make_item: Callable[..., Item], position: int
) -> None:
    character.i_add(make_item("rock", make_item("moss")))
    character.wield(character.i_add(make_item("spear")))
    character.wear(character.i_add(make_item("cloak")))
    before = sum(1 for _ in character.possessions.all_items())

    removed = character.i_rem(position)

    after = sum(1 for _ in character.possessions.all_items())
    assert not removed.is_null
    assert after + sum(1 for _ in removed.walk()) == before
    character.possessions.check_invariants()
