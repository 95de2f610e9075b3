"""Tests for the trait database and the mutation ledger."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from creature_state.core.exceptions import InvariantViolationError, TraitDatabaseError
from creature_state.models.enums import Stat
from creature_state.models.mutations import MutationLedger
from creature_state.models.traits import (
    TraitData,
    TraitDatabase,
    clear_trait_database,
    get_trait_database,
)


class TestTraitDatabase:
    """Tests for loading and looking up definitions."""

    def test_load_and_get(self) -> None:
        db = TraitDatabase([{"id": "HULK", "activated": True, "mods": {"STR": 2}}])

        assert "HULK" in db
        assert len(db) == 1
        assert db.get("HULK").mods == {Stat.STR: 2}
        assert db.get("MISSING") is None

    def test_duplicate_rejected(self) -> None:
        db = TraitDatabase([{"id": "HULK"}])

        with pytest.raises(TraitDatabaseError) as exc_info:
            db.load([{"id": "HULK"}], source_file="more.json")

        assert exc_info.value.details["trait_id"] == "HULK"
        assert exc_info.value.details["source_file"] == "more.json"

    def test_malformed_entry_rejected(self) -> None:
        with pytest.raises(TraitDatabaseError) as exc_info:
            TraitDatabase([{"id": "BAD", "cost": -4}])

        assert exc_info.value.details["trait_id"] == "BAD"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(TraitDatabaseError):
            TraitDatabase([{"id": "BAD", "colour": "green"}])

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.json"
        path.write_text(json.dumps([{"id": "TOUGH", "hp_modifier": 1.2}]), encoding="utf-8")

        db = TraitDatabase()
        db.load_json(path)

        assert db.get("TOUGH").hp_modifier == 1.2

    def test_load_json_requires_list(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.json"
        path.write_text(json.dumps({"id": "TOUGH"}), encoding="utf-8")

        with pytest.raises(TraitDatabaseError):
            TraitDatabase().load_json(path)

    def test_shared_database_loads_configured_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "traits.json"
        path.write_text(json.dumps([{"id": "BIRD_EYE"}]), encoding="utf-8")
        monkeypatch.setenv("CREATURE_STATE_TRAIT_DATA_PATH", str(path))

        assert get_trait_database().is_defined("BIRD_EYE")
        assert get_trait_database() is get_trait_database()

        first = get_trait_database()
        clear_trait_database()
        assert get_trait_database() is not first


@pytest.mark.usefixtures("trait_db")
class TestMutationLedger:
    """Tests for ledger membership and lookups."""

    def test_toggle_trait_mirrors_membership(self) -> None:
        ledger = MutationLedger()

        assert ledger.toggle_trait("STRONGBACK") is True
        assert ledger.has_base_trait("STRONGBACK")
        assert ledger.has_trait("STRONGBACK")

        assert ledger.toggle_trait("STRONGBACK") is False
        assert not ledger.has_base_trait("STRONGBACK")
        assert not ledger.has_trait("STRONGBACK")

    def test_toggle_undefined_is_noop(self) -> None:
        ledger = MutationLedger()

        assert ledger.toggle_trait("NOT_A_TRAIT") is False
        assert ledger.toggle_mutation("NOT_A_TRAIT") is False
        assert ledger.get_mutations() == []

    def test_toggle_mutation_leaves_base_traits(self) -> None:
        ledger = MutationLedger()
        ledger.toggle_trait("MYOPIC")

        assert ledger.toggle_mutation("MYOPIC") is False
        assert ledger.has_base_trait("MYOPIC")
        assert not ledger.has_trait("MYOPIC")

    def test_starts_active_mutation_is_powered(self) -> None:
        ledger = MutationLedger()
        ledger.toggle_mutation("NIGHTVISION2")

        assert ledger.has_active_mutation("NIGHTVISION2")

    def test_activatable_mutations_get_distinct_keys(self) -> None:
        ledger = MutationLedger()
        ledger.toggle_mutation("HULK")
        ledger.toggle_mutation("ADRENALINE")
        ledger.toggle_mutation("STRONGBACK")

        assert ledger.trait_by_invlet("a") == "HULK"
        assert ledger.trait_by_invlet("b") == "ADRENALINE"
        assert ledger.my_mutations["STRONGBACK"].key == " "
        assert ledger.trait_by_invlet(" ") == ""
        assert ledger.trait_by_invlet("z") == ""

    def test_get_mod_includes_active_part(self) -> None:
        ledger = MutationLedger()
        ledger.toggle_mutation("HULK")

        assert ledger.get_mod("HULK", Stat.STR) == 1
        ledger.my_mutations["HULK"].powered = True
        assert ledger.get_mod("HULK", Stat.STR) == 5
        assert ledger.get_mod("HULK", "DEX") == -2

    def test_get_mod_powered_override(self) -> None:
        ledger = MutationLedger()

        assert ledger.get_mod("HULK", Stat.STR) == 1
        assert ledger.get_mod("HULK", Stat.STR, powered=True) == 5
        assert ledger.get_mod("HULK", Stat.STR, powered=False) == 1

    def test_get_mod_unknown_is_zero(self) -> None:
        ledger = MutationLedger()

        assert ledger.get_mod("NOT_A_TRAIT", Stat.STR) == 0
        assert ledger.get_mod("HULK", "LUCK") == 0

    def test_sorted_listings(self) -> None:
        ledger = MutationLedger()
        ledger.toggle_trait("TOUGH")
        ledger.toggle_trait("BADBACK")
        ledger.toggle_mutation("CHITIN")

        assert ledger.get_base_traits() == ["BADBACK", "TOUGH"]
        assert ledger.get_mutations() == ["BADBACK", "CHITIN", "TOUGH"]

        ledger.empty_traits()
        assert ledger.get_mutations() == []

    def test_check_invariants(self) -> None:
        ledger = MutationLedger()
        ledger.toggle_mutation("HULK")
        ledger.check_invariants()

        ledger.my_mutations["GHOST"] = TraitData()
        ledger.my_mutations["STRONGBACK"] = TraitData(key="a", powered=True)

        with pytest.raises(InvariantViolationError) as exc_info:
            ledger.check_invariants()

        violations = exc_info.value.violations
        assert any("GHOST" in violation for violation in violations)
        assert any("share key" in violation for violation in violations)
        assert any("cannot be activated" in violation for violation in violations)
