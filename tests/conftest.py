"""Pytest configuration and shared fixtures.

This module provides common fixtures for the creature-state test suite:
cache resets, a sample trait database and item factories.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from creature_state.models import BodyPart, Character, Item, Stat, TraitDatabase


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# =============================================================================
# Cache Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from creature_state.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_trait_database() -> Generator[None, None, None]:
    """Give each test a fresh, empty shared trait database."""
    from creature_state.models.traits import clear_trait_database

    clear_trait_database()
    yield
    clear_trait_database()


# =============================================================================
# Trait Fixtures
# =============================================================================


SAMPLE_TRAITS: list[dict[str, Any]] = [
    {"id": "NIGHTVISION", "name": "Night Vision", "starts_active": True},
    {"id": "NIGHTVISION2", "name": "High Night Vision", "starts_active": True},
    {"id": "NIGHTVISION3", "name": "Full Night Vision", "starts_active": True},
    {"id": "URSINE_EYE", "name": "Ursine Vision", "starts_active": True},
    {"id": "BIRD_EYE", "name": "Bird Eye"},
    {"id": "MYOPIC", "name": "Near-Sighted", "points": -2},
    {"id": "PER_SLIME", "name": "Slime Perception"},
    {"id": "PER_SLIME_OK", "name": "Slime Eyes"},
    {"id": "MEMBRANE", "name": "Nictitating Membrane"},
    {"id": "CEPH_EYES", "name": "Cephalopod Eyes"},
    {"id": "DEBUG_NIGHTVISION", "name": "Debug Night Vision"},
    {"id": "SHELL2", "name": "Roomy Shell", "activated": True},
    {"id": "STRONGBACK", "name": "Strong Back", "weight_capacity_modifier": 1.35},
    {"id": "BADBACK", "name": "Bad Back", "weight_capacity_modifier": 0.65},
    {"id": "PACKMULE", "name": "Packmule", "volume_capacity_bonus": 2},
    {"id": "DISORGANIZED", "name": "Disorganized", "volume_capacity_modifier": 0.5},
    {"id": "STR_UP", "name": "Strong", "mods": {"STR": 2}},
    {"id": "LARGE", "name": "Large", "mods": {"STR": 2, "DEX": -1}},
    {"id": "TOUGH", "name": "Tough", "hp_modifier": 1.2},
    {
        "id": "HULK",
        "name": "Hulk Out",
        "activated": True,
        "cost": 10,
        "cooldown": 2,
        "hunger": True,
        "mods": {"STR": 1},
        "active_mods": {"STR": 4, "DEX": -2},
    },
    {
        "id": "ADRENALINE",
        "name": "Adrenal Burst",
        "activated": True,
        "cost": 5,
        "cooldown": 1,
        "fatigue": True,
    },
    {"id": "CHITIN", "name": "Chitin", "restricts_gear": ["torso"]},
    {
        "id": "CLAWS",
        "name": "Claws",
        "restricts_gear": ["hand_l", "hand_r"],
        "destroys_gear": True,
    },
    {"id": "STEADY_STOMACH", "name": "Steady Stomach", "effect_immunities": ["nausea"]},
]


@pytest.fixture
def trait_db() -> TraitDatabase:
    """Load the sample definitions into the shared trait database."""
    from creature_state.models.traits import get_trait_database

    database = get_trait_database()
    database.load(SAMPLE_TRAITS, source_file="conftest")
    return database


# =============================================================================
# Item Fixtures
# =============================================================================


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Factory for items with sensible defaults.

    Returns:
        Function taking a type id, optional contents and item fields.
    """

    def factory(type_id: str, *contents: Item, **fields: Any) -> Item:
        return Item(type_id=type_id, name=type_id, contents=list(contents), **fields)

    return factory


@pytest.fixture
def backpack(make_item: Callable[..., Item]) -> Item:
    """A soft backpack holding a canteen with water."""
    water = make_item("water", base_weight=250, base_volume=1)
    canteen = make_item("canteen", water, base_weight=150, base_volume=1, rigid=True)
    return make_item(
        "backpack",
        canteen,
        base_weight=600,
        base_volume=4,
        storage=8,
        covers={BodyPart.TORSO},
    )


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def character() -> Character:
    """A plain character with default stats."""
    return Character(name="Ash")


@pytest.fixture
def strong_character() -> Character:
    """A character with strength 10."""
    hero = Character(name="Brick")
    hero.stats.str_max = 10
    return hero


@pytest.fixture
def stat_snapshot() -> Callable[[Character], dict[Stat, int]]:
    """Capture the maximum of every stat."""

    def snapshot(hero: Character) -> dict[Stat, int]:
        return {stat: hero.stats.get_max(stat) for stat in Stat}

    return snapshot
