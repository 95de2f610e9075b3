"""Trait and mutation definitions.

The trait database is read-only content: cost, cooldown, stat-mod tables,
gear conflicts. Creatures store only identifiers and runtime activation
state; everything else is looked up here by id. Content is validated when
it is loaded. Lookups of unknown ids at runtime return None and callers
treat that as "no effect".

Example:
    >>> db = TraitDatabase()
    >>> db.load([{"id": "NIGHTVISION", "name": "Night Vision", "starts_active": True}])
    >>> db.get("NIGHTVISION").starts_active
    True
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from creature_state.core.config import get_settings
from creature_state.core.constants import FLAG_OVERSIZE, NO_MUTATION_KEY
from creature_state.core.exceptions import TraitDatabaseError
from creature_state.core.logging import get_logger
from creature_state.models.enums import BodyPart, Stat


logger = get_logger(__name__)


class MutationData(BaseModel):
    """Definition of a trait or mutation.

    Attributes:
        id: Unique identifier.
        name: Display name.
        points: Character creation cost; negative for drawbacks.
        activated: Whether the mutation can be switched on and off.
        starts_active: Whether it is powered as soon as it is gained.
        cost: Upkeep charged each time the cooldown runs out.
        cooldown: Turns between upkeep payments while powered.
        hunger: Upkeep is paid in hunger.
        thirst: Upkeep is paid in thirst.
        fatigue: Upkeep is paid in fatigue.
        mods: Stat modifiers applied while the mutation is present.
        active_mods: Extra stat modifiers applied while it is powered.
        weight_capacity_modifier: Multiplier on carry weight.
        volume_capacity_modifier: Multiplier on carry volume.
        volume_capacity_bonus: Extra carry volume.
        hp_modifier: Multiplier on maximum hit points.
        restricts_gear: Body parts where worn gear no longer fits.
        destroys_gear: Whether misfitting gear is destroyed instead of pushed off.
        allowed_gear_flags: Item flags that let gear keep fitting.
        effect_immunities: Effects that cannot be applied to the bearer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(default="")
    points: int = Field(default=0)

    activated: bool = Field(default=False)
    starts_active: bool = Field(default=False)
    cost: int = Field(default=0, ge=0)
    cooldown: int = Field(default=0, ge=0)
    hunger: bool = Field(default=False)
    thirst: bool = Field(default=False)
    fatigue: bool = Field(default=False)

    mods: dict[Stat, int] = Field(default_factory=dict)
    active_mods: dict[Stat, int] = Field(default_factory=dict)

    weight_capacity_modifier: float = Field(default=1.0, ge=0)
    volume_capacity_modifier: float = Field(default=1.0, ge=0)
    volume_capacity_bonus: int = Field(default=0)
    hp_modifier: float = Field(default=1.0, gt=0)

    restricts_gear: frozenset[BodyPart] = Field(default_factory=frozenset)
    destroys_gear: bool = Field(default=False)
    allowed_gear_flags: frozenset[str] = Field(default_factory=lambda: frozenset({FLAG_OVERSIZE}))
    effect_immunities: frozenset[str] = Field(default_factory=frozenset)

    def get_mod(self, stat: Stat, *, active: bool) -> int:
        """Modifier for one stat, including active mods when powered."""
        value = self.mods.get(stat, 0)
        if active:
            value += self.active_mods.get(stat, 0)
        return value


class TraitData(BaseModel):
    """Runtime state of a trait or mutation the creature has.

    Attributes:
        key: Activation letter; a blank when none is assigned.
        charge: Turns until the next upkeep payment.
        powered: Whether the mutation is switched on.
    """

    model_config = ConfigDict(validate_assignment=True)

    key: str = Field(default=NO_MUTATION_KEY, min_length=1, max_length=1)
    charge: int = Field(default=0, ge=0)
    powered: bool = Field(default=False)


class TraitDatabase:
    """Registry of trait and mutation definitions keyed by id."""

    def __init__(self, entries: Iterable[Mapping[str, Any] | MutationData] | None = None) -> None:
        self._entries: dict[str, MutationData] = {}
        if entries is not None:
            self.load(entries)

    def __contains__(self, trait_id: object) -> bool:
        return trait_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def load(self, entries: Iterable[Mapping[str, Any] | MutationData], *, source_file: str | None = None) -> None:
        """Validate and register definitions.

        Args:
            entries: Raw definitions or already-built ``MutationData``.
            source_file: Where the entries came from, for error reporting.

        Raises:
            TraitDatabaseError: If an entry is malformed or its id is taken.
        """
        for raw in entries:
            if isinstance(raw, MutationData):
                data = raw
            else:
                try:
                    data = MutationData.model_validate(raw)
                except PydanticValidationError as exc:
                    raw_id = raw.get("id") if isinstance(raw, Mapping) else None
                    raise TraitDatabaseError(
                        f"Invalid trait definition: {exc.error_count()} error(s)",
                        trait_id=str(raw_id) if raw_id else None,
                        source_file=source_file,
                        details={"errors": exc.errors(include_url=False)},
                    ) from exc
            if data.id in self._entries:
                raise TraitDatabaseError(
                    "Duplicate trait definition",
                    trait_id=data.id,
                    source_file=source_file,
                )
            self._entries[data.id] = data
        logger.debug("trait_definitions_loaded", count=len(self._entries), source_file=source_file)

    def load_json(self, path: str | Path) -> None:
        """Load definitions from a JSON file holding a list of objects.

        Raises:
            TraitDatabaseError: If the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise TraitDatabaseError(
                f"Cannot read trait definitions: {exc}",
                source_file=str(path),
            ) from exc
        if not isinstance(raw, list):
            raise TraitDatabaseError("Trait definitions must be a JSON list", source_file=str(path))
        self.load(raw, source_file=str(path))

    def get(self, trait_id: str) -> MutationData | None:
        return self._entries.get(trait_id)

    def is_defined(self, trait_id: str) -> bool:
        return trait_id in self._entries

    def ids(self) -> list[str]:
        return sorted(self._entries)

    def clear(self) -> None:
        self._entries.clear()


@lru_cache(maxsize=1)
def get_trait_database() -> TraitDatabase:
    """Get the shared trait database.

    The database starts empty unless ``trait_data_path`` is configured, in
    which case that file is loaded on first access.
    """
    database = TraitDatabase()
    path = get_settings().trait_data_path
    if path is not None:
        database.load_json(path)
    return database


def resolve_database(database: TraitDatabase | None) -> TraitDatabase:
    """The given database, or the shared one when None."""
    return database if database is not None else get_trait_database()


def clear_trait_database() -> None:
    """Drop the shared database so the next access rebuilds it."""
    get_trait_database.cache_clear()


__all__ = [
    "MutationData",
    "TraitData",
    "TraitDatabase",
    "get_trait_database",
    "resolve_database",
    "clear_trait_database",
]
