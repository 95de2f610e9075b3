"""Configuration management for creature-state.

Tunable rule constants (carry limits, light thresholds, hit point formula,
mutation upkeep limits) live in pydantic-settings classes so that hosts can
override them through environment variables or a ``.env`` file.

Example:
    >>> from creature_state.core.config import get_settings
    >>> get_settings().capacity.overload_multiplier
    4.0

Environment Variables:
    CREATURE_STATE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CREATURE_STATE_TRAIT_DATA_PATH: JSON file with trait/mutation definitions
    CREATURE_STATE_CAPACITY_DANGEROUS_PICKUPS: Allow overloaded pickups
    CREATURE_STATE_VISION_THRESHOLD_FLOOR: Lowest reachable vision threshold
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from creature_state.core.exceptions import ConfigurationError


class CapacitySettings(BaseSettings):
    """Configuration for carry weight and volume limits.

    Attributes:
        base_weight_capacity: Weight (grams) any frame can carry at zero strength.
        weight_per_strength: Extra grams of capacity per point of strength.
        overload_multiplier: Multiple of capacity allowed by unsafe pickups.
        base_volume_capacity: Volume carried without any worn storage.
        safe_volume_margin: Volume kept free by safe pickups.
        carry_more_bonus: Grams granted by a carry-more artifact.
        storage_bionic_bonus: Volume granted by an internal storage bionic.
        dangerous_pickups: Let ``i_add_or_drop`` use the unsafe weight limit.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREATURE_STATE_CAPACITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_weight_capacity: int = Field(default=13000, ge=0, description="Base weight capacity (g)")
    weight_per_strength: int = Field(default=4000, ge=0, description="Capacity per strength (g)")
    overload_multiplier: float = Field(default=4.0, ge=1.0, description="Unsafe weight multiple")
    base_volume_capacity: int = Field(default=2, ge=0, description="Base volume capacity")
    safe_volume_margin: int = Field(default=1, ge=0, description="Volume slack for safe pickups")
    carry_more_bonus: int = Field(default=22500, ge=0, description="Carry-more artifact bonus (g)")
    storage_bionic_bonus: int = Field(default=8, ge=0, description="Storage bionic volume")
    dangerous_pickups: bool = Field(default=False, description="Allow overloaded pickups")


class VisionSettings(BaseSettings):
    """Configuration for light and sight calculations.

    Attributes:
        ambient_minimal: Light level of near-total darkness.
        ambient_lit: Light level of a fully lit tile.
        threshold_floor: Lowest vision threshold any creature can reach.
        unlimited_sight: Sight distance used when nothing limits vision.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREATURE_STATE_VISION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ambient_minimal: float = Field(default=1.0, gt=0, description="Minimal ambient light")
    ambient_lit: float = Field(default=10.0, gt=0, description="Lit ambient light")
    threshold_floor: float = Field(default=0.01, gt=0, description="Lowest vision threshold")
    unlimited_sight: int = Field(default=9999, ge=1, description="Unrestricted sight distance")

    @model_validator(mode="after")
    def validate_light_range(self) -> "VisionSettings":
        """Ensure the light scale is ordered.

        Raises:
            ConfigurationError: If the light levels are out of order.
        """
        if self.ambient_lit <= self.ambient_minimal:
            raise ConfigurationError(
                f"ambient_lit ({self.ambient_lit}) must be greater than "
                f"ambient_minimal ({self.ambient_minimal})",
                config_key="ambient_lit",
            )
        if self.threshold_floor >= self.ambient_minimal:
            raise ConfigurationError(
                f"threshold_floor ({self.threshold_floor}) must be less than "
                f"ambient_minimal ({self.ambient_minimal})",
                config_key="threshold_floor",
            )
        return self


class HealthSettings(BaseSettings):
    """Configuration for the hit point formula.

    Attributes:
        base_hp: Hit points per body part before strength.
        hp_per_strength: Hit points per point of maximum strength.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREATURE_STATE_HEALTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_hp: int = Field(default=60, ge=1)
    hp_per_strength: int = Field(default=3, ge=0)


class MutationSettings(BaseSettings):
    """Limits on the upkeep paid by powered mutations.

    A powered mutation whose upkeep pushes a need past its limit is
    switched off.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREATURE_STATE_MUTATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_hunger: int = Field(default=2800, ge=0)
    max_thirst: int = Field(default=520, ge=0)
    max_fatigue: int = Field(default=575, ge=0)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Application logging level.
        trait_data_path: JSON file loaded into the trait database on first use.
        capacity: Carry capacity settings.
        vision: Sight and light settings.
        health: Hit point settings.
        mutation: Mutation upkeep settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREATURE_STATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="creature-state", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    trait_data_path: Path | None = Field(
        default=None,
        description="Trait/mutation definitions loaded on first database access",
    )

    capacity: CapacitySettings = Field(default_factory=CapacitySettings)
    vision: VisionSettings = Field(default_factory=VisionSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)
    mutation: MutationSettings = Field(default_factory=MutationSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "CapacitySettings",
    "VisionSettings",
    "HealthSettings",
    "MutationSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
