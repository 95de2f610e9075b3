"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CreatureStateError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ContentError: Malformed content detected at load time.
        TraitDatabaseError: Malformed or duplicated trait definitions.
        InvariantViolationError: Failed explicit invariant checks.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        character_context: Scope log context to one character.
"""

from __future__ import annotations

from creature_state.core.config import (
    CapacitySettings,
    HealthSettings,
    MutationSettings,
    Settings,
    VisionSettings,
    clear_settings_cache,
    get_settings,
)
from creature_state.core.exceptions import (
    ConfigurationError,
    ContentError,
    CreatureStateError,
    InvariantViolationError,
    TraitDatabaseError,
)
from creature_state.core.logging import (
    bind_context,
    character_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "CreatureStateError",
    "ConfigurationError",
    "ContentError",
    "TraitDatabaseError",
    "InvariantViolationError",
    # Configuration
    "Settings",
    "CapacitySettings",
    "VisionSettings",
    "HealthSettings",
    "MutationSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
