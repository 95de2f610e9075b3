"""Custom exception hierarchy for creature-state.

Possession and ledger operations follow a soft-failure policy: malformed
calls return sentinels (null item, empty string, ``False``) instead of
raising. The exceptions below cover the places where failing loudly is the
right call: invalid configuration, malformed trait content detected at load
time, and the explicit invariant checkers used by tests.

Example:
    >>> from creature_state.core.exceptions import TraitDatabaseError
    >>> raise TraitDatabaseError("Duplicate trait", trait_id="NIGHTVISION")
"""

from __future__ import annotations

from typing import Any


class CreatureStateError(Exception):
    """Base exception for all creature-state errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(CreatureStateError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Content Exceptions
# =============================================================================


class ContentError(CreatureStateError):
    """Base exception for malformed game content.

    Content is validated once, when it is loaded. Runtime lookups against
    loaded content never raise.
    """

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


class TraitDatabaseError(ContentError):
    """Raised when trait/mutation definitions are malformed or duplicated."""

    def __init__(
        self,
        message: str,
        *,
        trait_id: str | None = None,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize trait database error with trait context.

        Args:
            message: Human-readable error description.
            trait_id: Identifier of the offending trait definition.
            source_file: Content file being loaded, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if trait_id:
            combined_details["trait_id"] = trait_id
        super().__init__(message, source_file=source_file, details=combined_details)


# =============================================================================
# State Exceptions
# =============================================================================


class InvariantViolationError(CreatureStateError):
    """Raised by the explicit invariant checkers when state is inconsistent.

    Never raised by ordinary gameplay operations.
    """

    def __init__(
        self,
        message: str,
        *,
        violations: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invariant violation with the list of failed checks.

        Args:
            message: Human-readable error description.
            violations: Description of every check that failed.
            details: Optional dictionary containing additional error context.
        """
        self.violations = list(violations or [])
        combined_details = details or {}
        if self.violations:
            combined_details["violations"] = self.violations
        super().__init__(message, details=combined_details)


__all__ = [
    "CreatureStateError",
    "ConfigurationError",
    "ContentError",
    "TraitDatabaseError",
    "InvariantViolationError",
]
