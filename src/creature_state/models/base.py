"""Base component class.

Components are data containers attached to a creature. They may carry
behaviour that only touches their own data; anything that needs the whole
creature lives on the creature or in ``creature_state.engine``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """Base class for all creature components."""

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="ignore",
        use_enum_values=False,
    )


__all__ = ["Component"]
