"""Cached sensory state.

Vision modes and the sight limit depend on worn gear, effects, bionics,
mutations and submersion. They are read far more often than those inputs
change, so they are cached and recomputed lazily. Two things make the next
read recompute: the owner marking the cache dirty (every character method
that changes an input does so), and the inputs no longer matching the
fingerprint taken at the last recomputation. The fingerprint covers direct
edits to the ledger, worn list, bionics and effects that bypass the owner.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from creature_state.models.enums import VisionMode


F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class SensoryCache:
    """Last computed vision modes and sight limit.

    Attributes:
        vision_modes: Union of active vision mode bits.
        sight_max: Governing sight distance.
        dirty: Set when an owner method changed an input.
        inputs: Fingerprint of the inputs the values were computed from.
    """

    vision_modes: VisionMode = VisionMode.NONE
    sight_max: int = 0
    dirty: bool = True
    inputs: Hashable | None = None

    def mark_dirty(self) -> None:
        self.dirty = True

    def is_stale(self, inputs: Hashable) -> bool:
        return self.dirty or inputs != self.inputs

    def update(self, vision_modes: VisionMode, sight_max: int, inputs: Hashable | None = None) -> None:
        self.vision_modes = vision_modes
        self.sight_max = sight_max
        self.inputs = inputs
        self.dirty = False


class SensesOwner(Protocol):
    def invalidate_senses(self) -> None: ...


def invalidates_senses(method: F) -> F:
    """Mark the owner's sensory cache dirty after ``method`` runs.

    The cache is marked even when the method raises, since it may have
    changed state before failing.
    """

    @functools.wraps(method)
    def wrapper(self: SensesOwner, *args: Any, **kwargs: Any) -> Any:
        try:
            return method(self, *args, **kwargs)
        finally:
            self.invalidate_senses()

    return wrapper  # type: ignore[return-value]


__all__ = [
    "SensoryCache",
    "SensesOwner",
    "invalidates_senses",
]
