"""Rules computed from character state.

Submodules:
    capacity: Carry weight and volume limits
    vision: Vision modes, sight distance and light thresholds
"""

from __future__ import annotations
