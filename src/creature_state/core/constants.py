"""Identifiers and fixed values shared across creature-state.

Trait, bionic, effect and item flag identifiers here are the ones the
capacity and vision rules look up. They refer to entries in external
content; nothing here defines what those entries do.
"""

from __future__ import annotations

# =============================================================================
# Inventory Letters
# =============================================================================

INVLETS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
"""Shortcut letters handed out to inventory items and activatable mutations."""

NO_MUTATION_KEY = " "
"""Activation key of a mutation that has no letter assigned."""

NULL_ITEM_ID = "null"
"""Type id of the empty item variant."""

WEAPON_POSITION = -1
"""Item position addressing the wielded weapon."""

NO_MISSION = -1
"""Mission id of an item that belongs to no mission."""

# =============================================================================
# Item Flags
# =============================================================================

FLAG_BLIND = "BLIND"
FLAG_SWIM_GOGGLES = "SWIM_GOGGLES"
FLAG_NIGHT_VISION = "GNV_EFFECT"
FLAG_FIX_NEARSIGHT = "FIX_NEARSIGHT"
FLAG_OVERSIZE = "OVERSIZE"

POWERED_ARMOR_NV = "rm13_armor_on"
"""Worn item type that grants tier three night vision while switched on."""

# =============================================================================
# Effects
# =============================================================================

EFFECT_BLIND = "blind"
EFFECT_IN_PIT = "in_pit"
EFFECT_BOOMERED = "boomered"
EFFECT_CONTACTS = "contacts"

# =============================================================================
# Bionics
# =============================================================================

BIO_NIGHT_VISION = "bio_night_vision"
BIO_MEMBRANE = "bio_membrane"
BIO_STORAGE = "bio_storage"

# =============================================================================
# Traits and Mutations
# =============================================================================

TRAIT_DEBUG_NIGHTVISION = "DEBUG_NIGHTVISION"
TRAIT_MEMBRANE = "MEMBRANE"
TRAIT_CEPH_EYES = "CEPH_EYES"
TRAIT_PER_SLIME = "PER_SLIME"
TRAIT_PER_SLIME_OK = "PER_SLIME_OK"
TRAIT_SHELL2 = "SHELL2"
TRAIT_MYOPIC = "MYOPIC"
TRAIT_URSINE_EYE = "URSINE_EYE"
TRAIT_BIRD_EYE = "BIRD_EYE"

# =============================================================================
# Sight Limits
# =============================================================================

SIGHT_BLIND = 0
SIGHT_SMOTHERED = 1
SIGHT_SHELL = 2
SIGHT_MYOPIC = 4
SIGHT_SLIME = 6

# =============================================================================
# Night Vision Range Bonuses
# =============================================================================

NV_RANGE_STRONG = 10.0
NV_RANGE_MEDIUM = 4.5
NV_RANGE_WEAK = 2.0
BIRD_EYE_RANGE = 1.0
