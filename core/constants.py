"""
Shared constants.

This module has no dependencies on models or services to avoid circular imports.
"""

# Hard ceiling for any weight entered into a program config (kg or lb)
MAX_CONFIG_WEIGHT = 2000.0

# Rounding step used when neither the slot nor the definition declares one
DEFAULT_ROUNDING_INCREMENT = 0.5

# Maximum number of undo entries kept per program instance
MAX_UNDO_STACK = 50

# Upper bound for a logged AMRAP rep count
MAX_AMRAP_REPS = 99

# RPE scale bounds
MIN_RPE = 1
MAX_RPE = 10

# Maximum length for a free-text note attached to an outcome
MAX_NOTE_LENGTH = 500

# Tier labels used by legacy programs when a slot does not declare a role
TIER_ROLE_MAP = {
    "t1": "primary",
    "t2": "secondary",
    "t3": "primary",
}
