"""
Koji shelf configuration and physical constants.

Used by the lot aggregation and shelf allocation services.
"""

# =============================================================================
# SHEET CONSTANTS
# =============================================================================

# One drying sheet (tray) holds at most 10 kg of raw rice
SHEET_CAPACITY_KG = 10


# =============================================================================
# SHELF CONSTANTS
# =============================================================================

# Physical shelf: 4 columns x 5 rows = 20 sheets
MAX_COLUMNS = 4
MAX_ROWS_PER_COLUMN = 5

# Labels are handed out in this order (first slot gets D, last gets A)
LABEL_ASSIGNMENT_ORDER = ("D", "C", "B", "A")

# Column order in the rendered matrix and in column_counts
DISPLAY_COLUMN_ORDER = ("A", "B", "C", "D")

CAPACITY_EXCEEDED_MESSAGE = (
    "Cannot allocate: required column count exceeds shelf capacity"
)


# =============================================================================
# STAGE CODES
# =============================================================================
# Brewery process codes. Koji records carry "Koji", the paired steamed-rice
# addition records carry "Kake".

KOJI_MARKER = "Koji"

STAGE_ROLE_PREFIXES = {
    "moto": "starter",
    "soe": "first_addition",
    "naka": "second_addition",
    "tome": "third_addition",
}

ADDITION_STAGE_CODES = {
    "starter": "motoKake",
    "first_addition": "soeKake",
    "second_addition": "nakaKake",
    "third_addition": "tomeKake",
}
