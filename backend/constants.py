"""
Centralized Constants - SINGLE SOURCE OF TRUTH

Collection names, amount-range thresholds, and record normalization values
are defined here and imported elsewhere.

DO NOT duplicate these definitions in other files.

Reference: Indian numbering conventions
- Lakh (L): 1,00,000
- Crore (Cr): 1,00,00,000
"""

# =============================================================================
# NOCOBASE COLLECTIONS
# =============================================================================

COLLECTION_ASSET = 'Asset'
COLLECTION_SRB_DETAILS = 'SRB_Details'
COLLECTION_BUILDINGS = 'Buildings'
COLLECTION_INSTANCE = 'Instance'

# =============================================================================
# AMOUNT RANGES (Lakh / Crore thresholds)
# =============================================================================

ONE_LAKH = 100_000
TEN_LAKH = 1_000_000
ONE_CRORE = 10_000_000

RANGE_ABOVE_1CR = 'above1Cr'
RANGE_10L_TO_1CR = 'between10LTo1Cr'
RANGE_1L_TO_10L = 'between1LTo10L'
RANGE_BELOW_1L = 'below1L'
RANGE_NO_AMOUNT = 'noAmount'

# Response order - highest band first, matches the frontend legend
AMOUNT_RANGES = [
    RANGE_ABOVE_1CR,
    RANGE_10L_TO_1CR,
    RANGE_1L_TO_10L,
    RANGE_BELOW_1L,
    RANGE_NO_AMOUNT,
]


def get_amount_range(amount: float) -> str:
    """
    Classify a parsed amount into exactly one amount range.

    Zero is checked first, then thresholds in descending order.
    Half-open intervals: 1L, 10L and 1Cr belong to the higher band.

    Args:
        amount: Parsed SRB amount (see models.records.parse_amount)

    Returns:
        One of AMOUNT_RANGES
    """
    if amount == 0:
        return RANGE_NO_AMOUNT
    elif amount >= ONE_CRORE:
        return RANGE_ABOVE_1CR
    elif amount >= TEN_LAKH:
        return RANGE_10L_TO_1CR
    elif amount >= ONE_LAKH:
        return RANGE_1L_TO_10L
    else:
        return RANGE_BELOW_1L


# =============================================================================
# RECORD NORMALIZATION
# =============================================================================

UNKNOWN = 'Unknown'

# NocoBase exports missing text values as the literal string "NULL"
NULL_SENTINEL = 'NULL'

# Encodings of "active" seen in the Asset collection.
# Only the building-scoped counter uses the full set; the summary counts
# is_active == "Yes" exactly (see services.stats_service.summarize).
ACTIVE_VALUES = frozenset(['Yes', 'Active', True, 1, '1'])
SUMMARY_ACTIVE_VALUE = 'Yes'

DEFAULT_BUILDING_NAME = 'Computer Center'

# Name fields checked in order when resolving a building's display name
BUILDING_NAME_FIELDS = ('Building_Name', 'Name', 'name')

# =============================================================================
# ASSET LISTING
# =============================================================================

DEFAULT_ASSET_PAGE_SIZE = 50
