"""
NocoBase record models.

Upstream collections are loosely typed: amounts arrive as numbers or strings,
missing text is exported as the literal "NULL", and "active" has several
encodings. Normalization happens once here, at ingestion, so aggregators can
read typed attributes instead of re-checking raw dict values.

Key features:
- frozen=True: records are never mutated after parsing
- aliases only: fields are read from NocoBase names (Amount, Building_Id);
  a row key spelled like the attribute (amount) is kept as an extra field
- extra='allow': undeclared upstream fields are kept for pass-through endpoints

Usage:
    from models.records import SRBRecord, parse_records

    srbs = parse_records(SRBRecord, raw_rows)
    total = sum(s.amount for s in srbs)
"""

import math
import re
from typing import Annotated, Any, Dict, Iterable, List, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from constants import (
    ACTIVE_VALUES,
    BUILDING_NAME_FIELDS,
    NULL_SENTINEL,
    SUMMARY_ACTIVE_VALUE,
    UNKNOWN,
)

R = TypeVar('R', bound='NocoBaseRecord')

# Leading numeric prefix, e.g. "12500.50 INR" -> "12500.50"
_NUMERIC_PREFIX = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


# =============================================================================
# NORMALIZERS
# =============================================================================

def parse_amount(value: Any) -> float:
    """
    Parse an SRB amount defensively.

    Examples:
        15000000 -> 15000000.0
        "500000" -> 500000.0
        "12500.50 INR" -> 12500.5
        "bad" -> 0.0
        None -> 0.0

    Never returns NaN or infinity; anything unparseable becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            amount = float(text)
        except ValueError:
            match = _NUMERIC_PREFIX.match(text)
            if not match:
                return 0.0
            amount = float(match.group(0))
    else:
        return 0.0

    if not math.isfinite(amount):
        return 0.0
    return amount


def normalize_code(value: Any) -> str:
    """
    Normalize a text code or description.

    The "NULL" sentinel and any falsy value (None, "", 0) become "Unknown".
    """
    if not value or value == NULL_SENTINEL:
        return UNKNOWN
    return str(value)


def normalize_srb_number(value: Any) -> str:
    """SRB numbers only fall back on falsy values; "NULL" is kept as-is."""
    if not value:
        return UNKNOWN
    return str(value)


def is_truthy_active(value: Any) -> bool:
    """
    Check an is_active value against the broad set of active encodings.

    Tests the raw value and its string form, so 1, "1", True, "Yes" and
    "Active" all count. Unhashable values are compared by string only.
    """
    try:
        if value in ACTIVE_VALUES:
            return True
    except TypeError:
        pass
    return str(value) in ACTIVE_VALUES


def same_id(left: Any, right: Any) -> bool:
    """Compare ids across collections that disagree on int vs str."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


Amount = Annotated[float, BeforeValidator(parse_amount)]
Code = Annotated[str, BeforeValidator(normalize_code)]
SRBNumber = Annotated[str, BeforeValidator(normalize_srb_number)]


# =============================================================================
# MODELS
# =============================================================================

class NocoBaseRecord(BaseModel):
    """Base model for all NocoBase collection records."""
    model_config = ConfigDict(
        frozen=True,
        extra='allow',
    )

    id: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Dump back to the upstream shape (NocoBase field names, no defaults)."""
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class AssetRecord(NocoBaseRecord):
    building_id: Any = Field(default=None, alias='Building_Id')
    is_active: Any = None

    @property
    def is_active_strict(self) -> bool:
        """Exact "Yes" match - the rule used by the summary counts."""
        return self.is_active == SUMMARY_ACTIVE_VALUE

    @property
    def is_active_any(self) -> bool:
        """Any accepted active encoding - the rule used by the building counter."""
        return is_truthy_active(self.is_active)

    def in_building(self, building_id: Any) -> bool:
        return same_id(self.building_id, building_id)


class SRBRecord(NocoBaseRecord):
    srb_number: SRBNumber = Field(default=UNKNOWN, alias='SRB_Number')
    amount: Amount = Field(default=0.0, alias='Amount')
    asset_code: Code = Field(default=UNKNOWN, alias='Asset_Code')
    item_description: Code = Field(default=UNKNOWN, alias='Item_Description')


class BuildingRecord(NocoBaseRecord):

    @property
    def display_name(self) -> str:
        """First non-empty of Building_Name, Name, name ("" if none)."""
        extra = self.model_extra or {}
        for field in BUILDING_NAME_FIELDS:
            value = extra.get(field)
            if value:
                return str(value)
        return ''

    def matches_name(self, name: str) -> bool:
        """Case-insensitive display name comparison; unnamed buildings never match."""
        display_name = self.display_name
        return bool(display_name) and display_name.lower() == name.lower()


class InstanceRecord(NocoBaseRecord):
    pass


def parse_records(model: Type[R], rows: Iterable[Dict[str, Any]]) -> List[R]:
    """
    Parse raw upstream rows into record models.

    Non-dict rows (never expected from NocoBase) are skipped rather than
    failing the whole report.
    """
    return [model.model_validate(row) for row in rows if isinstance(row, dict)]
