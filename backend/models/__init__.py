"""
Models package - NocoBase record models (pydantic)
"""
from models.records import (
    AssetRecord,
    BuildingRecord,
    InstanceRecord,
    NocoBaseRecord,
    SRBRecord,
    parse_records,
)

__all__ = [
    'AssetRecord',
    'BuildingRecord',
    'InstanceRecord',
    'NocoBaseRecord',
    'SRBRecord',
    'parse_records',
]
