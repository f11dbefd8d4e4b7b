"""
Query engines for the check-in store.
"""

from moodlog.query.base import (
    ATTRIBUTE_NAMES,
    ASCENDING,
    DESCENDING,
    CheckInFilter,
    GeoBox,
    GroupKey,
    GroupStats,
    GroupTally,
    QueryEngine,
    Ranking,
    SortSpec,
    TAG_FIELDS,
    ensure_utc,
)
from moodlog.query.errors import StoreError
from moodlog.query.memory_engine import InMemoryQueryEngine
from moodlog.query.mongo_engine import MongoQueryEngine

__all__ = [
    "ATTRIBUTE_NAMES",
    "ASCENDING",
    "DESCENDING",
    "CheckInFilter",
    "GeoBox",
    "GroupKey",
    "GroupStats",
    "GroupTally",
    "QueryEngine",
    "Ranking",
    "SortSpec",
    "TAG_FIELDS",
    "ensure_utc",
    "StoreError",
    "InMemoryQueryEngine",
    "MongoQueryEngine",
]
