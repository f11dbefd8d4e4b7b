"""
QueryEngine capability interface.

The feed and analytics services never talk to a driver directly. They
describe what they need (a filter, a grouping, a ranking, a page) and a
QueryEngine executes it, either by pushing it down to the store or by
computing over fetched documents. Every engine must return the same
results for the same inputs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from bson import ObjectId


ATTRIBUTE_NAMES: Tuple[str, ...] = ("pleasantness", "intensity", "control", "clarity")

ASCENDING = 1
DESCENDING = -1

SortSpec = List[Tuple[str, int]]


class GroupKey(str, Enum):
    """How check-ins are bucketed by group_checkins()."""
    ALL = "all"
    DAY_OF_WEEK = "dayOfWeek"          # 1=Sunday ... 7=Saturday, UTC
    CALENDAR_DAY = "calendarDay"       # "YYYY-MM-DD", UTC
    ACTIVITIES = "activities"          # one bucket per distinct tag
    PEOPLE = "people"


TAG_FIELDS = {
    GroupKey.ACTIVITIES: "activities",
    GroupKey.PEOPLE: "people",
}


@dataclass(frozen=True)
class GeoBox:
    """
    A longitude/latitude rectangle, edges inclusive.

    Corners are normalized so min <= max on both axes.
    """
    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @classmethod
    def from_corners(cls, sw_lat: float, sw_lng: float, ne_lat: float, ne_lng: float) -> "GeoBox":
        return cls(
            min_lng=min(sw_lng, ne_lng),
            min_lat=min(sw_lat, ne_lat),
            max_lng=max(sw_lng, ne_lng),
            max_lat=max(sw_lat, ne_lat),
        )

    def contains(self, lng: float, lat: float) -> bool:
        return self.min_lng <= lng <= self.max_lng and self.min_lat <= lat <= self.max_lat

    def to_box(self) -> List[List[float]]:
        """Bottom-left and top-right corners as used by $box."""
        return [[self.min_lng, self.min_lat], [self.max_lng, self.max_lat]]

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "sw": {"lat": self.min_lat, "lng": self.min_lng},
            "ne": {"lat": self.max_lat, "lng": self.max_lng},
        }


@dataclass(frozen=True)
class CheckInFilter:
    """
    Conjunctive filter over check-ins.

    `start` is inclusive and `end` exclusive. `tag_field` keeps only
    check-ins whose list in that field is non-empty. `within` keeps only
    check-ins whose GeoJSON point lies inside the box.
    """
    author_id: Optional[ObjectId] = None
    exclude_authors: FrozenSet[ObjectId] = frozenset()
    privacy: Optional[str] = None
    emotion_name: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    tag_field: Optional[str] = None
    within: Optional[GeoBox] = None


@dataclass
class GroupStats:
    """Raw (unrounded) statistics for one bucket."""
    key: Any
    count: int
    averages: Dict[str, Optional[float]] = field(default_factory=dict)
    emotions: List[str] = field(default_factory=list)


@dataclass
class GroupTally:
    """Bucket statistics plus the number of distinct matching check-ins."""
    total: int
    groups: List[GroupStats] = field(default_factory=list)


class Ranking(ABC):
    """
    An ordering over check-ins, optionally driven by a computed score.

    Engines that push down use score_expression(); engines that compute
    in-process use score(). Both must agree.
    """

    name: str = ""
    sort: SortSpec = []

    def score_expression(self, now: datetime) -> Optional[Dict[str, Any]]:
        """MongoDB aggregation expression for the `score` field, if any."""
        return None

    def score(self, doc: Dict[str, Any], now: datetime) -> Optional[float]:
        """Score for a single document, if this ranking is scored."""
        return None


class QueryEngine(ABC):
    """Storage capability the ranking and aggregation core depends on."""

    # ─────────────────────────────────────────────────────────────────
    # Check-ins
    # ─────────────────────────────────────────────────────────────────

    @abstractmethod
    async def find_checkins(
        self,
        flt: CheckInFilter,
        sort: SortSpec,
        skip: int = 0,
        limit: Optional[int] = None,
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Filter, sort and paginate check-ins."""

    @abstractmethod
    async def count_checkins(self, flt: CheckInFilter) -> int:
        """Count check-ins matching the filter."""

    @abstractmethod
    async def group_checkins(self, flt: CheckInFilter, key: GroupKey) -> List[GroupStats]:
        """Group matching check-ins and compute averages, count and emotion names."""

    @abstractmethod
    async def tally_checkins(self, flt: CheckInFilter, key: GroupKey) -> GroupTally:
        """
        group_checkins() plus the count of matching check-ins, read together.

        With tag keys a check-in can sit in several buckets, so the total is
        not the sum of the bucket counts.
        """

    @abstractmethod
    async def rank_checkins(
        self,
        flt: CheckInFilter,
        ranking: Ranking,
        now: datetime,
        skip: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Apply a ranking to the filtered set and return one page."""

    @abstractmethod
    async def find_nearby(
        self,
        flt: CheckInFilter,
        lng: float,
        lat: float,
        max_distance: float,
        limit: int,
    ) -> List[Dict[str, Any]]:
        """
        Check-ins within max_distance meters of a point, nearest first.

        Each document carries its spherical distance in meters as `distance`.
        """

    # ─────────────────────────────────────────────────────────────────
    # Users
    # ─────────────────────────────────────────────────────────────────

    @abstractmethod
    async def find_user(
        self,
        user_id: ObjectId,
        projection: Optional[Iterable[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Fetch one user document, or None."""

    @abstractmethod
    async def find_users(
        self,
        user_ids: Iterable[ObjectId],
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch the users whose ids are in user_ids."""

    @abstractmethod
    async def find_blocker_ids(self, user_id: ObjectId) -> List[ObjectId]:
        """Ids of every user whose blockedUsers contains user_id."""

    @abstractmethod
    async def add_blocked_user(self, user_id: ObjectId, blocked_id: ObjectId) -> bool:
        """Add blocked_id to user_id's block list. False if the user is missing."""

    @abstractmethod
    async def remove_blocked_user(self, user_id: ObjectId, blocked_id: ObjectId) -> bool:
        """Remove blocked_id from user_id's block list. False if it was not there."""


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
