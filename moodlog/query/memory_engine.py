"""
In-process query engine.

Evaluates the same filters, groupings and rankings as MongoQueryEngine
over documents held in memory. Used by the development server and by
tests that need real results without a database.
"""

import copy
import logging
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson import ObjectId

from moodlog.query.base import (
    ATTRIBUTE_NAMES,
    DESCENDING,
    TAG_FIELDS,
    CheckInFilter,
    GroupKey,
    GroupStats,
    GroupTally,
    QueryEngine,
    Ranking,
    SortSpec,
    ensure_utc,
)

logger = logging.getLogger(__name__)


_MISSING = object()

# Radius MongoDB uses to turn spherical $geoNear distances into meters
EARTH_RADIUS_METERS = 6378100.0


def get_path(doc: Dict[str, Any], path: str, default: Any = None) -> Any:
    """Resolve a dotted field path the way MongoDB does for embedded documents."""
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


def matches(doc: Dict[str, Any], flt: CheckInFilter) -> bool:
    """True when the document satisfies every condition in the filter."""
    author = doc.get("userId")
    if flt.author_id is not None and author != flt.author_id:
        return False
    if flt.exclude_authors and author in flt.exclude_authors:
        return False

    if flt.privacy is not None and doc.get("privacy") != flt.privacy:
        return False

    if flt.emotion_name is not None and get_path(doc, "emotion.name") != flt.emotion_name:
        return False

    if flt.start is not None or flt.end is not None:
        timestamp = doc.get("timestamp")
        if not isinstance(timestamp, datetime):
            return False
        timestamp = ensure_utc(timestamp)
        if flt.start is not None and timestamp < ensure_utc(flt.start):
            return False
        if flt.end is not None and timestamp >= ensure_utc(flt.end):
            return False

    if flt.tag_field:
        tags = doc.get(flt.tag_field)
        if not isinstance(tags, list) or not tags:
            return False

    if flt.within is not None:
        point = point_of(doc)
        if point is None or not flt.within.contains(*point):
            return False

    return True


def point_of(doc: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """The (lng, lat) of a check-in's GeoJSON location, if it has one."""
    coordinates = get_path(doc, "location.coordinates.coordinates")
    if not isinstance(coordinates, list) or len(coordinates) != 2:
        return None
    lng, lat = coordinates
    if not all(isinstance(value, (int, float)) for value in (lng, lat)):
        return None
    return float(lng), float(lat)


def spherical_distance(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    """Great-circle distance in meters (haversine)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def _sort_value(value: Any):
    # Missing and null sort before everything else, as in MongoDB
    if value is None:
        return (0, 0)
    if isinstance(value, datetime):
        return (1, ensure_utc(value))
    return (1, value)


def sort_documents(docs: List[Dict[str, Any]], sort: SortSpec) -> List[Dict[str, Any]]:
    """Stable multi-key sort; the first key in `sort` is the most significant."""
    ordered = list(docs)
    for field_name, direction in reversed(sort):
        ordered.sort(
            key=lambda doc: _sort_value(get_path(doc, field_name)),
            reverse=direction == DESCENDING,
        )
    return ordered


def project(doc: Dict[str, Any], fields: Optional[Iterable[str]]) -> Dict[str, Any]:
    """Inclusion projection; `_id` is always kept."""
    if fields is None:
        return copy.deepcopy(doc)

    result: Dict[str, Any] = {}
    if "_id" in doc:
        result["_id"] = doc["_id"]

    for path in fields:
        value = get_path(doc, path, _MISSING)
        if value is _MISSING:
            continue
        target = result
        parts = path.split(".")
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = copy.deepcopy(value)

    return result


def _average(values: Iterable[Any]) -> Optional[float]:
    # $avg skips non-numeric values and yields null when none remain
    numbers = [
        value for value in values
        if isinstance(value, (int, float)) and not isinstance(value, bool)
    ]
    if not numbers:
        return None
    return sum(numbers) / len(numbers)


def _group_keys(doc: Dict[str, Any], key: GroupKey) -> List[Any]:
    if key is GroupKey.ALL:
        return [None]

    if key in TAG_FIELDS:
        tags = doc.get(TAG_FIELDS[key]) or []
        return list(dict.fromkeys(tags))

    timestamp = doc.get("timestamp")
    if not isinstance(timestamp, datetime):
        return [None]
    timestamp = ensure_utc(timestamp)

    if key is GroupKey.DAY_OF_WEEK:
        # 1=Sunday ... 7=Saturday
        return [timestamp.isoweekday() % 7 + 1]
    return [timestamp.strftime("%Y-%m-%d")]


class InMemoryQueryEngine(QueryEngine):
    """QueryEngine over lists of check-in and user documents."""

    def __init__(
        self,
        checkins: Iterable[Dict[str, Any]] = (),
        users: Iterable[Dict[str, Any]] = (),
    ):
        self._checkins: List[Dict[str, Any]] = [copy.deepcopy(doc) for doc in checkins]
        self._users: List[Dict[str, Any]] = [copy.deepcopy(doc) for doc in users]

    def _select(self, flt: CheckInFilter) -> List[Dict[str, Any]]:
        return [doc for doc in self._checkins if matches(doc, flt)]

    def _user(self, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        for user in self._users:
            if user.get("_id") == user_id:
                return user
        return None

    @staticmethod
    def _page(docs: List[Dict[str, Any]], skip: int, limit: Optional[int]) -> List[Dict[str, Any]]:
        if limit is None:
            return docs[skip:]
        return docs[skip:skip + limit]

    # ─────────────────────────────────────────────────────────────────
    # Check-ins
    # ─────────────────────────────────────────────────────────────────

    async def find_checkins(
        self,
        flt: CheckInFilter,
        sort: SortSpec,
        skip: int = 0,
        limit: Optional[int] = None,
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        docs = sort_documents(self._select(flt), sort) if sort else self._select(flt)
        fields = list(projection) if projection is not None else None
        return [project(doc, fields) for doc in self._page(docs, skip, limit)]

    async def count_checkins(self, flt: CheckInFilter) -> int:
        return len(self._select(flt))

    async def group_checkins(self, flt: CheckInFilter, key: GroupKey) -> List[GroupStats]:
        return self._group(self._select(flt), key)

    async def tally_checkins(self, flt: CheckInFilter, key: GroupKey) -> GroupTally:
        docs = self._select(flt)
        return GroupTally(total=len(docs), groups=self._group(docs, key))

    @staticmethod
    def _group(docs: List[Dict[str, Any]], key: GroupKey) -> List[GroupStats]:
        buckets: Dict[Any, List[Dict[str, Any]]] = {}
        for doc in docs:
            for bucket_key in _group_keys(doc, key):
                buckets.setdefault(bucket_key, []).append(doc)

        stats = []
        for bucket_key, members in buckets.items():
            averages = {
                attribute: _average(
                    get_path(doc, f"emotion.attributes.{attribute}") for doc in members
                )
                for attribute in ATTRIBUTE_NAMES
            }
            emotions = [get_path(doc, "emotion.name") for doc in members]
            stats.append(GroupStats(
                key=bucket_key,
                count=len(members),
                averages=averages,
                emotions=[name for name in emotions if name is not None],
            ))

        logger.debug(f"Grouped check-ins by {key.value} into {len(stats)} buckets")
        return stats

    async def rank_checkins(
        self,
        flt: CheckInFilter,
        ranking: Ranking,
        now: datetime,
        skip: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        candidates = [copy.deepcopy(doc) for doc in self._select(flt)]

        for doc in candidates:
            score = ranking.score(doc, now)
            if score is not None:
                doc["score"] = score

        return self._page(sort_documents(candidates, ranking.sort), skip, limit)

    async def find_nearby(
        self,
        flt: CheckInFilter,
        lng: float,
        lat: float,
        max_distance: float,
        limit: int,
    ) -> List[Dict[str, Any]]:
        nearby = []
        for doc in self._select(flt):
            point = point_of(doc)
            if point is None:
                continue
            distance = spherical_distance(lng, lat, *point)
            if distance <= max_distance:
                found = copy.deepcopy(doc)
                found["distance"] = distance
                nearby.append(found)

        nearby.sort(key=lambda doc: (doc["distance"], doc["_id"]))
        return nearby[:limit]

    # ─────────────────────────────────────────────────────────────────
    # Users
    # ─────────────────────────────────────────────────────────────────

    async def find_user(
        self,
        user_id: ObjectId,
        projection: Optional[Iterable[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        user = self._user(user_id)
        if user is None:
            return None
        return project(user, list(projection) if projection is not None else None)

    async def find_users(
        self,
        user_ids: Iterable[ObjectId],
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        wanted = set(user_ids)
        fields = list(projection) if projection is not None else None
        return [project(user, fields) for user in self._users if user.get("_id") in wanted]

    async def find_blocker_ids(self, user_id: ObjectId) -> List[ObjectId]:
        return [
            user["_id"] for user in self._users
            if user_id in (user.get("blockedUsers") or [])
        ]

    async def add_blocked_user(self, user_id: ObjectId, blocked_id: ObjectId) -> bool:
        user = self._user(user_id)
        if user is None:
            return False
        blocked = user.setdefault("blockedUsers", [])
        if blocked_id not in blocked:
            blocked.append(blocked_id)
        return True

    async def remove_blocked_user(self, user_id: ObjectId, blocked_id: ObjectId) -> bool:
        user = self._user(user_id)
        if user is None or blocked_id not in (user.get("blockedUsers") or []):
            return False
        user["blockedUsers"] = [uid for uid in user["blockedUsers"] if uid != blocked_id]
        return True
