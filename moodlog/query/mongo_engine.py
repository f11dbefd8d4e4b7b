"""
MongoDB query engine.

Pushes filtering, grouping, scoring and pagination down to MongoDB
aggregation pipelines through Motor.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId, SON
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from moodlog.database.collections import CHECKINS_COLLECTION, USERS_COLLECTION
from moodlog.query.base import (
    ASCENDING,
    ATTRIBUTE_NAMES,
    TAG_FIELDS,
    CheckInFilter,
    GroupKey,
    GroupStats,
    GroupTally,
    QueryEngine,
    Ranking,
    SortSpec,
)
from moodlog.query.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str):
    """Translate driver failures into StoreError."""
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB {operation} failed: {e}")
        raise StoreError(operation) from e


def build_match(flt: CheckInFilter) -> Dict[str, Any]:
    """Translate a CheckInFilter into a MongoDB query document."""
    query: Dict[str, Any] = {}

    author: Dict[str, Any] = {}
    if flt.author_id is not None:
        author["$eq"] = flt.author_id
    if flt.exclude_authors:
        author["$nin"] = sorted(flt.exclude_authors)
    if author:
        query["userId"] = author

    if flt.privacy is not None:
        query["privacy"] = flt.privacy

    if flt.emotion_name is not None:
        query["emotion.name"] = flt.emotion_name

    if flt.start is not None or flt.end is not None:
        query["timestamp"] = {}
        if flt.start is not None:
            query["timestamp"]["$gte"] = flt.start
        if flt.end is not None:
            query["timestamp"]["$lt"] = flt.end

    if flt.tag_field:
        # A first element only exists on a non-empty array
        query[f"{flt.tag_field}.0"] = {"$exists": True}

    if flt.within is not None:
        query["location.coordinates"] = {"$geoWithin": {"$box": flt.within.to_box()}}

    return query


def build_group_stages(key: GroupKey) -> List[Dict[str, Any]]:
    """Stages that turn matched check-ins into one document per bucket."""
    pipeline: List[Dict[str, Any]] = []

    if key is GroupKey.ALL:
        group_id: Any = None
    elif key is GroupKey.DAY_OF_WEEK:
        group_id = {"$dayOfWeek": "$timestamp"}
    elif key is GroupKey.CALENDAR_DAY:
        group_id = {"$dateToString": {"format": "%Y-%m-%d", "date": "$timestamp"}}
    else:
        tag_field = TAG_FIELDS[key]
        # Each check-in counts once per distinct tag it carries
        pipeline.append({"$addFields": {"_tag": {"$setUnion": [f"${tag_field}", []]}}})
        pipeline.append({"$unwind": "$_tag"})
        group_id = "$_tag"

    group: Dict[str, Any] = {"_id": group_id}
    for attribute in ATTRIBUTE_NAMES:
        group[attribute] = {"$avg": f"$emotion.attributes.{attribute}"}
    group["count"] = {"$sum": 1}
    group["emotions"] = {"$push": "$emotion.name"}

    pipeline.append({"$group": group})
    return pipeline


def build_group_pipeline(flt: CheckInFilter, key: GroupKey) -> List[Dict[str, Any]]:
    """Aggregation pipeline producing one document per bucket."""
    return [{"$match": build_match(flt)}] + build_group_stages(key)


def build_tally_pipeline(flt: CheckInFilter, key: GroupKey) -> List[Dict[str, Any]]:
    """Buckets and the matching check-in count from a single read."""
    return [
        {"$match": build_match(flt)},
        {
            "$facet": {
                "total": [{"$group": {"_id": None, "count": {"$sum": 1}}}],
                "groups": build_group_stages(key),
            }
        },
    ]


def build_rank_pipeline(
    flt: CheckInFilter,
    ranking: Ranking,
    now: datetime,
    skip: int,
    limit: int,
) -> List[Dict[str, Any]]:
    """Aggregation pipeline that scores, sorts and pages the candidate set."""
    pipeline: List[Dict[str, Any]] = [{"$match": build_match(flt)}]

    expression = ranking.score_expression(now)
    if expression is not None:
        pipeline.append({"$addFields": {"score": expression}})

    pipeline.append({"$sort": SON(ranking.sort)})
    pipeline.append({"$skip": skip})
    pipeline.append({"$limit": limit})
    return pipeline


def build_nearby_pipeline(
    flt: CheckInFilter,
    lng: float,
    lat: float,
    max_distance: float,
    limit: int,
) -> List[Dict[str, Any]]:
    """
    Aggregation pipeline for check-ins around a point.

    $geoNear must be the first stage and needs the 2dsphere index on
    location.coordinates.
    """
    return [
        {
            "$geoNear": {
                "near": {"type": "Point", "coordinates": [lng, lat]},
                "key": "location.coordinates",
                "distanceField": "distance",
                "maxDistance": max_distance,
                "spherical": True,
                "query": build_match(flt),
            }
        },
        {"$sort": SON([("distance", ASCENDING), ("_id", ASCENDING)])},
        {"$limit": limit},
    ]


def _to_group_stats(result: Dict[str, Any]) -> GroupStats:
    return GroupStats(
        key=result["_id"],
        count=result["count"],
        averages={attribute: result.get(attribute) for attribute in ATTRIBUTE_NAMES},
        emotions=list(result.get("emotions", [])),
    )


def _projection(fields: Optional[Iterable[str]]) -> Optional[Dict[str, int]]:
    if fields is None:
        return None
    return {name: 1 for name in fields}


class MongoQueryEngine(QueryEngine):
    """QueryEngine backed by a Motor database."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MongoQueryEngine.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._checkins_collection = db[CHECKINS_COLLECTION]
        self._users_collection = db[USERS_COLLECTION]

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
        with _store_errors("find_checkins"):
            cursor = self._checkins_collection.find(build_match(flt), _projection(projection))
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=limit)

    async def count_checkins(self, flt: CheckInFilter) -> int:
        with _store_errors("count_checkins"):
            return await self._checkins_collection.count_documents(build_match(flt))

    async def group_checkins(self, flt: CheckInFilter, key: GroupKey) -> List[GroupStats]:
        pipeline = build_group_pipeline(flt, key)
        logger.debug(f"Grouping check-ins by {key.value}: {pipeline}")

        with _store_errors("group_checkins"):
            results = await self._checkins_collection.aggregate(pipeline).to_list(length=None)

        return [_to_group_stats(result) for result in results]

    async def tally_checkins(self, flt: CheckInFilter, key: GroupKey) -> GroupTally:
        pipeline = build_tally_pipeline(flt, key)
        logger.debug(f"Tallying check-ins by {key.value}: {pipeline}")

        with _store_errors("tally_checkins"):
            results = await self._checkins_collection.aggregate(pipeline).to_list(length=1)

        facets = results[0] if results else {}
        total = facets.get("total") or []
        return GroupTally(
            total=total[0]["count"] if total else 0,
            groups=[_to_group_stats(result) for result in facets.get("groups", [])],
        )

    async def rank_checkins(
        self,
        flt: CheckInFilter,
        ranking: Ranking,
        now: datetime,
        skip: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        pipeline = build_rank_pipeline(flt, ranking, now, skip, limit)
        logger.debug(f"Ranking check-ins by {ranking.name}: skip={skip} limit={limit}")

        with _store_errors("rank_checkins"):
            return await self._checkins_collection.aggregate(pipeline).to_list(length=limit)

    async def find_nearby(
        self,
        flt: CheckInFilter,
        lng: float,
        lat: float,
        max_distance: float,
        limit: int,
    ) -> List[Dict[str, Any]]:
        pipeline = build_nearby_pipeline(flt, lng, lat, max_distance, limit)
        logger.debug(f"Nearby check-ins around ({lng}, {lat}) within {max_distance}m")

        with _store_errors("find_nearby"):
            return await self._checkins_collection.aggregate(pipeline).to_list(length=limit)

    # ─────────────────────────────────────────────────────────────────
    # Users
    # ─────────────────────────────────────────────────────────────────

    async def find_user(
        self,
        user_id: ObjectId,
        projection: Optional[Iterable[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        with _store_errors("find_user"):
            return await self._users_collection.find_one({"_id": user_id}, _projection(projection))

    async def find_users(
        self,
        user_ids: Iterable[ObjectId],
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        ids = list(user_ids)
        if not ids:
            return []

        with _store_errors("find_users"):
            cursor = self._users_collection.find({"_id": {"$in": ids}}, _projection(projection))
            return await cursor.to_list(length=len(ids))

    async def find_blocker_ids(self, user_id: ObjectId) -> List[ObjectId]:
        with _store_errors("find_blocker_ids"):
            cursor = self._users_collection.find({"blockedUsers": user_id}, {"_id": 1})
            users = await cursor.to_list(length=None)
        return [user["_id"] for user in users]

    async def add_blocked_user(self, user_id: ObjectId, blocked_id: ObjectId) -> bool:
        with _store_errors("add_blocked_user"):
            result = await self._users_collection.update_one(
                {"_id": user_id},
                {"$addToSet": {"blockedUsers": blocked_id}},
            )
        return result.matched_count > 0

    async def remove_blocked_user(self, user_id: ObjectId, blocked_id: ObjectId) -> bool:
        with _store_errors("remove_blocked_user"):
            result = await self._users_collection.update_one(
                {"_id": user_id, "blockedUsers": blocked_id},
                {"$pull": {"blockedUsers": blocked_id}},
            )
        return result.modified_count > 0
