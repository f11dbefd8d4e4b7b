"""
Map pipeline functions.

Stateless orchestration logic for the mood map.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId

from moodlog.query import GeoBox
from moodlog.services.map import MapService
from moodlog.services.visibility import VisibilityFilter
from moodlog.validators import parse_coordinates

logger = logging.getLogger(__name__)


async def get_area_stats_pipeline(
    visibility_filter: VisibilityFilter,
    map_service: MapService,
    viewer_id: ObjectId,
    sw_lat: float,
    sw_lng: float,
    ne_lat: float,
    ne_lng: float,
    now: datetime,
) -> Dict[str, Any]:
    """
    Orchestrates area statistics for a map viewport.

    Returns:
        dict with bounds {sw, ne} and data {totalPosts, emotionBreakdown, postsPerDay}

    Raises:
        BadRequestException: INVALID_COORDINATES for an out-of-range corner
    """
    sw_lat, sw_lng = parse_coordinates(sw_lat, sw_lng)
    ne_lat, ne_lng = parse_coordinates(ne_lat, ne_lng)
    box = GeoBox.from_corners(sw_lat=sw_lat, sw_lng=sw_lng, ne_lat=ne_lat, ne_lng=ne_lng)

    excluded = await visibility_filter.excluded_authors(viewer_id)
    data = await map_service.area_stats(box, now, excluded)

    return {"bounds": box.to_dict(), "data": data}


async def get_nearby_pipeline(
    visibility_filter: VisibilityFilter,
    map_service: MapService,
    viewer_id: ObjectId,
    lat: float,
    lng: float,
    now: datetime,
    max_distance: float,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Orchestrates the nearby check-ins around a point.

    Returns:
        dict with center, maxDistance (km), count and data

    Raises:
        BadRequestException: INVALID_COORDINATES for an out-of-range center
    """
    lat, lng = parse_coordinates(lat, lng)

    excluded = await visibility_filter.excluded_authors(viewer_id)
    items = await map_service.nearby(
        lat=lat,
        lng=lng,
        now=now,
        excluded=excluded,
        max_distance=max_distance,
        limit=limit,
    )

    return {
        "center": {"lat": lat, "lng": lng},
        "maxDistance": max_distance / 1000,
        "count": len(items),
        "data": items,
    }
