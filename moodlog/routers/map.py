"""
FastAPI router for the mood map.

Provides area statistics and nearby check-ins.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Query

from moodlog.config import settings
from moodlog.dependencies import get_map_service, get_visibility_filter, require_user_id
from moodlog.pipelines import map as pipelines
from moodlog.schemas.map import AreaStatsResponse, NearbyResponse
from moodlog.services.map import MapService
from moodlog.services.visibility import VisibilityFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/map", tags=["map"])


@router.get("/stats")
async def get_area_stats(
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    visibility_filter: Annotated[VisibilityFilter, Depends(get_visibility_filter)],
    map_service: Annotated[MapService, Depends(get_map_service)],
    sw_lat: float = Query(..., alias="swLat"),
    sw_lng: float = Query(..., alias="swLng"),
    ne_lat: float = Query(..., alias="neLat"),
    ne_lng: float = Query(..., alias="neLng"),
):
    """Get totals, the emotion breakdown and posts per day inside a viewport."""
    result = await pipelines.get_area_stats_pipeline(
        visibility_filter=visibility_filter,
        map_service=map_service,
        viewer_id=user_id,
        sw_lat=sw_lat,
        sw_lng=sw_lng,
        ne_lat=ne_lat,
        ne_lng=ne_lng,
        now=datetime.now(timezone.utc),
    )

    return AreaStatsResponse(**result).model_dump()


@router.get("/moods/nearby/{lat}/{lng}")
async def get_nearby_moods(
    lat: float,
    lng: float,
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    visibility_filter: Annotated[VisibilityFilter, Depends(get_visibility_filter)],
    map_service: Annotated[MapService, Depends(get_map_service)],
    max_distance: Optional[float] = Query(None, gt=0, alias="maxDistance"),
    limit: Optional[int] = Query(None),
):
    """
    Get recent public check-ins around a point, nearest first.

    maxDistance is in meters; the response reports it and each
    item's distance in km.
    """
    result = await pipelines.get_nearby_pipeline(
        visibility_filter=visibility_filter,
        map_service=map_service,
        viewer_id=user_id,
        lat=lat,
        lng=lng,
        now=datetime.now(timezone.utc),
        max_distance=max_distance or settings.MAP_NEARBY_DEFAULT_DISTANCE,
        limit=limit,
    )

    return NearbyResponse(**result).model_dump(by_alias=True)
