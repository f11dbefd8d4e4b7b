"""
Pydantic models for map response validation.

Map items carry both `_id` and `id`; dump them with by_alias=True.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MapPoint(BaseModel):
    lat: float
    lng: float


class MapBounds(BaseModel):
    sw: MapPoint
    ne: MapPoint


class AreaStats(BaseModel):
    totalPosts: int
    emotionBreakdown: Dict[str, int]
    postsPerDay: float


class AreaStatsResponse(BaseModel):
    """Response body for GET /api/map/stats"""
    success: bool = True
    bounds: MapBounds
    data: AreaStats


class MapAuthor(BaseModel):
    object_id: str = Field(..., alias="_id")
    id: str
    username: Optional[str] = None
    profilePicture: Optional[str] = None


class MapItem(BaseModel):
    object_id: str = Field(..., alias="_id")
    id: str
    userId: Optional[MapAuthor] = None
    emotion: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None
    privacy: Optional[str] = None
    isAnonymous: bool = False
    distance: float
    likesCount: int = 0
    commentsCount: int = 0
    people: List[str] = []
    activities: List[str] = []


class NearbyResponse(BaseModel):
    """Response body for GET /api/map/moods/nearby/{lat}/{lng}"""
    success: bool = True
    center: MapPoint
    maxDistance: float
    count: int
    data: List[MapItem]
