"""
Pydantic models for feed response validation.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Response Schemas
# =============================================================================

class FeedEmotion(BaseModel):
    name: Optional[str] = None
    attributes: Dict[str, Optional[float]] = {}


class FeedLocation(BaseModel):
    name: str
    coordinates: Optional[List[float]] = None
    isShared: Optional[bool] = None


class FeedLikes(BaseModel):
    count: int
    userIds: List[str]


class FeedComment(BaseModel):
    userId: Optional[str] = None
    content: Optional[str] = None
    timestamp: Optional[datetime] = None


class FeedComments(BaseModel):
    count: int
    data: List[FeedComment]


class FeedItem(BaseModel):
    """One entry of GET /api/feed, dumped by alias so the id goes out as _id"""
    id: str = Field(..., alias="_id")
    userId: Optional[str] = None
    isAnonymous: bool = False
    emotion: FeedEmotion
    reason: Optional[str] = None
    people: List[str] = []
    activities: List[str] = []
    privacy: Optional[str] = None
    location: Optional[FeedLocation] = None
    timestamp: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    likes: FeedLikes
    comments: FeedComments
    score: Optional[float] = None
