"""
Beanie document models for the Moodlog collections.

The analytics and feed services read raw documents through the query
engine; these models register the collections with Beanie and declare the
indexes the feed and analytics queries depend on.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from beanie import PydanticObjectId
from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from common.database import BaseDocument


Privacy = Literal["public", "friends", "private"]


class EmotionAttributes(BaseModel):
    """Normalized emotion dimensions, each in [0, 1]."""
    pleasantness: Optional[float] = Field(None, ge=0, le=1)
    intensity: Optional[float] = Field(None, ge=0, le=1)
    control: Optional[float] = Field(None, ge=0, le=1)
    clarity: Optional[float] = Field(None, ge=0, le=1)


class Emotion(BaseModel):
    name: str
    attributes: EmotionAttributes = Field(default_factory=EmotionAttributes)


class GeoPoint(BaseModel):
    """GeoJSON point; coordinates are [longitude, latitude]."""
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2)


class Location(BaseModel):
    landmarkName: Optional[str] = None
    coordinates: Optional[GeoPoint] = None
    isShared: Optional[bool] = None


class Comment(BaseModel):
    userId: PydanticObjectId
    content: str = Field(..., max_length=500)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CheckInFields(BaseModel):
    """
    Stored shape of a check-in, usable without a database connection.

    Anything that writes check-ins builds them through this model, so
    stored tags are trimmed and likes hold each user once. The
    development server seeds its store this way.
    """
    userId: PydanticObjectId
    emotion: Emotion
    reason: Optional[str] = Field(None, max_length=500)
    people: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)
    location: Optional[Location] = None
    privacy: Privacy = "private"
    likes: List[PydanticObjectId] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("people", "activities")
    @classmethod
    def _clean_tags(cls, tags: List[str]) -> List[str]:
        cleaned = [tag.strip() for tag in tags]
        return [tag for tag in cleaned if tag]

    @field_validator("likes")
    @classmethod
    def _dedupe_likes(cls, likes: List[PydanticObjectId]) -> List[PydanticObjectId]:
        return list(dict.fromkeys(likes))


class CheckInDocument(BaseDocument, CheckInFields):
    """A mood check-in."""

    class Settings:
        name = "moodcheckins"
        use_state_management = True
        indexes = [
            IndexModel([("userId", ASCENDING), ("timestamp", DESCENDING)]),
            IndexModel([("privacy", ASCENDING)]),
            IndexModel([("privacy", ASCENDING), ("timestamp", DESCENDING)]),
            IndexModel([("location.coordinates", "2dsphere")], sparse=True),
        ]


class UserDocument(BaseDocument):
    """The slice of the user record the feed and profile read."""
    username: str
    email: Optional[str] = None
    profilePicture: Optional[str] = None
    blockedUsers: List[PydanticObjectId] = Field(default_factory=list)

    class Settings:
        name = "users"
        use_state_management = True
        indexes = [
            IndexModel([("blockedUsers", ASCENDING)]),
        ]


DOCUMENT_MODELS = [CheckInDocument, UserDocument]
