"""
FastAPI dependencies for Moodlog application.

Provides dependency injection for all services.
"""

from typing import Annotated, Optional

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, create_auth_dependency
from common.utils import UnauthorizedException

from moodlog.config import settings
from moodlog.query import MongoQueryEngine, QueryEngine
from moodlog.services.analytics import MoodAggregator, StreakCalculator
from moodlog.services.feed import FeedRanker
from moodlog.services.map import MapService
from moodlog.services.profile import ProfileService
from moodlog.services.user import BlockService
from moodlog.services.visibility import VisibilityFilter


# =============================================================================
# Service Instances (initialized on startup)
# =============================================================================

# Auth
_jwt_auth: Optional[JWTAuth] = None

# Feed
_visibility_filter: Optional[VisibilityFilter] = None
_feed_ranker: Optional[FeedRanker] = None

# Profile / analytics
_profile_service: Optional[ProfileService] = None
_streak_calculator: Optional[StreakCalculator] = None
_mood_aggregator: Optional[MoodAggregator] = None

# Users
_block_service: Optional[BlockService] = None

# Map
_map_service: Optional[MapService] = None


# =============================================================================
# Initialization Functions
# =============================================================================

def init_auth_services(
    secret: str,
    algorithm: str = "HS256",
    access_token_expire_minutes: int = 60,
) -> None:
    """Initialize the bearer-token verifier."""
    global _jwt_auth
    _jwt_auth = JWTAuth(
        secret=secret,
        algorithm=algorithm,
        access_token_expire_minutes=access_token_expire_minutes,
    )


def init_services(engine: QueryEngine) -> None:
    """Initialize every service around one query engine."""
    global _visibility_filter, _feed_ranker
    global _profile_service, _streak_calculator, _mood_aggregator, _block_service
    global _map_service

    _visibility_filter = VisibilityFilter(engine)
    _feed_ranker = FeedRanker(
        engine,
        default_limit=settings.FEED_DEFAULT_LIMIT,
        max_limit=settings.FEED_MAX_LIMIT,
    )

    _profile_service = ProfileService(engine)
    _streak_calculator = StreakCalculator(engine)
    _mood_aggregator = MoodAggregator(engine)

    _block_service = BlockService(engine)

    _map_service = MapService(
        engine,
        window_days=settings.MAP_WINDOW_DAYS,
        nearby_default_limit=settings.MAP_NEARBY_DEFAULT_LIMIT,
        nearby_max_limit=settings.MAP_NEARBY_MAX_LIMIT,
    )


def init_all_services(db: AsyncIOMotorDatabase) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
    """
    init_auth_services(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    init_services(MongoQueryEngine(db))


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_jwt_auth() -> JWTAuth:
    """Get JWT auth provider."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized.")
    return _jwt_auth


get_current_user_id = create_auth_dependency(get_jwt_auth)


async def require_user_id(
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ObjectId:
    """Dependency that requires authentication and yields the caller's ObjectId."""
    if not ObjectId.is_valid(user_id):
        raise UnauthorizedException(message="Token subject is not a user ID", code="INVALID_TOKEN")
    return ObjectId(user_id)


# ─────────────────────────────────────────────────────────────────
# Service getters
# ─────────────────────────────────────────────────────────────────

def get_visibility_filter() -> VisibilityFilter:
    """Get visibility filter instance."""
    if _visibility_filter is None:
        raise RuntimeError("Feed services not initialized.")
    return _visibility_filter


def get_feed_ranker() -> FeedRanker:
    """Get feed ranker instance."""
    if _feed_ranker is None:
        raise RuntimeError("Feed services not initialized.")
    return _feed_ranker


def get_profile_service() -> ProfileService:
    """Get profile service instance."""
    if _profile_service is None:
        raise RuntimeError("Profile services not initialized.")
    return _profile_service


def get_streak_calculator() -> StreakCalculator:
    """Get streak calculator instance."""
    if _streak_calculator is None:
        raise RuntimeError("Profile services not initialized.")
    return _streak_calculator


def get_mood_aggregator() -> MoodAggregator:
    """Get mood aggregator instance."""
    if _mood_aggregator is None:
        raise RuntimeError("Profile services not initialized.")
    return _mood_aggregator


def get_block_service() -> BlockService:
    """Get block service instance."""
    if _block_service is None:
        raise RuntimeError("User services not initialized.")
    return _block_service


def get_map_service() -> MapService:
    """Get map service instance."""
    if _map_service is None:
        raise RuntimeError("Map services not initialized.")
    return _map_service
