"""API routers."""

from moodlog.routers.feed import router as feed_router
from moodlog.routers.map import router as map_router
from moodlog.routers.profile import router as profile_router
from moodlog.routers.user import router as user_router

__all__ = ["feed_router", "map_router", "profile_router", "user_router"]
