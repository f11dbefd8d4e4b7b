"""
Moodlog application settings.

Extends the base settings with feed, analytics and map configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Moodlog-specific settings."""

    # ==========================================================================
    # Feed Settings
    # ==========================================================================
    FEED_DEFAULT_LIMIT: int = 20
    FEED_MAX_LIMIT: int = 100

    # ==========================================================================
    # Profile Settings
    # ==========================================================================
    # Number of check-ins shown on the profile summary card
    PROFILE_RECENT_CHECKINS: int = 3

    # Default analytics window when the client sends none
    DEFAULT_ANALYTICS_PERIOD: str = "3months"

    # ==========================================================================
    # Map Settings
    # ==========================================================================
    # Map endpoints only look at public check-ins from the last N days
    MAP_WINDOW_DAYS: int = 30
    MAP_NEARBY_DEFAULT_DISTANCE: float = 5000.0  # meters
    MAP_NEARBY_DEFAULT_LIMIT: int = 50
    MAP_NEARBY_MAX_LIMIT: int = 200


# Global settings instance
settings = Settings()
