"""
Base document class with common fields for all models.

Provides createdAt and updatedAt timestamps, stored under the camelCase
names the collections already use. Extend this class for your
application-specific models.

Example:
    from common.database import BaseDocument

    class User(BaseDocument):
        email: str
        username: str

        class Settings:
            name = "users"  # MongoDB collection name
"""

import logging
from datetime import datetime, timezone
from beanie import Document
from pydantic import Field

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class BaseDocument(Document):
    """
    Base document with common fields.

    All documents extending this class will have:
    - createdAt: Timestamp when document was created
    - updatedAt: Timestamp when document was last modified
    """

    createdAt: datetime = Field(default_factory=_utcnow)
    updatedAt: datetime = Field(default_factory=_utcnow)

    class Settings:
        use_state_management = True

    async def save(self, *args, **kwargs):
        """Override save to automatically update updatedAt timestamp."""
        self.updatedAt = _utcnow()
        collection_name = self.Settings.name if hasattr(self.Settings, "name") else self.__class__.__name__
        logger.debug(f"Saving document to {collection_name}: {self.id}")
        try:
            return await super().save(*args, **kwargs)
        except Exception as e:
            logger.error(f"Failed to save document to {collection_name}: {e}")
            raise
