"""
Moodlog-specific database utilities.

Provides document models and collection names.
"""

from moodlog.database.collections import CHECKINS_COLLECTION, USERS_COLLECTION
from moodlog.database.documents import (
    CheckInDocument,
    CheckInFields,
    UserDocument,
    DOCUMENT_MODELS,
)

__all__ = [
    "CHECKINS_COLLECTION",
    "USERS_COLLECTION",
    "CheckInDocument",
    "CheckInFields",
    "UserDocument",
    "DOCUMENT_MODELS",
]
