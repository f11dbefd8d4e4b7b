"""
Moodlog collection names.

Taken from the Beanie document settings so the raw-query engine and the
index declarations always agree.
"""

from moodlog.database.documents import CheckInDocument, UserDocument


CHECKINS_COLLECTION = CheckInDocument.Settings.name
USERS_COLLECTION = UserDocument.Settings.name
