"""
Moodlog Mock API Server

Serves the real routers over an in-memory store seeded with sample users
and check-ins, for frontend development without MongoDB.

Run with: uvicorn mock_api:app --port 5002 --reload

Get a token with: GET /api/mock/token?username=alice
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from bson import ObjectId
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from common.utils import NotFoundException, success_response
from moodlog.database import CheckInFields
from moodlog.dependencies import get_jwt_auth, init_auth_services, init_services
from moodlog.errors import register_exception_handlers
from moodlog.query import InMemoryQueryEngine
from moodlog.routers import feed_router, map_router, profile_router, user_router


MOCK_JWT_SECRET = "mock-secret-not-for-production"


# =============================================================================
# MOCK DATA
# =============================================================================

ALICE_ID = ObjectId("665f00000000000000000001")
BOB_ID = ObjectId("665f00000000000000000002")
CAROL_ID = ObjectId("665f00000000000000000003")

MOCK_USERS: List[Dict[str, Any]] = [
    {"_id": ALICE_ID, "username": "alice", "email": "alice@example.com", "blockedUsers": []},
    {"_id": BOB_ID, "username": "bob", "email": "bob@example.com", "blockedUsers": []},
    # carol has blocked bob, so neither sees the other
    {"_id": CAROL_ID, "username": "carol", "email": "carol@example.com", "blockedUsers": [BOB_ID]},
]

# name, pleasantness, intensity, control, clarity
MOCK_EMOTIONS = [
    ("Joyful", 0.9, 0.7, 0.7, 0.8),
    ("Calm", 0.75, 0.2, 0.8, 0.7),
    ("Anxious", 0.2, 0.75, 0.25, 0.3),
    ("Tired", 0.35, 0.15, 0.4, 0.35),
    ("Excited", 0.85, 0.9, 0.55, 0.6),
]

MOCK_ACTIVITIES = [["studying"], ["gym", "music"], [], ["work"], ["gym"]]
MOCK_PEOPLE = [["Sam"], [], ["Sam", "Riley"], [], ["Riley"]]

# landmark, longitude, latitude
MOCK_LANDMARKS = [
    ("Campus Library", -118.4452, 34.0689),
    ("Sculpture Garden", -118.4400, 34.0750),
    ("Santa Monica Pier", -118.4973, 34.0094),
]


def build_mock_checkins(now: datetime) -> List[Dict[str, Any]]:
    """Two weeks of check-ins per user, mixing privacy levels and engagement."""
    checkins = []
    authors = [ALICE_ID, BOB_ID, CAROL_ID]

    for day in range(14):
        for offset, author in enumerate(authors):
            index = (day + offset) % len(MOCK_EMOTIONS)
            name, pleasantness, intensity, control, clarity = MOCK_EMOTIONS[index]
            timestamp = now - timedelta(days=day, hours=offset * 3 + 1)
            fans = [user_id for user_id in authors if user_id != author][: day % 3]

            landmark, lng, lat = MOCK_LANDMARKS[(day + offset) % len(MOCK_LANDMARKS)]

            fields = CheckInFields(
                userId=author,
                emotion={
                    "name": name,
                    "attributes": {
                        "pleasantness": pleasantness,
                        "intensity": intensity,
                        "control": control,
                        "clarity": clarity,
                    },
                },
                reason=f"Sample check-in {day}-{offset}",
                people=MOCK_PEOPLE[index],
                activities=MOCK_ACTIVITIES[index],
                location={
                    "landmarkName": landmark,
                    "coordinates": {"type": "Point", "coordinates": [lng, lat]},
                    "isShared": True,
                } if day % 2 == 0 else None,
                privacy=("public", "friends", "private")[day % 3] if offset == 0 else "public",
                likes=fans,
                comments=[
                    {"userId": fan, "content": "Nice!", "timestamp": timestamp + timedelta(minutes=30)}
                    for fan in fans[:1]
                ],
                timestamp=timestamp,
            )

            checkin = fields.model_dump()
            checkin["_id"] = ObjectId.from_datetime(timestamp)
            checkin["createdAt"] = timestamp
            checkin["updatedAt"] = timestamp
            checkins.append(checkin)

    return checkins


# =============================================================================
# APP SETUP
# =============================================================================

init_auth_services(secret=MOCK_JWT_SECRET)
init_services(InMemoryQueryEngine(
    checkins=build_mock_checkins(datetime.now(timezone.utc)),
    users=MOCK_USERS,
))

app = FastAPI(
    title="Moodlog Mock API",
    description="Mock API server for frontend development",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:3001"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
)

register_exception_handlers(app)

app.include_router(feed_router, tags=["Feed"])
app.include_router(map_router, tags=["Map"])
app.include_router(profile_router, tags=["Profile"])
app.include_router(user_router, tags=["User"])


# =============================================================================
# MOCK AUTH
# =============================================================================

@app.get("/api/mock/token", tags=["Mock"])
async def mock_token(username: str = Query("alice")):
    """Issue a bearer token for one of the seeded users."""
    user = next((u for u in MOCK_USERS if u["username"] == username), None)
    if user is None:
        raise NotFoundException("User not found", code="USER_NOT_FOUND")

    token = await get_jwt_auth().create_token(str(user["_id"]))
    return success_response({"accessToken": token, "userId": str(user["_id"])})


@app.get("/health", tags=["Health"])
async def health():
    return success_response({"status": "ok", "version": "1.0.0", "database": "in-memory"})
