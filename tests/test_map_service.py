"""Unit tests for the mood map: area statistics and nearby check-ins."""

import pytest

from bson import ObjectId

from common.utils import BadRequestException
from moodlog.pipelines.map import get_area_stats_pipeline, get_nearby_pipeline
from moodlog.query import GeoBox
from moodlog.services.map import MapService
from moodlog.services.visibility import VisibilityFilter

from factories import NOW, days_ago, make_checkin, make_comments, make_location, make_user


AMSTERDAM = GeoBox.from_corners(sw_lat=52.3, sw_lng=4.8, ne_lat=52.4, ne_lng=5.0)


def dam(name="Dam Square"):
    return make_location(4.8932, 52.3731, name=name)


# ─────────────────────────────────────────────────────────────────
# area_stats
# ─────────────────────────────────────────────────────────────────


class TestAreaStats:
    @pytest.mark.asyncio
    async def test_counts_recent_public_checkins_in_box(self, engine_factory, sample_user_id):
        engine = engine_factory(checkins=[
            make_checkin(sample_user_id, days_ago(1), name="Joyful", location=dam()),
            make_checkin(sample_user_id, days_ago(2), name="Calm", location=dam()),
            make_checkin(sample_user_id, days_ago(3), name="Calm", location=dam()),
            # Outside the box
            make_checkin(sample_user_id, days_ago(1), location=make_location(2.35, 48.85)),
            # Not public
            make_checkin(sample_user_id, days_ago(1), privacy="friends", location=dam()),
            # Older than the window
            make_checkin(sample_user_id, days_ago(45), location=dam()),
            # No location at all
            make_checkin(sample_user_id, days_ago(1)),
        ])

        result = await MapService(engine).area_stats(AMSTERDAM, NOW)

        assert result == {
            "totalPosts": 3,
            "emotionBreakdown": {"Calm": 2, "Joyful": 1},
            "postsPerDay": 0.1,
        }

    @pytest.mark.asyncio
    async def test_empty_area(self, engine_factory):
        result = await MapService(engine_factory()).area_stats(AMSTERDAM, NOW)
        assert result == {"totalPosts": 0, "emotionBreakdown": {}, "postsPerDay": 0}

    @pytest.mark.asyncio
    async def test_excluded_authors_do_not_count(self, engine_factory, sample_user_id, other_user_id):
        engine = engine_factory(checkins=[
            make_checkin(sample_user_id, days_ago(1), location=dam()),
            make_checkin(other_user_id, days_ago(1), location=dam()),
        ])

        result = await MapService(engine).area_stats(AMSTERDAM, NOW, frozenset({other_user_id}))

        assert result["totalPosts"] == 1
        assert result["postsPerDay"] == 0.03

    @pytest.mark.asyncio
    async def test_window_length_drives_posts_per_day(self, engine_factory, sample_user_id):
        engine = engine_factory(checkins=[
            make_checkin(sample_user_id, days_ago(day), location=dam()) for day in range(4)
        ])

        result = await MapService(engine, window_days=7).area_stats(AMSTERDAM, NOW)

        assert result["totalPosts"] == 4
        assert result["postsPerDay"] == 0.57


# ─────────────────────────────────────────────────────────────────
# nearby
# ─────────────────────────────────────────────────────────────────


class TestNearby:
    @pytest.mark.asyncio
    async def test_nearest_first_with_author_cards(self, engine_factory, sample_user_id, other_user_id):
        liker = ObjectId()
        close = make_checkin(
            sample_user_id, days_ago(1),
            location=dam(), likes=[liker], comments=make_comments(2), activities=["walking"],
        )
        farther = make_checkin(other_user_id, days_ago(2), location=make_location(4.90, 52.3731))
        engine = engine_factory(
            checkins=[farther, close],
            users=[make_user(sample_user_id, "alice")],
        )

        items = await MapService(engine).nearby(lat=52.3731, lng=4.8932, now=NOW)

        assert [item["_id"] for item in items] == [str(close["_id"]), str(farther["_id"])]
        first, second = items
        assert first["id"] == first["_id"]
        assert first["distance"] == 0
        assert 0 < second["distance"] < 5
        assert first["userId"] == {
            "_id": str(sample_user_id),
            "id": str(sample_user_id),
            "username": "alice",
            "profilePicture": None,
        }
        # Author record is gone
        assert second["userId"] is None
        assert first["likesCount"] == 1
        assert first["commentsCount"] == 2
        assert first["activities"] == ["walking"]
        assert first["isAnonymous"] is False
        assert first["location"]["landmarkName"] == "Dam Square"

    @pytest.mark.asyncio
    async def test_radius_window_and_privacy(self, engine_factory, sample_user_id):
        inside = make_checkin(sample_user_id, days_ago(1), location=dam())
        engine = engine_factory(checkins=[
            inside,
            make_checkin(sample_user_id, days_ago(1), location=make_location(4.95, 52.3731)),
            make_checkin(sample_user_id, days_ago(40), location=dam()),
            make_checkin(sample_user_id, days_ago(1), privacy="private", location=dam()),
        ])

        items = await MapService(engine).nearby(lat=52.3731, lng=4.8932, now=NOW, max_distance=1000)

        assert [item["_id"] for item in items] == [str(inside["_id"])]

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, engine_factory, sample_user_id):
        engine = engine_factory(checkins=[
            make_checkin(sample_user_id, days_ago(1), location=dam()) for _ in range(5)
        ])
        service = MapService(engine, nearby_default_limit=3, nearby_max_limit=4)

        assert len(await service.nearby(lat=52.3731, lng=4.8932, now=NOW)) == 3
        assert len(await service.nearby(lat=52.3731, lng=4.8932, now=NOW, limit=50)) == 4
        assert len(await service.nearby(lat=52.3731, lng=4.8932, now=NOW, limit=-2)) == 1


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


class TestMapPipelines:
    @pytest.mark.asyncio
    async def test_area_stats_reports_normalized_bounds(self, engine_factory, sample_user_id):
        engine = engine_factory(users=[make_user(sample_user_id, "alice")])

        result = await get_area_stats_pipeline(
            visibility_filter=VisibilityFilter(engine),
            map_service=MapService(engine),
            viewer_id=sample_user_id,
            sw_lat=52.4, sw_lng=5.0, ne_lat=52.3, ne_lng=4.8,
            now=NOW,
        )

        assert result["bounds"] == {
            "sw": {"lat": 52.3, "lng": 4.8},
            "ne": {"lat": 52.4, "lng": 5.0},
        }
        assert result["data"]["totalPosts"] == 0

    @pytest.mark.asyncio
    async def test_nearby_reports_km(self, engine_factory, sample_user_id):
        engine = engine_factory(users=[make_user(sample_user_id, "alice")])

        result = await get_nearby_pipeline(
            visibility_filter=VisibilityFilter(engine),
            map_service=MapService(engine),
            viewer_id=sample_user_id,
            lat=52.3731, lng=4.8932, now=NOW, max_distance=2500,
        )

        assert result == {
            "center": {"lat": 52.3731, "lng": 4.8932},
            "maxDistance": 2.5,
            "count": 0,
            "data": [],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lat, lng", [(91, 0), (-90.5, 0), (0, 180.5), (0, -181)])
    async def test_out_of_range_center_rejected_before_store(self, sample_user_id, lat, lng):
        # Services without an engine prove no store call happens
        with pytest.raises(BadRequestException) as exc_info:
            await get_nearby_pipeline(
                visibility_filter=VisibilityFilter(None),
                map_service=MapService(None),
                viewer_id=sample_user_id,
                lat=lat, lng=lng, now=NOW, max_distance=5000,
            )

        assert exc_info.value.code == "INVALID_COORDINATES"

    @pytest.mark.asyncio
    async def test_out_of_range_corner_rejected(self, sample_user_id):
        with pytest.raises(BadRequestException) as exc_info:
            await get_area_stats_pipeline(
                visibility_filter=VisibilityFilter(None),
                map_service=MapService(None),
                viewer_id=sample_user_id,
                sw_lat=-95, sw_lng=4.8, ne_lat=52.4, ne_lng=5.0,
                now=NOW,
            )

        assert exc_info.value.code == "INVALID_COORDINATES"
