"""Unit tests for the in-process query engine."""

import pytest
from datetime import datetime, timedelta

from bson import ObjectId

from moodlog.query import CheckInFilter, GeoBox, GroupKey
from moodlog.query.memory_engine import get_path, project, sort_documents, spherical_distance

from factories import NOW, make_checkin, make_location, make_user


class TestHelpers:
    def test_get_path_walks_embedded_documents(self):
        doc = {"emotion": {"attributes": {"clarity": 0.4}}}
        assert get_path(doc, "emotion.attributes.clarity") == 0.4
        assert get_path(doc, "emotion.attributes.control") is None
        assert get_path(doc, "emotion.name.first", default="x") == "x"

    def test_sort_is_stable_across_keys(self):
        docs = [
            {"_id": 1, "score": 2, "timestamp": NOW},
            {"_id": 2, "score": 5, "timestamp": NOW - timedelta(hours=1)},
            {"_id": 3, "score": 2, "timestamp": NOW + timedelta(hours=1)},
        ]
        ordered = sort_documents(docs, [("score", -1), ("timestamp", -1), ("_id", -1)])
        assert [doc["_id"] for doc in ordered] == [2, 3, 1]

    def test_null_sorts_first_ascending(self):
        docs = [{"_id": 1, "v": 3}, {"_id": 2, "v": None}, {"_id": 3}]
        ordered = sort_documents(docs, [("v", 1), ("_id", 1)])
        assert [doc["_id"] for doc in ordered] == [2, 3, 1]

    def test_project_keeps_id_and_nested_fields(self):
        doc = {"_id": 7, "emotion": {"name": "Calm", "attributes": {"clarity": 1}}, "reason": "x"}
        assert project(doc, ["emotion.attributes"]) == {
            "_id": 7,
            "emotion": {"attributes": {"clarity": 1}},
        }

    def test_spherical_distance(self):
        assert spherical_distance(4.9, 52.37, 4.9, 52.37) == 0
        # One degree of latitude on a 6378.1 km sphere
        assert spherical_distance(0, 0, 0, 1) == pytest.approx(111318.8, abs=1)

    def test_project_returns_copies(self):
        doc = {"_id": 1, "people": ["Sam"]}
        projected = project(doc, None)
        projected["people"].append("Alex")
        assert doc["people"] == ["Sam"]


class TestInMemoryQueryEngine:
    @pytest.mark.asyncio
    async def test_naive_timestamps_are_treated_as_utc(self, engine_factory, sample_user_id):
        naive = datetime(2025, 6, 11, 10, 0)
        engine = engine_factory(checkins=[make_checkin(sample_user_id, naive)])

        count = await engine.count_checkins(CheckInFilter(
            author_id=sample_user_id,
            start=NOW - timedelta(hours=6),
            end=NOW,
        ))

        assert count == 1

    @pytest.mark.asyncio
    async def test_group_by_calendar_day_uses_utc_dates(self, engine_factory, sample_user_id):
        engine = engine_factory(checkins=[
            make_checkin(sample_user_id, NOW.replace(hour=0, minute=0)),
            make_checkin(sample_user_id, NOW.replace(hour=23, minute=59)),
            make_checkin(sample_user_id, NOW - timedelta(days=1)),
        ])

        groups = await engine.group_checkins(CheckInFilter(author_id=sample_user_id), GroupKey.CALENDAR_DAY)

        counts = {group.key: group.count for group in groups}
        assert counts == {"2025-06-11": 2, "2025-06-10": 1}

    @pytest.mark.asyncio
    async def test_rank_does_not_mutate_stored_documents(self, engine_factory, sample_user_id):
        from moodlog.services.feed import PopularityRanking

        engine = engine_factory(checkins=[make_checkin(sample_user_id, NOW)])

        ranked = await engine.rank_checkins(CheckInFilter(), PopularityRanking(), NOW, 0, 10)
        again = await engine.find_checkins(CheckInFilter(), sort=[])

        assert ranked[0]["score"] == 0
        assert "score" not in again[0]

    @pytest.mark.asyncio
    async def test_block_list_updates(self, engine_factory, sample_user_id, other_user_id):
        engine = engine_factory(users=[make_user(sample_user_id, "alice")])

        assert await engine.add_blocked_user(sample_user_id, other_user_id) is True
        assert await engine.add_blocked_user(ObjectId(), other_user_id) is False
        assert await engine.find_blocker_ids(other_user_id) == [sample_user_id]
        assert await engine.remove_blocked_user(sample_user_id, other_user_id) is True
        assert await engine.remove_blocked_user(sample_user_id, other_user_id) is False

    @pytest.mark.asyncio
    async def test_tally_counts_checkins_not_tags(self, engine_factory, sample_user_id):
        engine = engine_factory(checkins=[
            make_checkin(sample_user_id, NOW, activities=["gym", "work"]),
            make_checkin(sample_user_id, NOW, activities=["gym", "gym"]),
            make_checkin(sample_user_id, NOW),
        ])

        tally = await engine.tally_checkins(
            CheckInFilter(author_id=sample_user_id, tag_field="activities"),
            GroupKey.ACTIVITIES,
        )

        assert tally.total == 2
        assert {group.key: group.count for group in tally.groups} == {"gym": 2, "work": 1}

    @pytest.mark.asyncio
    async def test_within_box_includes_edges(self, engine_factory, sample_user_id):
        inside = make_checkin(sample_user_id, NOW, location=make_location(4.9, 52.37))
        edge = make_checkin(sample_user_id, NOW, location=make_location(5.0, 52.4))
        outside = make_checkin(sample_user_id, NOW, location=make_location(2.35, 48.85))
        unplaced = make_checkin(sample_user_id, NOW)
        engine = engine_factory(checkins=[inside, edge, outside, unplaced])

        box = GeoBox.from_corners(sw_lat=52.4, sw_lng=5.0, ne_lat=52.3, ne_lng=4.8)
        found = await engine.find_checkins(CheckInFilter(within=box), sort=[("_id", 1)])

        assert {doc["_id"] for doc in found} == {inside["_id"], edge["_id"]}

    @pytest.mark.asyncio
    async def test_find_nearby_orders_by_distance(self, engine_factory, sample_user_id):
        far = make_checkin(sample_user_id, NOW, location=make_location(4.95, 52.37))
        near = make_checkin(sample_user_id, NOW, location=make_location(4.901, 52.37))
        paris = make_checkin(sample_user_id, NOW, location=make_location(2.35, 48.85))
        engine = engine_factory(checkins=[far, paris, near, make_checkin(sample_user_id, NOW)])

        found = await engine.find_nearby(CheckInFilter(), 4.9, 52.37, 5000, 10)

        assert [doc["_id"] for doc in found] == [near["_id"], far["_id"]]
        assert found[0]["distance"] < found[1]["distance"] <= 5000

        limited = await engine.find_nearby(CheckInFilter(), 4.9, 52.37, 5000, 1)
        assert [doc["_id"] for doc in limited] == [near["_id"]]
