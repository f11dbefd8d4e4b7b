"""
The Mongo and in-memory engines must answer the same questions the same way.

The Mongo engine runs its real pipelines against mongomock-motor; the
in-memory engine evaluates the same filters in Python. Both are loaded
with identical documents. Timestamps are whole seconds since the store
keeps only millisecond precision.
"""

import copy

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from moodlog.database import CHECKINS_COLLECTION, USERS_COLLECTION
from moodlog.query import InMemoryQueryEngine, MongoQueryEngine
from moodlog.services.analytics import MoodAggregator, StreakCalculator, resolve_period
from moodlog.services.feed import STRATEGIES, FeedRanker
from moodlog.services.visibility import VisibilityFilter

from factories import NOW, TODAY, days_ago, make_checkin, make_comments, make_user


ALICE = ObjectId("665f0000000000000000a001")
BOB = ObjectId("665f0000000000000000a002")
CAROL = ObjectId("665f0000000000000000a003")


def seed_users():
    return [
        make_user(ALICE, "alice"),
        make_user(BOB, "bob"),
        # carol has blocked alice
        make_user(CAROL, "carol", blocked=[ALICE]),
    ]


def seed_checkins():
    return [
        # alice: three consecutive days up to today, then a gap
        make_checkin(ALICE, days_ago(0, hour=9), name="Calm", pleasantness=0.75, intensity=0.25,
                     control=0.5, clarity=1.0, activities=["gym", "music"], people=["Sam"]),
        make_checkin(ALICE, days_ago(1, hour=20), name="Joyful", pleasantness=1.0, intensity=0.75,
                     control=0.75, clarity=0.5, activities=["gym", "gym"], people=["Sam", "Riley"],
                     likes=[BOB], comments=make_comments(1, BOB)),
        make_checkin(ALICE, days_ago(2, hour=7), name="Calm", pleasantness=0.5, intensity=0.5,
                     control=0.25, clarity=0.75, privacy="friends", activities=["work"]),
        make_checkin(ALICE, days_ago(4, hour=13), name="Anxious", pleasantness=0.25, intensity=1.0,
                     control=0.0, clarity=0.25, people=["Riley"]),
        make_checkin(ALICE, days_ago(10, hour=18), name="Tired", pleasantness=0.25, intensity=0.0,
                     control=0.5, clarity=0.5, privacy="private"),
        make_checkin(ALICE, days_ago(40, hour=11), name="Joyful", pleasantness=0.75, intensity=0.5,
                     control=1.0, clarity=1.0, activities=["music"]),
        # bob and carol: public posts with varying engagement
        make_checkin(BOB, days_ago(0, hour=6), name="Excited", likes=[ALICE, CAROL],
                     comments=make_comments(2, CAROL)),
        make_checkin(BOB, days_ago(3, hour=10), name="Calm", likes=[CAROL]),
        make_checkin(BOB, days_ago(6, hour=22), name="Tired", comments=make_comments(3, ALICE)),
        make_checkin(CAROL, days_ago(1, hour=8), name="Joyful", likes=[BOB]),
        make_checkin(CAROL, days_ago(2, hour=14), name="Anxious", comments=make_comments(1, BOB)),
    ]


async def build_engines():
    """A Mongo engine over mongomock and an in-memory engine with the same data."""
    checkins, users = seed_checkins(), seed_users()

    db = AsyncMongoMockClient(tz_aware=True)["moodlog_test"]
    await db[CHECKINS_COLLECTION].insert_many(copy.deepcopy(checkins))
    await db[USERS_COLLECTION].insert_many(copy.deepcopy(users))

    memory = InMemoryQueryEngine(checkins=copy.deepcopy(checkins), users=copy.deepcopy(users))
    return MongoQueryEngine(db), memory


# ─────────────────────────────────────────────────────────────────
# Analytics
# ─────────────────────────────────────────────────────────────────


class TestAnalyticsAgreement:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("period", ["week", "month", "3months", "all"])
    async def test_period_stats(self, period):
        mongo, memory = await build_engines()
        window = resolve_period(period, today=TODAY)

        expected = await MoodAggregator(memory).period_stats(ALICE, window)
        actual = await MoodAggregator(mongo).period_stats(ALICE, window)

        assert expected["totalCheckins"] > 0
        assert actual == expected

    @pytest.mark.asyncio
    async def test_day_of_week_stats(self):
        mongo, memory = await build_engines()
        window = resolve_period("all", today=TODAY)

        expected = await MoodAggregator(memory).day_of_week_stats(ALICE, window)
        actual = await MoodAggregator(mongo).day_of_week_stats(ALICE, window)

        assert len(actual) == 7
        assert actual == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("context_type", ["activity", "people"])
    async def test_context_stats(self, context_type):
        mongo, memory = await build_engines()
        window = resolve_period("all", today=TODAY)

        expected = await MoodAggregator(memory).context_stats(ALICE, window, context_type)
        actual = await MoodAggregator(mongo).context_stats(ALICE, window, context_type)

        assert expected["summary"]["totalCheckinsWithContext"] > 0
        assert actual == expected

    @pytest.mark.asyncio
    async def test_streak(self):
        mongo, memory = await build_engines()

        expected = await StreakCalculator(memory).calculate(ALICE, today=TODAY)
        actual = await StreakCalculator(mongo).calculate(ALICE, today=TODAY)

        assert expected == 3
        assert actual == expected


# ─────────────────────────────────────────────────────────────────
# Feed
# ─────────────────────────────────────────────────────────────────


class TestFeedAgreement:
    @pytest.mark.asyncio
    async def test_excluded_authors(self):
        mongo, memory = await build_engines()

        for viewer in (ALICE, BOB, CAROL):
            expected = await VisibilityFilter(memory).excluded_authors(viewer)
            assert await VisibilityFilter(mongo).excluded_authors(viewer) == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort", sorted(STRATEGIES))
    async def test_rankings(self, sort):
        mongo, memory = await build_engines()
        ranking = STRATEGIES[sort]
        excluded = await VisibilityFilter(memory).excluded_authors(BOB)

        expected = await FeedRanker(memory).rank(excluded, ranking, NOW, skip=0, limit=20)
        actual = await FeedRanker(mongo).rank(excluded, ranking, NOW, skip=0, limit=20)

        assert [item["_id"] for item in actual] == [item["_id"] for item in expected]
        for mongo_item, memory_item in zip(actual, expected):
            mongo_item, memory_item = dict(mongo_item), dict(memory_item)
            mongo_score, memory_score = mongo_item.pop("score", None), memory_item.pop("score", None)
            if memory_score is None:
                assert mongo_score is None
            else:
                assert mongo_score == pytest.approx(memory_score)
            assert mongo_item == memory_item

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort", sorted(STRATEGIES))
    async def test_paging(self, sort):
        mongo, memory = await build_engines()
        ranking = STRATEGIES[sort]

        for skip in range(0, 6, 2):
            expected = await FeedRanker(memory).rank(frozenset(), ranking, NOW, skip=skip, limit=2)
            actual = await FeedRanker(mongo).rank(frozenset(), ranking, NOW, skip=skip, limit=2)
            assert [item["_id"] for item in actual] == [item["_id"] for item in expected]
