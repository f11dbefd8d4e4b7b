"""Unit tests for the profile summary and analytics pipelines."""

import pytest

from common.utils import BadRequestException
from moodlog.pipelines.profile import get_mood_analytics_pipeline, get_profile_summary_pipeline
from moodlog.services.analytics import MoodAggregator, StreakCalculator
from moodlog.services.profile import ProfileService

from factories import TODAY, days_ago, make_checkin, make_user


@pytest.fixture
def summary_engine(engine_factory, sample_user_id, other_user_id):
    checkins = [
        make_checkin(sample_user_id, days_ago(0, hour=9), name="Calm", pleasantness=0.8),
        make_checkin(sample_user_id, days_ago(1), name="Anxious", pleasantness=0.2),
        make_checkin(sample_user_id, days_ago(2), name="Calm", pleasantness=0.6),
        make_checkin(sample_user_id, days_ago(4), name="Calm", pleasantness=0.4),
        make_checkin(sample_user_id, days_ago(20), name="Anxious", pleasantness=0.1),
        make_checkin(other_user_id, days_ago(0), name="Joyful"),
    ]
    users = [make_user(sample_user_id, "alice"), make_user(other_user_id, "bob")]
    return engine_factory(checkins=checkins, users=users)


async def run_summary(engine, user_id):
    return await get_profile_summary_pipeline(
        profile_service=ProfileService(engine),
        streak_calculator=StreakCalculator(engine),
        mood_aggregator=MoodAggregator(engine),
        user_id=user_id,
        today=TODAY,
    )


class TestProfileSummaryPipeline:
    @pytest.mark.asyncio
    async def test_summary_card(self, summary_engine, sample_user_id):
        result = await run_summary(summary_engine, sample_user_id)

        assert result["username"] == "alice"
        assert result["totalCheckins"] == 5
        # today, yesterday, two days ago; the gap on day 3 ends the run
        assert result["checkinStreak"] == 3

    @pytest.mark.asyncio
    async def test_top_mood_uses_latest_attributes(self, summary_engine, sample_user_id):
        result = await run_summary(summary_engine, sample_user_id)

        top_mood = result["topMood"]
        assert top_mood["name"] == "Calm"
        assert top_mood["count"] == 3
        assert top_mood["attributes"]["pleasantness"] == 0.8

    @pytest.mark.asyncio
    async def test_recent_checkins_newest_first(self, summary_engine, sample_user_id):
        result = await run_summary(summary_engine, sample_user_id)

        recent = result["recentCheckins"]
        assert [checkin["emotion"]["name"] for checkin in recent] == ["Calm", "Anxious", "Calm"]
        assert recent[0]["timestamp"] == days_ago(0, hour=9)
        assert set(recent[0]) == {"id", "emotion", "timestamp"}

    @pytest.mark.asyncio
    async def test_weekly_summary(self, summary_engine, sample_user_id):
        result = await run_summary(summary_engine, sample_user_id)

        weekly = result["weeklySummary"]
        assert weekly["weeklyCheckinsCount"] == 4
        assert weekly["weeklyTopMood"] == {"name": "Calm", "count": 3}
        assert weekly["averageMoodForWeek"]["averageAttributes"]["pleasantness"] == 0.5

    @pytest.mark.asyncio
    async def test_user_without_checkins(self, engine_factory, sample_user_id):
        engine = engine_factory(users=[make_user(sample_user_id, "new")])

        result = await run_summary(engine, sample_user_id)

        assert result["totalCheckins"] == 0
        assert result["checkinStreak"] == 0
        assert result["topMood"] is None
        assert result["recentCheckins"] == []
        assert result["weeklySummary"]["weeklyTopMood"] is None
        assert result["weeklySummary"]["averageMoodForWeek"]["topEmotionCount"] == 0


class TestMoodAnalyticsPipeline:
    @pytest.mark.asyncio
    async def test_week_window(self, summary_engine, sample_user_id):
        result = await get_mood_analytics_pipeline(
            MoodAggregator(summary_engine), sample_user_id, "week", today=TODAY
        )

        assert result["period"] == "week"
        assert result["averageMoodForPeriod"]["totalCheckins"] == 4
        wednesday = result["averageMoodByDayOfWeek"][3]
        assert wednesday["dayOfWeek"] == "Wednesday"
        assert wednesday["totalCheckins"] == 1

    @pytest.mark.asyncio
    async def test_invalid_period_skips_the_store(self, sample_user_id):
        class UntouchableAggregator:
            def __getattr__(self, name):
                raise AssertionError(f"store accessed via {name}")

        with pytest.raises(BadRequestException) as exc_info:
            await get_mood_analytics_pipeline(UntouchableAggregator(), sample_user_id, "fortnight")

        assert exc_info.value.code == "INVALID_PERIOD"
