"""Unit tests for the stored check-in shape."""

import pytest
from pydantic import ValidationError

from bson import ObjectId

from moodlog.database import CheckInFields

from factories import NOW


def fields(**overrides):
    data = {
        "userId": ObjectId(),
        "emotion": {"name": "Calm", "attributes": {"pleasantness": 0.6}},
        "timestamp": NOW,
    }
    data.update(overrides)
    return CheckInFields(**data)


class TestCheckInFields:
    def test_defaults_to_private(self):
        checkin = fields()
        assert checkin.privacy == "private"
        assert checkin.people == []
        assert checkin.likes == []

    def test_tags_are_trimmed_and_blank_tags_dropped(self):
        checkin = fields(activities=["  gym ", "", "   "], people=["Sam", "Sam"])
        assert checkin.activities == ["gym"]
        # duplicates are allowed in tags
        assert checkin.people == ["Sam", "Sam"]

    def test_likes_are_deduplicated(self):
        liker = ObjectId()
        checkin = fields(likes=[liker, liker])
        assert checkin.likes == [liker]

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_attributes_are_bounded(self, value):
        with pytest.raises(ValidationError):
            fields(emotion={"name": "Calm", "attributes": {"intensity": value}})

    def test_unknown_privacy_rejected(self):
        with pytest.raises(ValidationError):
            fields(privacy="everyone")

    def test_reason_length(self):
        with pytest.raises(ValidationError):
            fields(reason="x" * 501)


class TestSeededCheckIns:
    def test_seed_rows_are_built_through_stored_shape(self):
        from mock_api import build_mock_checkins

        checkins = build_mock_checkins(NOW)

        assert len(checkins) == 42
        for checkin in checkins:
            stored = {
                key: value for key, value in checkin.items()
                if key not in ("_id", "createdAt", "updatedAt")
            }
            assert CheckInFields(**checkin).model_dump() == stored
            assert len(set(checkin["likes"])) == len(checkin["likes"])
            assert checkin["createdAt"] == checkin["timestamp"]

    def test_seed_locations_are_geojson_points(self):
        from mock_api import build_mock_checkins

        located = [c for c in build_mock_checkins(NOW) if c["location"] is not None]

        assert located
        for checkin in located:
            point = checkin["location"]["coordinates"]
            assert point["type"] == "Point"
            assert len(point["coordinates"]) == 2
