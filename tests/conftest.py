"""Shared test fixtures for Moodlog backend tests."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from moodlog.query import InMemoryQueryEngine

from factories import NOW, TODAY, mock_cursor


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def sample_user_id():
    return ObjectId()


@pytest.fixture
def other_user_id():
    return ObjectId()


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() and aggregate() return cursors synchronously (not
    # coroutines), so use MagicMock for them. Async methods like
    # find_one, update_one, count_documents stay as AsyncMock.
    collection.find = MagicMock(return_value=mock_cursor([]))
    collection.aggregate = MagicMock(return_value=mock_cursor([]))
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def engine_factory():
    def build(checkins=(), users=()):
        return InMemoryQueryEngine(checkins=checkins, users=users)
    return build
