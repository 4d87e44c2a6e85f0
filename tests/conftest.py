"""Pytest configuration and fixtures for the worship planner tests."""

import pytest
from rest_framework.test import APIClient

from .samples import AMAZING_GRACE, HOLY_HOLY_HOLY, TEN_THOUSAND_REASONS


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def prior_elements():
    """Elements stored before the pastor edits the order: one chosen song, one filled-in reading."""
    return [
        {
            "id": "opening",
            "type": "song_hymn",
            "content": "Opening Hymn: Holy, Holy, Holy #138 (Cranberry)",
            "selection": dict(HOLY_HOLY_HOLY),
            "required": True,
        },
        {
            "id": "first-reading",
            "type": "reading",
            "content": "First Reading:",
            "reference": "Isaiah 6:1-8",
            "required": True,
        },
    ]


@pytest.fixture
def three_songs():
    """Stored elements with a song chosen for each of the three song slots."""
    return [
        {"id": "s1", "type": "song_hymn", "content": "Opening Hymn: Holy, Holy, Holy #138 (Cranberry)", "selection": dict(HOLY_HOLY_HOLY)},
        {"id": "l1", "type": "liturgy", "content": "Greeting"},
        {"id": "s2", "type": "song_hymn", "content": "Hymn of the Day: Amazing Grace #779 (Cranberry)", "selection": dict(AMAZING_GRACE)},
        {"id": "s3", "type": "song_hymn", "content": "Sending Song: 10,000 Reasons - Matt Redman", "selection": dict(TEN_THOUSAND_REASONS)},
    ]
