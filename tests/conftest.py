"""
Pytest configuration and shared fixtures.
"""

import os

# Cheap password hashing and an empty store for the API under test
os.environ.setdefault("API_BCRYPT_ROUNDS", "4")
os.environ.setdefault("LIBRARY_SEED_DEMO_BOOKS", "false")

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from library.models import BookCandidate
from library.store import BookStore


class FakeClock:
    """Clock that advances one second per reading."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    """Create a deterministic clock."""
    return FakeClock()


@pytest.fixture
def book_store(clock):
    """Create an empty store with predictable ids and timestamps."""
    counter = itertools.count(1)
    return BookStore(max_books=25, clock=clock, id_factory=lambda: f"book-{next(counter)}")


@pytest.fixture
def make_candidate():
    """Build a valid candidate, overriding any field."""
    def _make(**overrides):
        fields = {
            "title": "Dune",
            "author": "Frank Herbert",
            "isbn": "978-0441013593",
            "rating": 5,
            "comments": "A classic of the genre.",
            "cover_image_urls": ["https://covers.openlibrary.org/b/id/1-L.jpg"],
        }
        fields.update(overrides)
        return BookCandidate(**fields)
    return _make


@pytest.fixture
def sample_candidate(make_candidate):
    """Create a valid candidate for testing."""
    return make_candidate()
