"""
Unit tests for book validation rules.
"""

import pytest

from library.validation import (
    MAX_AUTHOR_LENGTH, MAX_COMMENTS_LENGTH, MAX_TITLE_LENGTH,
    RejectionReason, find_rejections, validate_book,
)


class TestRating:
    """Test cases for the rating range."""

    @pytest.mark.parametrize("rating", [0, 1, 2, 3, 4, 5])
    def test_ratings_in_range_accepted(self, make_candidate, rating):
        """Every rating from 0 to 5 is accepted."""
        result = validate_book(make_candidate(rating=rating))
        assert result.is_valid

    @pytest.mark.parametrize("rating", [-1, 6, 100])
    def test_ratings_out_of_range_rejected(self, make_candidate, rating):
        """Ratings below 0 or above 5 are rejected."""
        result = validate_book(make_candidate(rating=rating))
        assert result.reason == RejectionReason.RATING_OUT_OF_RANGE
        assert result.message == "Rating must be between 0 (no rating) and 5"


class TestComments:
    """Test cases for the comment rules."""

    @pytest.mark.parametrize("comments", [None, "", "   "])
    def test_rated_book_requires_comments(self, make_candidate, comments):
        """A rating above 0 needs non-blank comments."""
        result = validate_book(make_candidate(rating=3, comments=comments))
        assert result.reason == RejectionReason.COMMENTS_REQUIRED

    def test_unrated_book_without_comments_accepted(self, make_candidate):
        """An unrated book may have no comments."""
        assert validate_book(make_candidate(rating=0, comments=None)).is_valid
        assert validate_book(make_candidate(rating=0, comments="")).is_valid

    @pytest.mark.parametrize("comments", ["this book was horrible", "Horrible!", "simply HORRIBLE"])
    def test_forbidden_word_rejected(self, make_candidate, comments):
        """The word 'horrible' is refused in any case."""
        result = validate_book(make_candidate(comments=comments))
        assert result.reason == RejectionReason.FORBIDDEN_WORD

    def test_forbidden_word_rejected_on_unrated_book(self, make_candidate):
        """The forbidden word check does not depend on the rating."""
        result = validate_book(make_candidate(rating=0, comments="horrible ending"))
        assert result.reason == RejectionReason.FORBIDDEN_WORD


class TestLengthBounds:
    """Test cases for field length limits."""

    def test_title_length(self, make_candidate):
        """200 characters is the longest allowed title."""
        assert validate_book(make_candidate(title="t" * MAX_TITLE_LENGTH)).is_valid
        result = validate_book(make_candidate(title="t" * (MAX_TITLE_LENGTH + 1)))
        assert result.reason == RejectionReason.TITLE_TOO_LONG

    def test_author_length(self, make_candidate):
        """100 characters is the longest allowed author."""
        assert validate_book(make_candidate(author="a" * MAX_AUTHOR_LENGTH)).is_valid
        result = validate_book(make_candidate(author="a" * (MAX_AUTHOR_LENGTH + 1)))
        assert result.reason == RejectionReason.AUTHOR_TOO_LONG

    def test_comments_length(self, make_candidate):
        """1000 characters is the longest allowed comment."""
        assert validate_book(make_candidate(comments="c" * MAX_COMMENTS_LENGTH)).is_valid
        result = validate_book(make_candidate(comments="c" * (MAX_COMMENTS_LENGTH + 1)))
        assert result.reason == RejectionReason.COMMENTS_TOO_LONG

    def test_limits_match_documented_values(self):
        assert (MAX_TITLE_LENGTH, MAX_AUTHOR_LENGTH, MAX_COMMENTS_LENGTH) == (200, 100, 1000)


class TestRequiredFields:
    """Test cases for blank title and author."""

    def test_blank_title_rejected(self, make_candidate):
        assert validate_book(make_candidate(title="  ")).reason == RejectionReason.TITLE_REQUIRED

    def test_blank_author_rejected(self, make_candidate):
        assert validate_book(make_candidate(author="")).reason == RejectionReason.AUTHOR_REQUIRED


class TestRuleOrder:
    """Test cases for first-failure reporting."""

    def test_first_failure_is_reported(self, make_candidate):
        """The rating check comes before the length checks."""
        candidate = make_candidate(rating=9, title="t" * 300, author="a" * 300)
        assert validate_book(candidate).reason == RejectionReason.RATING_OUT_OF_RANGE

    def test_all_failures_listed_in_order(self, make_candidate):
        """find_rejections reports every broken rule in rule order."""
        candidate = make_candidate(
            rating=4,
            comments=None,
            title="t" * 201,
            author="a" * 101,
        )
        assert find_rejections(candidate) == [
            RejectionReason.COMMENTS_REQUIRED,
            RejectionReason.TITLE_TOO_LONG,
            RejectionReason.AUTHOR_TOO_LONG,
        ]

    def test_valid_candidate_has_no_rejections(self, sample_candidate):
        assert find_rejections(sample_candidate) == []
        result = validate_book(sample_candidate)
        assert result.reason is None
        assert result.message is None

    def test_validation_does_not_modify_candidate(self, sample_candidate):
        before = sample_candidate.model_dump()
        validate_book(sample_candidate)
        assert sample_candidate.model_dump() == before
