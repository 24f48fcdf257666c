"""
Content rules a book must satisfy before it is stored.

The same rules apply to creation and update. ``validate_book`` reports
the first failure in rule order; ``find_rejections`` reports all of them.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .models import BookCandidate

MIN_RATING = 0
MAX_RATING = 5
MAX_TITLE_LENGTH = 200
MAX_AUTHOR_LENGTH = 100
MAX_COMMENTS_LENGTH = 1000
FORBIDDEN_WORDS = ("horrible",)


class RejectionReason(str, Enum):
    """Why a candidate was refused."""
    RATING_OUT_OF_RANGE = "rating out of range"
    COMMENTS_REQUIRED = "comments required"
    FORBIDDEN_WORD = "forbidden word"
    TITLE_TOO_LONG = "title too long"
    AUTHOR_TOO_LONG = "author too long"
    COMMENTS_TOO_LONG = "comments too long"
    TITLE_REQUIRED = "title required"
    AUTHOR_REQUIRED = "author required"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    RejectionReason.RATING_OUT_OF_RANGE: f"Rating must be between {MIN_RATING} (no rating) and {MAX_RATING}",
    RejectionReason.COMMENTS_REQUIRED: "Comments are required when rating is given",
    RejectionReason.FORBIDDEN_WORD: "Comments cannot contain the word 'horrible'",
    RejectionReason.TITLE_TOO_LONG: f"Title cannot exceed {MAX_TITLE_LENGTH} characters",
    RejectionReason.AUTHOR_TOO_LONG: f"Author name cannot exceed {MAX_AUTHOR_LENGTH} characters",
    RejectionReason.COMMENTS_TOO_LONG: f"Comments cannot exceed {MAX_COMMENTS_LENGTH} characters",
    RejectionReason.TITLE_REQUIRED: "Title is required",
    RejectionReason.AUTHOR_REQUIRED: "Author is required",
}


class ValidationResult(BaseModel):
    """Outcome of validating a candidate."""
    reason: Optional[RejectionReason] = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> Optional[str]:
        return self.reason.message if self.reason else None


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _contains_forbidden_word(comments: Optional[str]) -> bool:
    if not comments:
        return False
    lowered = comments.lower()
    return any(word in lowered for word in FORBIDDEN_WORDS)


def find_rejections(candidate: BookCandidate) -> List[RejectionReason]:
    """
    Check a candidate against every rule.

    Args:
        candidate: Book content to check

    Returns:
        Every failing reason, in rule order (empty when valid)
    """
    reasons = []
    comments = candidate.comments or ""

    if candidate.rating < MIN_RATING or candidate.rating > MAX_RATING:
        reasons.append(RejectionReason.RATING_OUT_OF_RANGE)
    if candidate.rating > MIN_RATING and _is_blank(candidate.comments):
        reasons.append(RejectionReason.COMMENTS_REQUIRED)
    if _contains_forbidden_word(comments):
        reasons.append(RejectionReason.FORBIDDEN_WORD)
    if len(candidate.title) > MAX_TITLE_LENGTH:
        reasons.append(RejectionReason.TITLE_TOO_LONG)
    if len(candidate.author) > MAX_AUTHOR_LENGTH:
        reasons.append(RejectionReason.AUTHOR_TOO_LONG)
    if len(comments) > MAX_COMMENTS_LENGTH:
        reasons.append(RejectionReason.COMMENTS_TOO_LONG)
    if _is_blank(candidate.title):
        reasons.append(RejectionReason.TITLE_REQUIRED)
    if _is_blank(candidate.author):
        reasons.append(RejectionReason.AUTHOR_REQUIRED)

    return reasons


def validate_book(candidate: BookCandidate) -> ValidationResult:
    """
    Decide whether a candidate may be stored.

    Args:
        candidate: Book content to check

    Returns:
        ValidationResult holding the first failing reason, or none when valid
    """
    reasons = find_rejections(candidate)
    return ValidationResult(reason=reasons[0] if reasons else None)
