"""
Pydantic models for tracked books.
A stored Book is an immutable value; updates replace it with a new one.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class SortKey(str, Enum):
    """Sort options for book listings."""
    TITLE = "title"
    AUTHOR = "author"
    RATING = "rating"
    CREATED_AT = "createdAt"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """
        Resolve a caller-supplied sort key.

        Matching ignores case and underscores, so ``createdAt``,
        ``createdat`` and ``created_at`` are equivalent. Missing or
        unknown keys fall back to ``TITLE``.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.TITLE
        normalized = value.strip().lower().replace("_", "")
        for key in cls:
            if key.value.lower() == normalized:
                return key
        return cls.TITLE


class BookCandidate(BaseModel):
    """
    Book content submitted for create or update, not yet validated.

    ``cover_image_urls`` may be left out: a new book then gets no covers,
    an updated book keeps the covers it already had.
    """
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: Optional[str] = Field(None, description="ISBN, free-form")
    rating: int = Field(0, description="Rating 0-5, 0 means unrated")
    comments: Optional[str] = Field(None, description="Reader comments")
    cover_image_urls: Optional[List[str]] = Field(None, description="Cover image URLs")


class Book(BaseModel):
    """A stored book record."""
    id: str = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: Optional[str] = Field(None, description="ISBN, free-form")
    rating: int = Field(0, description="Rating 0-5, 0 means unrated")
    comments: Optional[str] = Field(None, description="Reader comments")
    has_note: bool = Field(False, description="Whether the book carries comments")
    cover_image_urls: Tuple[str, ...] = Field(default_factory=tuple, description="Cover image URLs")
    user_id: str = Field(..., description="Owner identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {"frozen": True}

    @classmethod
    def from_candidate(
        cls,
        candidate: BookCandidate,
        book_id: str,
        owner_id: str,
        created_at: datetime,
    ) -> "Book":
        """Build a new record from validated content."""
        return cls(
            id=book_id,
            title=candidate.title,
            author=candidate.author,
            isbn=candidate.isbn,
            rating=candidate.rating,
            comments=candidate.comments,
            has_note=derive_has_note(candidate.comments),
            cover_image_urls=tuple(candidate.cover_image_urls or ()),
            user_id=owner_id,
            created_at=created_at,
            updated_at=created_at,
        )

    def replace_content(self, candidate: BookCandidate, updated_at: datetime) -> "Book":
        """
        Return a new record carrying the candidate's content.

        Identity, owner and creation time are kept. A candidate without
        cover URLs keeps the current ones.
        """
        covers = self.cover_image_urls if candidate.cover_image_urls is None else candidate.cover_image_urls
        return Book(
            id=self.id,
            title=candidate.title,
            author=candidate.author,
            isbn=candidate.isbn,
            rating=candidate.rating,
            comments=candidate.comments,
            has_note=derive_has_note(candidate.comments),
            cover_image_urls=tuple(covers),
            user_id=self.user_id,
            created_at=self.created_at,
            updated_at=updated_at,
        )

    def to_candidate(self) -> BookCandidate:
        """Extract the editable content of this record."""
        return BookCandidate(
            title=self.title,
            author=self.author,
            isbn=self.isbn,
            rating=self.rating,
            comments=self.comments,
            cover_image_urls=list(self.cover_image_urls),
        )


class BookStats(BaseModel):
    """Reading statistics for one owner's collection."""
    total_books: int = Field(0, description="Number of books")
    rated_books: int = Field(0, description="Books with a rating of 1-5")
    unrated_books: int = Field(0, description="Books with rating 0")
    books_with_notes: int = Field(0, description="Books carrying comments")
    average_rating: Optional[float] = Field(None, description="Mean rating over rated books")
    rating_distribution: Dict[int, int] = Field(default_factory=dict, description="Book count per rating 1-5")


def derive_has_note(comments: Optional[str]) -> bool:
    """A book has a note exactly when its comments are a non-empty string."""
    return bool(comments)
