"""
API models and schemas for the FastAPI application.
Field names go over the wire in camelCase.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from library.models import Book, BookCandidate, BookStats, SortKey


class APIModel(BaseModel):
    """Base for schemas that accept both camelCase and snake_case names."""

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""
    username: str = Field(..., description="Username")
    password: str = Field(..., description="Plain-text password")


class UserResponse(APIModel):
    """Public profile of a user."""
    id: str = Field(..., description="User identifier")
    username: str = Field(..., description="Username")
    display_name: str = Field(..., alias="displayName", description="Name shown in the UI")
    email: str = Field(..., description="Email address")
    avatar: Optional[str] = Field(None, description="Avatar image URL")


class LoginResponse(BaseModel):
    """Bearer token plus the profile it was issued for."""
    token: str = Field(..., description="Signed bearer token")
    user: UserResponse = Field(..., description="Authenticated user")


class BookRequest(APIModel):
    """Body of the add and update endpoints."""
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: Optional[str] = Field(None, description="ISBN, free-form")
    rating: int = Field(0, description="Rating 0-5, 0 means unrated")
    comments: Optional[str] = Field(None, description="Reader comments")
    cover_image_urls: Optional[List[str]] = Field(
        None, alias="coverImageUrls", description="Cover image URLs"
    )

    def to_candidate(self) -> BookCandidate:
        return BookCandidate(
            title=self.title,
            author=self.author,
            isbn=self.isbn,
            rating=self.rating,
            comments=self.comments,
            cover_image_urls=self.cover_image_urls,
        )


class BookResponse(APIModel):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: Optional[str] = Field(None, description="ISBN")
    rating: int = Field(..., description="Rating 0-5, 0 means unrated")
    comments: Optional[str] = Field(None, description="Reader comments")
    has_note: bool = Field(..., alias="hasNote", description="Whether the book carries comments")
    cover_image_urls: List[str] = Field(..., alias="coverImageUrls", description="Cover image URLs")
    user_id: str = Field(..., alias="userId", description="Owner identifier")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(**book.model_dump())


class BookQueryParams(BaseModel):
    """Query parameters for book listing."""
    page: int = Field(1, ge=1, description="Page number")
    page_size: int = Field(10, ge=1, description="Items per page")
    search: Optional[str] = Field(None, description="Search term for title, author or ISBN")
    sort_by: SortKey = Field(SortKey.TITLE, description="Sort field")

    @field_validator("sort_by", mode="before")
    @classmethod
    def parse_sort_by(cls, v):
        """Unknown sort keys fall back to title."""
        return SortKey.parse(v)

    @field_validator("search")
    @classmethod
    def empty_search_as_none(cls, v):
        """An empty term means no search; whitespace is searched as given."""
        return v or None


class BookListResponse(APIModel):
    """Response model for book list with pagination."""
    books: List[BookResponse] = Field(..., description="List of books")
    total_count: int = Field(..., alias="totalCount", description="Number of books matching the search")
    page: int = Field(..., description="Current page number")
    page_size: int = Field(..., alias="pageSize", description="Number of books per page")
    total_pages: int = Field(..., alias="totalPages", description="Total number of pages")
    has_next: bool = Field(..., alias="hasNext", description="Whether there is a next page")
    has_prev: bool = Field(..., alias="hasPrev", description="Whether there is a previous page")


class BookStatsResponse(APIModel):
    """Reading statistics for the current user."""
    total_books: int = Field(..., alias="totalBooks")
    rated_books: int = Field(..., alias="ratedBooks")
    unrated_books: int = Field(..., alias="unratedBooks")
    books_with_notes: int = Field(..., alias="booksWithNotes")
    average_rating: Optional[float] = Field(None, alias="averageRating")
    rating_distribution: Dict[int, int] = Field(..., alias="ratingDistribution")

    @classmethod
    def from_stats(cls, stats: BookStats) -> "BookStatsResponse":
        return cls(**stats.model_dump())


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")
    code: Optional[str] = Field(None, description="Machine-readable error code")
    reasons: Optional[List[str]] = Field(None, description="Every rule the request broke")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    store_status: str = Field(..., description="Book store status")
    total_books: Optional[int] = Field(None, description="Books held across all users")
