"""
Service layer between the FastAPI routes and the book store.
"""

import math
from typing import Optional

import structlog

from api.models import BookListResponse, BookQueryParams, BookRequest, BookResponse, BookStatsResponse
from library.errors import BookNotFound
from library.store import BookStore

logger = structlog.get_logger(__name__)


class APIBookService:
    """Book operations for API requests, expressed in API models."""

    def __init__(self, store: BookStore, max_page_size: int = 100):
        self.store = store
        self.max_page_size = max_page_size

    def get_books(self, owner_id: str, query_params: BookQueryParams) -> BookListResponse:
        """
        Get the owner's books with searching, sorting, and pagination.

        Args:
            owner_id: Authenticated user
            query_params: Query parameters for filtering and pagination

        Returns:
            BookListResponse with paginated results

        Raises:
            ValueError: If the page size is above the configured maximum
        """
        if query_params.page_size > self.max_page_size:
            raise ValueError(f"pageSize cannot exceed {self.max_page_size}")

        books, total = self.store.list(
            owner_id,
            page=query_params.page,
            page_size=query_params.page_size,
            search=query_params.search,
            sort_key=query_params.sort_by,
        )
        total_pages = math.ceil(total / query_params.page_size)

        logger.debug(
            "Books listed",
            owner_id=owner_id,
            search=query_params.search,
            sort_by=query_params.sort_by.value,
            returned=len(books),
            total=total,
        )

        return BookListResponse(
            books=[BookResponse.from_book(book) for book in books],
            total_count=total,
            page=query_params.page,
            page_size=query_params.page_size,
            total_pages=total_pages,
            has_next=query_params.page < total_pages,
            has_prev=query_params.page > 1,
        )

    def get_book_by_id(self, owner_id: str, book_id: str) -> Optional[BookResponse]:
        """
        Get a single book by ID.

        Returns:
            BookResponse if the owner has it, None otherwise
        """
        book = self.store.get_by_id(book_id, owner_id)
        return BookResponse.from_book(book) if book else None

    def add_book(self, owner_id: str, request: BookRequest) -> BookResponse:
        return BookResponse.from_book(self.store.add(request.to_candidate(), owner_id))

    def update_book(self, owner_id: str, book_id: str, request: BookRequest) -> BookResponse:
        return BookResponse.from_book(self.store.update(book_id, owner_id, request.to_candidate()))

    def delete_book(self, owner_id: str, book_id: str) -> None:
        """
        Delete a book.

        Raises:
            BookNotFound: If there was nothing to delete
        """
        if not self.store.remove(book_id, owner_id):
            raise BookNotFound(book_id)

    def get_stats(self, owner_id: str) -> BookStatsResponse:
        return BookStatsResponse.from_stats(self.store.stats(owner_id))

    def health_check(self) -> dict:
        """Report the store's state."""
        total = self.store.count()
        return {
            "status": "healthy",
            "total_books": total,
            "capacity_remaining": max(0, self.store.max_books - total),
        }
