"""
In-memory book collection.

The store is the only component that mutates the collection. Records are
kept in an insertion-ordered arena keyed by id; an update replaces the
value under its key. A single lock guards reads and writes, so readers
never observe a half-applied change.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from utilities.logger import AuditLogger

from .errors import BookNotFound, CapacityExceeded, OwnerRequired, ValidationRejected
from .models import Book, BookCandidate, BookStats, SortKey
from .query import query_books
from .validation import MAX_RATING, find_rejections

logger = structlog.get_logger(__name__)

DEFAULT_MAX_BOOKS = 25


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookStore:
    """
    Owns the book records and their lifecycle.
    Delegates content rules to the validator and listing to the query engine.
    """

    def __init__(
        self,
        max_books: int = DEFAULT_MAX_BOOKS,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        """
        Initialize an empty store.

        Args:
            max_books: Bound on the total number of records, across all owners
            clock: Source of timestamps
            id_factory: Source of fresh book ids
        """
        self.max_books = max_books
        self._clock = clock
        self._id_factory = id_factory
        self._books: Dict[str, Book] = {}
        self._lock = threading.RLock()
        self.audit = AuditLogger()

    def _snapshot(self) -> List[Book]:
        with self._lock:
            return list(self._books.values())

    def _validate(self, candidate: BookCandidate, owner_id: str, book_id: Optional[str] = None) -> None:
        reasons = find_rejections(candidate)
        if reasons:
            self.audit.log_rejection(owner_id, reasons[0].value, book_id=book_id)
            raise ValidationRejected(reasons[0], reasons)

    def _check_capacity(self, owner_id: str) -> None:
        if len(self._books) >= self.max_books:
            self.audit.log_capacity_reached(owner_id, self.max_books)
            raise CapacityExceeded(self.max_books)

    def count(self) -> int:
        """Total number of records, across all owners."""
        with self._lock:
            return len(self._books)

    def add(self, candidate: BookCandidate, owner_id: str) -> Book:
        """
        Store a new book for an owner.

        Args:
            candidate: Book content
            owner_id: Authenticated owner

        Returns:
            The stored record

        Raises:
            CapacityExceeded: If the collection is full
            ValidationRejected: If the content breaks a rule
        """
        _require_owner(owner_id)
        with self._lock:
            self._check_capacity(owner_id)
            self._validate(candidate, owner_id)

            book = Book.from_candidate(candidate, self._id_factory(), owner_id, self._clock())
            self._books[book.id] = book
            total = len(self._books)

        self.audit.log_book_added(book.id, owner_id, book.title, total)
        return book

    def restore(self, book: Book) -> Book:
        """
        Insert an already-built record, keeping its id and timestamps.

        The record is held to the same capacity and content rules as ``add``.

        Raises:
            CapacityExceeded: If the collection is full
            ValidationRejected: If the content breaks a rule
            ValueError: If a record with the same id exists
        """
        _require_owner(book.user_id)
        with self._lock:
            if book.id in self._books:
                raise ValueError(f"Book with ID '{book.id}' already exists")
            self._check_capacity(book.user_id)
            self._validate(book.to_candidate(), book.user_id, book_id=book.id)

            # has_note is re-derived rather than trusted.
            stored = Book.from_candidate(book.to_candidate(), book.id, book.user_id, book.created_at)
            stored = stored.model_copy(update={"updated_at": book.updated_at})
            self._books[stored.id] = stored

        logger.debug("Book restored", book_id=stored.id, owner_id=stored.user_id)
        return stored

    def get_by_id(self, book_id: str, owner_id: str) -> Optional[Book]:
        """
        Get a single book visible to the owner.

        Returns:
            The book, or None when absent or owned by someone else
        """
        _require_owner(owner_id)
        with self._lock:
            book = self._books.get(book_id)
        if book is None or book.user_id != owner_id:
            return None
        return book

    def list(
        self,
        owner_id: str,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        sort_key: SortKey = SortKey.TITLE,
    ) -> Tuple[List[Book], int]:
        """
        Get a page of the owner's books and the number matching the search.

        Raises:
            ValueError: If page or page_size is below 1
        """
        _require_owner(owner_id)
        return query_books(self._snapshot(), owner_id, page, page_size, search, sort_key)

    def update(self, book_id: str, owner_id: str, candidate: BookCandidate) -> Book:
        """
        Replace the content of an existing book.

        Args:
            book_id: Book to update
            owner_id: Authenticated owner
            candidate: New content

        Returns:
            The new record

        Raises:
            BookNotFound: If the owner has no book with this id
            ValidationRejected: If the content breaks a rule
        """
        _require_owner(owner_id)
        with self._lock:
            existing = self._books.get(book_id)
            if existing is None or existing.user_id != owner_id:
                raise BookNotFound(book_id)
            self._validate(candidate, owner_id, book_id=book_id)

            updated = existing.replace_content(candidate, self._clock())
            self._books[book_id] = updated

        self.audit.log_book_updated(book_id, owner_id, updated.has_note)
        return updated

    def remove(self, book_id: str, owner_id: str) -> bool:
        """
        Delete a book.

        Returns:
            True if a book was removed, False if there was nothing to remove
        """
        _require_owner(owner_id)
        with self._lock:
            existing = self._books.get(book_id)
            removed = existing is not None and existing.user_id == owner_id
            if removed:
                del self._books[book_id]

        self.audit.log_book_removed(book_id, owner_id, removed)
        return removed

    def stats(self, owner_id: str) -> BookStats:
        """Summarize the owner's collection."""
        _require_owner(owner_id)
        books = [book for book in self._snapshot() if book.user_id == owner_id]
        rated = [book.rating for book in books if book.rating > 0]

        return BookStats(
            total_books=len(books),
            rated_books=len(rated),
            unrated_books=len(books) - len(rated),
            books_with_notes=sum(1 for book in books if book.has_note),
            average_rating=round(sum(rated) / len(rated), 2) if rated else None,
            rating_distribution={value: rated.count(value) for value in range(1, MAX_RATING + 1)},
        )


def _require_owner(owner_id: Optional[str]) -> None:
    if not owner_id or not owner_id.strip():
        raise OwnerRequired()
