"""
Typed failures raised by the book collection.
"""

from typing import List, Optional


class BookStoreError(Exception):
    """Base class for book collection failures."""

    code = "book_store_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationRejected(BookStoreError):
    """Candidate content broke a validation rule."""

    code = "validation_rejected"

    def __init__(self, reason, reasons: Optional[List] = None):
        super().__init__(reason.message)
        self.reason = reason
        self.reasons = list(reasons) if reasons else [reason]


class CapacityExceeded(BookStoreError):
    """The collection already holds the maximum number of books."""

    code = "capacity_exceeded"

    def __init__(self, max_books: int):
        super().__init__(f"Maximum of {max_books} books allowed")
        self.max_books = max_books


class BookNotFound(BookStoreError):
    """No book with this id exists for the caller."""

    code = "not_found"

    def __init__(self, book_id: str):
        super().__init__(f"Book with ID '{book_id}' not found")
        self.book_id = book_id


class OwnerRequired(BookStoreError):
    """An operation reached the store without an owner identity."""

    code = "owner_required"

    def __init__(self):
        super().__init__("An owner id is required")
