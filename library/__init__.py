"""
Book collection core.

This package contains:
- Book record and candidate models
- Validation rules for book content
- The search / sort / paginate query engine
- The in-memory collection store
- Demo seed data
"""

from .errors import (
    BookNotFound,
    BookStoreError,
    CapacityExceeded,
    OwnerRequired,
    ValidationRejected,
)
from .models import Book, BookCandidate, BookStats, SortKey
from .query import query_books
from .store import BookStore
from .validation import RejectionReason, ValidationResult, find_rejections, validate_book

__version__ = "1.0.0"

__all__ = [
    "Book",
    "BookCandidate",
    "BookNotFound",
    "BookStats",
    "BookStore",
    "BookStoreError",
    "CapacityExceeded",
    "OwnerRequired",
    "RejectionReason",
    "SortKey",
    "ValidationRejected",
    "ValidationResult",
    "find_rejections",
    "query_books",
    "validate_book",
]
