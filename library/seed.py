"""
Sample books loaded for the demo user at startup.
"""

import uuid
from datetime import datetime, timedelta
from typing import List

import structlog

from .errors import BookStoreError
from .models import Book, BookCandidate
from .store import BookStore

logger = structlog.get_logger(__name__)

# (days ago, content)
DEMO_BOOKS = [
    (30, BookCandidate(
        title="To Kill a Mockingbird",
        author="Harper Lee",
        isbn="978-0446310789",
        rating=5,
        comments="A powerful story about racial injustice and moral growth. "
                 "Scout's perspective makes this classic accessible and moving.",
        cover_image_urls=["https://covers.openlibrary.org/b/id/12606566-L.jpg"],
    )),
    (25, BookCandidate(
        title="1984",
        author="George Orwell",
        isbn="978-0451524935",
        rating=4,
        comments="Disturbing but essential reading about surveillance and totalitarianism. "
                 "Still relevant today.",
        cover_image_urls=["https://covers.openlibrary.org/b/id/14370404-L.jpg"],
    )),
    (20, BookCandidate(
        title="The Great Gatsby",
        author="F. Scott Fitzgerald",
        isbn="978-0743273565",
        rating=3,
        comments="Beautiful prose but the characters are hard to like. "
                 "The American Dream theme is well explored.",
        cover_image_urls=["https://covers.openlibrary.org/b/id/12364437-L.jpg"],
    )),
    (15, BookCandidate(
        title="Pride and Prejudice",
        author="Jane Austen",
        isbn="978-0141439518",
        rating=5,
        comments="Timeless romance with sharp social commentary. "
                 "Elizabeth Bennet is one of literature's greatest heroines.",
        cover_image_urls=["https://m.media-amazon.com/images/I/712P0p5cXIL._UF894,1000_QL80_.jpg"],
    )),
    (10, BookCandidate(
        title="The Catcher in the Rye",
        author="J.D. Salinger",
        isbn="978-0316769488",
        rating=2,
        comments="Holden Caulfield is annoying but the book captures teenage alienation perfectly.",
        cover_image_urls=["https://m.media-amazon.com/images/I/8125BDk3l9L.jpg"],
    )),
    (5, BookCandidate(
        title="Lord of the Flies",
        author="William Golding",
        isbn="978-0399501487",
        rating=4,
        comments="Dark exploration of human nature and civilization. "
                 "The descent into savagery is compelling and disturbing.",
        cover_image_urls=["https://covers.openlibrary.org/b/id/14854809-L.jpg"],
    )),
    (1, BookCandidate(
        title="The Hobbit",
        author="J.R.R. Tolkien",
        isbn="978-0547928241",
        rating=0,
        comments="",
        cover_image_urls=["https://covers.openlibrary.org/b/id/14627222-L.jpg"],
    )),
]


def seed_demo_books(store: BookStore, owner_id: str, now: datetime) -> List[Book]:
    """
    Load the sample books for an owner, back-dated relative to ``now``.

    Books that no longer fit in the store are skipped.

    Returns:
        The books that were stored
    """
    seeded = []
    for days_ago, candidate in DEMO_BOOKS:
        book = Book.from_candidate(candidate, str(uuid.uuid4()), owner_id, now - timedelta(days=days_ago))
        try:
            seeded.append(store.restore(book))
        except BookStoreError as e:
            logger.warning("Skipped demo book", title=candidate.title, error=str(e))
            break

    logger.info("Demo books loaded", owner_id=owner_id, count=len(seeded), total_books=store.count())
    return seeded
