"""
Search, sort and paginate one owner's books.

Every function here is side-effect free; input sequences are never mutated.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Book, SortKey


def matches_search(book: Book, search: str) -> bool:
    """Case-insensitive substring match against title, author or ISBN."""
    needle = search.lower()
    if needle in book.title.lower() or needle in book.author.lower():
        return True
    return book.isbn is not None and needle in book.isbn.lower()


def sort_books(books: Iterable[Book], sort_key: SortKey = SortKey.TITLE) -> List[Book]:
    """
    Order books by the given key.

    Title and author sort ascending ignoring case; rating and creation
    time sort descending. The sort is stable, so ties keep the order the
    books were given in.
    """
    if sort_key == SortKey.AUTHOR:
        return sorted(books, key=lambda b: b.author.casefold())
    if sort_key == SortKey.RATING:
        return sorted(books, key=lambda b: b.rating, reverse=True)
    if sort_key == SortKey.CREATED_AT:
        return sorted(books, key=lambda b: b.created_at, reverse=True)
    return sorted(books, key=lambda b: b.title.casefold())


def paginate(books: Sequence[Book], page: int, page_size: int) -> List[Book]:
    """
    Select one page of books.

    Args:
        books: Ordered books
        page: Page number, starting from 1
        page_size: Books per page

    Raises:
        ValueError: If page or page_size is below 1
    """
    if page < 1:
        raise ValueError("page must be at least 1")
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    skip = (page - 1) * page_size
    return list(books[skip:skip + page_size])


def query_books(
    records: Iterable[Book],
    owner_id: str,
    page: int = 1,
    page_size: int = 10,
    search: Optional[str] = None,
    sort_key: SortKey = SortKey.TITLE,
) -> Tuple[List[Book], int]:
    """
    Get one owner's books with searching, sorting and pagination.

    Args:
        records: All books, in insertion order
        owner_id: Owner whose books are visible
        page: Page number, starting from 1
        page_size: Books per page
        search: Optional search term matched against title, author and ISBN
        sort_key: Sort field

    Returns:
        The selected page and the number of books matching the filter
    """
    matching = [book for book in records if book.user_id == owner_id]
    if search:
        matching = [book for book in matching if matches_search(book, search)]

    ordered = sort_books(matching, SortKey.parse(sort_key))
    return paginate(ordered, page, page_size), len(ordered)
