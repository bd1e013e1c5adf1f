import logging

from circulation.repositories.book_repo import BookRepo
from circulation.services.results import (
    InventoryInconsistencyError,
    NotFoundError,
    UnavailableError,
)

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Owns available_copies. Callers provide the surrounding transaction."""

    def __init__(self, books: BookRepo):
        self.books = books

    def reserve_copy(self, book_id: int) -> None:
        if self.books.decrement_available(book_id):
            return

        book = self.books.get(book_id, refresh=True)
        if book is None or not book.is_active:
            raise NotFoundError("Book not found")
        raise UnavailableError("Book is not available")

    def release_copy(self, book_id: int) -> None:
        if self.books.increment_available(book_id):
            return

        book = self.books.get(book_id, refresh=True)
        if book is None:
            raise InventoryInconsistencyError(f"Returned loan references missing book {book_id}")
        logger.error(
            f"[inventory] book={book_id} available={book.available_copies} "
            f"total={book.total_copies}: release would exceed total_copies"
        )
        raise InventoryInconsistencyError(
            f"available_copies would exceed total_copies for book {book_id}"
        )
