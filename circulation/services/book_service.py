import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from circulation.models.book import Book, BookStatus
from circulation.repositories.book_repo import BookRepo
from circulation.services.results import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    ServiceResult,
    service_operation,
)
from circulation.utils.auth import ActorContext

logger = logging.getLogger(__name__)


def _parse_copies(value) -> int:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError("total_copies must be an integer") from None
    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidInputError("total_copies must be an integer")
    if number < 0:
        raise InvalidInputError("total_copies must be >= 0")
    return int(number)


class BookService:
    def __init__(self, session):
        self.session = session
        self.books = BookRepo(session)

    @service_operation("Failed to fetch books")
    def list_books(
        self,
        branch_id: Optional[str] = None,
        actor: Optional[ActorContext] = None,
        title: Optional[str] = None,
    ) -> ServiceResult:
        if actor is not None:
            branch_id = actor.visible_branch(branch_id)
        books = self.books.list_active(branch_id=branch_id, title=(title or "").strip() or None)
        return ServiceResult.ok("Books fetched successfully", books)

    @service_operation("Failed to create book")
    def create_book(
        self,
        branch_id: Optional[str],
        total_copies=1,
        title: Optional[str] = None,
        actor: Optional[ActorContext] = None,
    ) -> ServiceResult:
        if actor is not None and not actor.is_super_admin:
            branch_id = actor.branch_id
        if not branch_id:
            raise InvalidInputError("branch_id is required")

        total = _parse_copies(total_copies)

        book = self.books.create(
            Book(
                branch_id=branch_id,
                title=(title or "").strip() or None,
                total_copies=total,
                available_copies=total,
                status=BookStatus.ACTIVE,
            )
        )
        logger.info(f"[catalog] book={book.id} branch={branch_id} copies={total} created")
        return ServiceResult.ok("Book created successfully", book)

    @service_operation("Failed to delete book")
    def retire_book(self, book_id: int) -> ServiceResult:
        if not self.books.retire(book_id):
            if self.books.get_active(book_id, refresh=True) is None:
                raise NotFoundError("Book not found")
            raise InvalidStateError("Book has active loans. Returns must be completed first.")

        book = self.books.get(book_id, refresh=True)
        logger.info(f"[catalog] book={book_id} retired")
        return ServiceResult.ok("Book deleted successfully", book)
