from typing import Optional

from sqlalchemy import select, update

from circulation.models.book import Book, BookStatus
from circulation.models.loan import Loan, LoanStatus


class BookRepo:
    def __init__(self, session):
        self.session = session

    def get(self, book_id: int, refresh: bool = False) -> Optional[Book]:
        return self.session.get(Book, book_id, populate_existing=refresh)

    def get_active(self, book_id: int, refresh: bool = False) -> Optional[Book]:
        book = self.get(book_id, refresh=refresh)
        if book is None or not book.is_active:
            return None
        return book

    def list_active(self, branch_id: Optional[str] = None, title: Optional[str] = None):
        stmt = select(Book).where(Book.status == BookStatus.ACTIVE)
        if branch_id:
            stmt = stmt.where(Book.branch_id == branch_id)
        if title:
            stmt = stmt.where(Book.title.ilike(f"%{title}%"))
        return self.session.scalars(stmt.order_by(Book.title, Book.id)).all()

    def create(self, book: Book) -> Book:
        self.session.add(book)
        self.session.flush()
        return book

    def decrement_available(self, book_id: int) -> bool:
        """Take one copy if the book is active and has one free."""
        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.status == BookStatus.ACTIVE,
                Book.available_copies >= 1,
            )
            .values(available_copies=Book.available_copies - 1)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def increment_available(self, book_id: int) -> bool:
        """Give one copy back, never past total_copies."""
        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.available_copies < Book.total_copies,
            )
            .values(available_copies=Book.available_copies + 1)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def retire(self, book_id: int) -> bool:
        """Retire an active book with every copy on the shelf and no active loan."""
        on_loan = (
            select(Loan.id)
            .where(Loan.book_id == Book.id, Loan.status == LoanStatus.ACTIVE)
            .correlate(Book)
            .exists()
        )
        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.status == BookStatus.ACTIVE,
                Book.available_copies == Book.total_copies,
                ~on_loan,
            )
            .values(status=BookStatus.RETIRED)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1
