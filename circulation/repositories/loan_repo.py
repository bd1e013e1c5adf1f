from datetime import datetime
from typing import Optional

from sqlalchemy import exists, select, update

from circulation.models.book import Book
from circulation.models.borrower import BorrowerRef, BorrowerType
from circulation.models.loan import Loan, LoanStatus


def _borrower_filter(borrower: BorrowerRef):
    if borrower.kind is BorrowerType.STUDENT:
        return (Loan.borrower_type == BorrowerType.STUDENT, Loan.student_id == borrower.id)
    return (Loan.borrower_type == BorrowerType.TEACHER, Loan.teacher_id == borrower.id)


class LoanRepo:
    def __init__(self, session):
        self.session = session

    def get(self, loan_id: int, refresh: bool = False) -> Optional[Loan]:
        return self.session.get(Loan, loan_id, populate_existing=refresh)

    def create(self, loan: Loan) -> Loan:
        self.session.add(loan)
        self.session.flush()
        return loan

    def list_by_borrower(self, borrower: BorrowerRef, branch_id: Optional[str] = None):
        stmt = select(Loan).where(*_borrower_filter(borrower))
        if branch_id:
            stmt = stmt.join(Book, Loan.book_id == Book.id).where(Book.branch_id == branch_id)
        return self.session.scalars(stmt.order_by(Loan.issue_date.desc(), Loan.id.desc())).all()

    def has_overdue(
        self, borrower: BorrowerRef, now: datetime, branch_id: Optional[str] = None
    ) -> bool:
        cond = [
            *_borrower_filter(borrower),
            Loan.status == LoanStatus.ACTIVE,
            Loan.due_date < now,
        ]
        if branch_id:
            cond.append(Loan.book.has(Book.branch_id == branch_id))
        return bool(self.session.scalar(select(exists().where(*cond))))

    def list_overdue(self, now: datetime, branch_id: Optional[str] = None):
        stmt = select(Loan).where(Loan.status == LoanStatus.ACTIVE, Loan.due_date < now)
        if branch_id:
            stmt = stmt.join(Book, Loan.book_id == Book.id).where(Book.branch_id == branch_id)
        return self.session.scalars(stmt.order_by(Loan.due_date)).all()

    def mark_returned(self, loan_id: int, when: datetime, returned_to: Optional[str]) -> bool:
        """active -> returned; False if the loan is missing or already returned."""
        stmt = (
            update(Loan)
            .where(Loan.id == loan_id, Loan.status == LoanStatus.ACTIVE)
            .values(status=LoanStatus.RETURNED, return_date=when, returned_to=returned_to)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def extend(self, loan: Loan, new_due_date: datetime) -> bool:
        """Renew ``loan`` as observed; False if someone changed it first."""
        stmt = (
            update(Loan)
            .where(
                Loan.id == loan.id,
                Loan.status == LoanStatus.ACTIVE,
                Loan.renewed_count == loan.renewed_count,
            )
            .values(due_date=new_due_date, renewed_count=loan.renewed_count + 1)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1
