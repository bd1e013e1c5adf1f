import logging
from datetime import timedelta
from typing import Optional

from circulation.config import LibrarySettings
from circulation.models.borrower import BorrowerRef
from circulation.models.loan import Loan, LoanStatus
from circulation.repositories.book_repo import BookRepo
from circulation.repositories.loan_repo import LoanRepo
from circulation.services.eligibility_guard import EligibilityGuard
from circulation.services.fine_calculator import FineCalculator
from circulation.services.inventory_ledger import InventoryLedger
from circulation.services.results import (
    BlockedError,
    ConcurrentUpdateError,
    InvalidStateError,
    LimitReachedError,
    NotFoundError,
    ServiceResult,
    service_operation,
)
from circulation.utils.auth import ActorContext
from circulation.utils.clock import utcnow

logger = logging.getLogger(__name__)


class LoanService:
    """Issue, renew and return loans.

    Each public method is one unit of work on the injected session. Copy
    counters move only through ``InventoryLedger`` and only in the same
    transaction as the loan row they belong to.
    """

    def __init__(self, session, settings: LibrarySettings = None, clock=utcnow):
        self.session = session
        self.settings = settings or LibrarySettings()
        self.clock = clock

        self.books = BookRepo(session)
        self.loans = LoanRepo(session)
        self.ledger = InventoryLedger(self.books)
        self.guard = EligibilityGuard(self.loans)
        self.fines = FineCalculator(session, self.settings, clock)

    @property
    def loan_period(self) -> timedelta:
        return timedelta(days=self.settings.loan_period_days)

    @service_operation("Failed to issue book")
    def issue_book(
        self,
        book_id: int,
        borrower: BorrowerRef,
        issued_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult:
        now = self.clock()

        if self.books.get_active(book_id) is None:
            raise NotFoundError("Book not found")

        if self.guard.has_blocking_overdue(borrower, now):
            raise BlockedError("Cannot issue book. Borrower has overdue books.")

        self.ledger.reserve_copy(book_id)

        loan = Loan(
            book_id=book_id,
            issue_date=now,
            due_date=now + self.loan_period,
            status=LoanStatus.ACTIVE,
            renewed_count=0,
            issued_by=issued_by,
            notes=notes,
        )
        loan.borrower = borrower
        self.loans.create(loan)

        logger.info(f"[circulation] issued loan={loan.id} book={book_id} to={borrower} due={loan.due_date}")
        return ServiceResult.ok("Book issued successfully", loan)

    @service_operation("Failed to return book")
    def return_book(self, loan_id: int, returned_to: Optional[str] = None) -> ServiceResult:
        now = self.clock()

        if not self.loans.mark_returned(loan_id, now, returned_to):
            if self.loans.get(loan_id, refresh=True) is None:
                raise NotFoundError("Loan not found")
            raise InvalidStateError("Book already returned")

        loan = self.loans.get(loan_id, refresh=True)
        self.ledger.release_copy(loan.book_id)

        fine = None
        if now > loan.due_date:
            fine = self.fines.compute_fine(loan, now)

        logger.info(
            f"[circulation] returned loan={loan.id} book={loan.book_id} "
            f"fine={fine.fine_amount if fine else 0}"
        )
        if fine is not None:
            return ServiceResult.ok("Book returned. Fine applied for overdue.", loan)
        return ServiceResult.ok("Book returned successfully", loan)

    @service_operation("Failed to renew book")
    def renew_book(self, loan_id: int) -> ServiceResult:
        for _attempt in range(max(1, self.settings.renew_retries)):
            loan = self.loans.get(loan_id, refresh=True)
            if loan is None:
                raise NotFoundError("Loan not found")
            if loan.status != LoanStatus.ACTIVE:
                raise InvalidStateError("Cannot renew this loan")
            if loan.renewed_count >= self.settings.max_renewals:
                raise LimitReachedError("Maximum renewals reached")

            # extend from the current due date, not from today
            if self.loans.extend(loan, loan.due_date + self.loan_period):
                loan = self.loans.get(loan_id, refresh=True)
                logger.info(
                    f"[circulation] renewed loan={loan.id} count={loan.renewed_count} due={loan.due_date}"
                )
                return ServiceResult.ok("Book renewed successfully", loan)

            logger.warning(f"[circulation] renew conflict on loan={loan_id}, retrying")

        raise ConcurrentUpdateError(f"loan {loan_id} kept changing during renewal")

    @service_operation("Failed to fetch loans")
    def get_borrower_loans(
        self, borrower: BorrowerRef, actor: Optional[ActorContext] = None
    ) -> ServiceResult:
        branch_id = actor.visible_branch(None) if actor else None
        loans = self.loans.list_by_borrower(borrower, branch_id=branch_id)
        return ServiceResult.ok("Loans fetched successfully", loans)

    @service_operation("Failed to fetch overdue loans")
    def get_overdue_loans(
        self, branch_id: Optional[str] = None, actor: Optional[ActorContext] = None
    ) -> ServiceResult:
        if actor is not None:
            branch_id = actor.visible_branch(branch_id)
        loans = self.loans.list_overdue(self.clock(), branch_id=branch_id)
        return ServiceResult.ok("Overdue loans fetched successfully", loans)
