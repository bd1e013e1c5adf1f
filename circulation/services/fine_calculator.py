import logging
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from circulation.config import LibrarySettings
from circulation.models.borrower import BorrowerRef
from circulation.models.fine import Fine, PaymentStatus
from circulation.models.loan import Loan
from circulation.repositories.fine_repo import FineRepo
from circulation.services.results import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    ServiceResult,
    service_operation,
)
from circulation.utils.clock import utcnow

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ONE_DAY = timedelta(days=1)


def days_overdue(due_date: datetime, returned_at: datetime) -> int:
    """Whole days late, partial days rounded up. 0 when on time."""
    if returned_at <= due_date:
        return 0
    days, rest = divmod(returned_at - due_date, ONE_DAY)
    return days + 1 if rest else days


def derive_payment_status(paid: Decimal, fine_amount: Decimal, waived: bool = False) -> PaymentStatus:
    if waived or paid >= fine_amount:
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.UNPAID


def _parse_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError("amount must be a number") from None
    if not amount.is_finite():
        raise InvalidInputError("amount must be a number")
    if amount <= 0:
        raise InvalidInputError("amount must be positive")
    return amount


class FineCalculator:
    def __init__(self, session, settings: LibrarySettings = None, clock=utcnow):
        self.session = session
        self.settings = settings or LibrarySettings()
        self.clock = clock
        self.fines = FineRepo(session)

    def compute_fine(self, loan: Loan, return_date: datetime):
        """Create the loan's fine if it came back late. Runs inside the caller's unit of work."""
        days = days_overdue(loan.due_date, return_date)
        if days <= 0:
            return None

        rate = Decimal(self.settings.daily_fine_rate).quantize(CENT)
        fine = Fine(
            loan_id=loan.id,
            days_overdue=days,
            daily_rate=rate,
            fine_amount=(rate * days).quantize(CENT),
            paid_amount=Decimal("0.00"),
            payment_status=PaymentStatus.UNPAID,
            waived=False,
        )
        self.fines.create(fine)
        logger.info(f"[fines] loan={loan.id} days_overdue={days} amount={fine.fine_amount}")
        return fine

    @service_operation("Failed to record payment")
    def record_payment(self, fine_id: int, amount, method: str = None) -> ServiceResult:
        amount = _parse_amount(amount)

        fine = self.fines.get_for_update(fine_id)
        if fine is None:
            raise NotFoundError("Fine not found")
        if fine.waived:
            raise InvalidStateError("Fine has been waived")
        if fine.payment_status == PaymentStatus.PAID:
            raise InvalidStateError("Fine is already paid")

        outstanding = fine.outstanding
        if amount > outstanding:
            raise InvalidInputError(f"Payment exceeds outstanding balance of {outstanding}")

        fine.paid_amount = (Decimal(fine.paid_amount) + amount).quantize(CENT)
        fine.payment_status = derive_payment_status(fine.paid_amount, Decimal(fine.fine_amount))
        fine.payment_method = method
        if fine.payment_status == PaymentStatus.PAID:
            fine.payment_date = self.clock()

        logger.info(
            f"[fines] fine={fine.id} paid={amount} total_paid={fine.paid_amount} "
            f"status={fine.payment_status.value}"
        )
        return ServiceResult.ok("Payment recorded successfully", fine)

    @service_operation("Failed to waive fine")
    def waive(self, fine_id: int, waived_by: str, reason: str = None) -> ServiceResult:
        fine = self.fines.get_for_update(fine_id)
        if fine is None:
            raise NotFoundError("Fine not found")

        # paid_amount stays as the record of what was actually collected
        fine.waived = True
        fine.waived_by = waived_by
        fine.waived_reason = reason
        fine.payment_status = PaymentStatus.PAID

        logger.info(f"[fines] fine={fine.id} waived by={waived_by} paid_so_far={fine.paid_amount}")
        return ServiceResult.ok("Fine waived successfully", fine)

    @service_operation("Failed to fetch fines")
    def get_borrower_fines(self, borrower: BorrowerRef) -> ServiceResult:
        return ServiceResult.ok("Fines fetched successfully", self.fines.list_by_borrower(borrower))
