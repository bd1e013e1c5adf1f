from datetime import datetime
from typing import Optional

from circulation.models.borrower import BorrowerRef
from circulation.repositories.loan_repo import LoanRepo


class EligibilityGuard:
    def __init__(self, loans: LoanRepo):
        self.loans = loans

    def has_blocking_overdue(
        self, borrower: BorrowerRef, now: datetime, branch_id: Optional[str] = None
    ) -> bool:
        # issue_book calls this without branch_id: any overdue loan anywhere blocks
        return self.loans.has_overdue(borrower, now, branch_id=branch_id)
