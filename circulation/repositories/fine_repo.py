from typing import Optional

from sqlalchemy import select

from circulation.models.borrower import BorrowerRef, BorrowerType
from circulation.models.fine import Fine
from circulation.models.loan import Loan


class FineRepo:
    def __init__(self, session):
        self.session = session

    def get_for_update(self, fine_id: int) -> Optional[Fine]:
        stmt = (
            select(Fine)
            .where(Fine.id == fine_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).first()

    def create(self, fine: Fine) -> Fine:
        self.session.add(fine)
        self.session.flush()
        return fine

    def list_by_borrower(self, borrower: BorrowerRef):
        column = Loan.student_id if borrower.kind is BorrowerType.STUDENT else Loan.teacher_id
        stmt = (
            select(Fine)
            .join(Loan, Fine.loan_id == Loan.id)
            .where(Loan.borrower_type == borrower.kind, column == borrower.id)
            .order_by(Fine.created_at.desc(), Fine.id.desc())
        )
        return self.session.scalars(stmt).all()
