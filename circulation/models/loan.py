import enum

from circulation.extensions import db
from circulation.models.borrower import BorrowerRef, BorrowerType
from circulation.utils.clock import utcnow


class LoanStatus(str, enum.Enum):
    ACTIVE = "active"
    RETURNED = "returned"


def _enum_column(enum_cls, **kwargs):
    return db.Column(
        db.Enum(
            enum_cls,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        **kwargs,
    )


class Loan(db.Model):
    __tablename__ = "book_loans"
    __table_args__ = (
        db.CheckConstraint(
            "(student_id IS NOT NULL AND teacher_id IS NULL)"
            " OR (student_id IS NULL AND teacher_id IS NOT NULL)",
            name="ck_book_loans_one_borrower",
        ),
        db.CheckConstraint("renewed_count >= 0", name="ck_book_loans_renewed_count"),
        db.CheckConstraint(
            "(status = 'returned' AND return_date IS NOT NULL)"
            " OR (status = 'active' AND return_date IS NULL)",
            name="ck_book_loans_return_date",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    borrower_type = _enum_column(BorrowerType, nullable=False)
    student_id = db.Column(db.String(36), nullable=True, index=True)
    teacher_id = db.Column(db.String(36), nullable=True, index=True)

    issue_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    due_date = db.Column(db.DateTime, nullable=False, index=True)
    return_date = db.Column(db.DateTime, nullable=True)

    status = _enum_column(LoanStatus, nullable=False, default=LoanStatus.ACTIVE, index=True)
    renewed_count = db.Column(db.Integer, nullable=False, default=0)

    issued_by = db.Column(db.String(36), nullable=True)
    returned_to = db.Column(db.String(36), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    book = db.relationship("Book", backref="loans")

    @property
    def borrower(self) -> BorrowerRef:
        return BorrowerRef(self.borrower_type, self.student_id or self.teacher_id)

    @borrower.setter
    def borrower(self, ref: BorrowerRef):
        self.borrower_type = ref.kind
        self.student_id = ref.student_id
        self.teacher_id = ref.teacher_id
