import enum
from decimal import Decimal

from circulation.extensions import db
from circulation.utils.clock import utcnow


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class Fine(db.Model):
    __tablename__ = "book_fines"
    __table_args__ = (
        db.CheckConstraint("days_overdue > 0", name="ck_book_fines_days_overdue"),
        db.CheckConstraint("paid_amount >= 0", name="ck_book_fines_paid_amount"),
    )

    id = db.Column(db.Integer, primary_key=True)

    loan_id = db.Column(
        db.Integer, db.ForeignKey("book_loans.id"), unique=True, nullable=False, index=True
    )

    days_overdue = db.Column(db.Integer, nullable=False)
    daily_rate = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("5.00"))
    fine_amount = db.Column(db.Numeric(10, 2), nullable=False)

    paid_amount = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    payment_status = db.Column(
        db.Enum(
            PaymentStatus,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )
    payment_method = db.Column(db.String(50), nullable=True)
    payment_date = db.Column(db.DateTime, nullable=True)

    waived = db.Column(db.Boolean, nullable=False, default=False)
    waived_by = db.Column(db.String(36), nullable=True)
    waived_reason = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    loan = db.relationship("Loan", backref=db.backref("fine", uselist=False))

    @property
    def outstanding(self) -> Decimal:
        if self.waived:
            return Decimal("0.00")
        return max(Decimal("0.00"), Decimal(self.fine_amount) - Decimal(self.paid_amount))
