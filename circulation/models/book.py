import enum

from circulation.extensions import db
from circulation.utils.clock import utcnow


class BookStatus(str, enum.Enum):
    ACTIVE = "active"
    RETIRED = "retired"


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("total_copies >= 0", name="ck_books_total_copies"),
        db.CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_books_available_copies",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    branch_id = db.Column(db.String(36), nullable=False, index=True)

    # display label only; cataloguing lives elsewhere
    title = db.Column(db.String(200), nullable=True, index=True)

    total_copies = db.Column(db.Integer, nullable=False, default=1)
    available_copies = db.Column(db.Integer, nullable=False, default=1)

    status = db.Column(
        db.Enum(
            BookStatus,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=BookStatus.ACTIVE,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == BookStatus.ACTIVE
