from circulation.models.book import Book, BookStatus
from circulation.models.borrower import BorrowerRef, BorrowerType
from circulation.models.fine import Fine, PaymentStatus
from circulation.models.loan import Loan, LoanStatus

__all__ = [
    "Book",
    "BookStatus",
    "BorrowerRef",
    "BorrowerType",
    "Fine",
    "PaymentStatus",
    "Loan",
    "LoanStatus",
]
