import pytest

from circulation.extensions import db
from circulation.models.borrower import BorrowerRef
from circulation.repositories.loan_repo import LoanRepo
from circulation.services.eligibility_guard import EligibilityGuard


@pytest.fixture
def guard(app):
    return EligibilityGuard(LoanRepo(db.session))


def test_borrower_without_loans_is_eligible(guard, clock):
    assert guard.has_blocking_overdue(BorrowerRef.student("s-1"), clock()) is False


def test_loan_not_yet_due_does_not_block(guard, loan_service, make_book, clock):
    borrower = BorrowerRef.student("s-1")
    assert loan_service.issue_book(make_book(), borrower).success

    clock.advance(days=14)  # exactly at the due instant
    assert guard.has_blocking_overdue(borrower, clock()) is False


def test_overdue_active_loan_blocks(guard, loan_service, make_book, clock):
    borrower = BorrowerRef.student("s-1")
    assert loan_service.issue_book(make_book(), borrower).success

    clock.advance(days=14, seconds=1)
    assert guard.has_blocking_overdue(borrower, clock()) is True


def test_returned_loan_never_blocks(guard, loan_service, make_book, clock):
    borrower = BorrowerRef.teacher("t-1")
    loan_id = loan_service.issue_book(make_book(), borrower).data.id
    clock.advance(days=20)
    assert loan_service.return_book(loan_id, "librarian-1").success

    assert guard.has_blocking_overdue(borrower, clock()) is False


def test_student_and_teacher_with_same_id_are_distinct(guard, loan_service, make_book, clock):
    assert loan_service.issue_book(make_book(), BorrowerRef.student("42")).success
    clock.advance(days=15)

    assert guard.has_blocking_overdue(BorrowerRef.student("42"), clock()) is True
    assert guard.has_blocking_overdue(BorrowerRef.teacher("42"), clock()) is False


def test_branch_filter_limits_the_check(guard, loan_service, make_book, clock):
    borrower = BorrowerRef.student("s-1")
    assert loan_service.issue_book(make_book(branch_id="branch-b"), borrower).success
    clock.advance(days=15)

    assert guard.has_blocking_overdue(borrower, clock(), branch_id="branch-a") is False
    assert guard.has_blocking_overdue(borrower, clock(), branch_id="branch-b") is True
    assert guard.has_blocking_overdue(borrower, clock()) is True
