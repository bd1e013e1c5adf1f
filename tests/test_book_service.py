import pytest

from circulation.extensions import db
from circulation.models.book import BookStatus
from circulation.models.borrower import BorrowerRef
from circulation.services.book_service import BookService
from circulation.services.results import ErrorKind
from circulation.utils.auth import ActorContext


@pytest.fixture
def books(app):
    return BookService(db.session)


def test_create_sets_available_to_total(books):
    result = books.create_book("branch-a", total_copies=4, title="  Atlas  ")

    assert result.success
    assert result.data.total_copies == 4
    assert result.data.available_copies == 4
    assert result.data.status == BookStatus.ACTIVE
    assert result.data.title == "Atlas"


def test_non_admin_creates_in_own_branch(books):
    staff = ActorContext("u-1", role="Librarian", branch_id="branch-a")
    result = books.create_book("branch-z", total_copies=1, actor=staff)
    assert result.data.branch_id == "branch-a"


def test_super_admin_picks_branch(books):
    root = ActorContext("u-1", role="SuperAdmin")
    result = books.create_book("branch-z", total_copies=1, actor=root)
    assert result.data.branch_id == "branch-z"


@pytest.mark.parametrize("copies", [-1, "many", 2.9, "2.5", None, "NaN", "Infinity"])
def test_create_rejects_bad_copy_counts(books, copies):
    assert books.create_book("branch-a", total_copies=copies).error == ErrorKind.INVALID_INPUT


@pytest.mark.parametrize("copies, expected", [(3, 3), ("3", 3), (3.0, 3), (0, 0)])
def test_create_accepts_whole_copy_counts(books, copies, expected):
    assert books.create_book("branch-a", total_copies=copies).data.total_copies == expected


def test_create_requires_branch(books):
    assert books.create_book(None, total_copies=1).error == ErrorKind.INVALID_INPUT


def test_list_scoped_and_filtered(books):
    books.create_book("branch-a", total_copies=1, title="Algebra I")
    books.create_book("branch-a", total_copies=1, title="Biology")
    books.create_book("branch-b", total_copies=1, title="Algebra II")

    staff = ActorContext("u-1", role="Teacher", branch_id="branch-a")
    root = ActorContext("u-2", role="SuperAdmin")

    assert [b.title for b in books.list_books("branch-b", actor=staff).data] == ["Algebra I", "Biology"]
    assert [b.title for b in books.list_books(actor=root, title="algebra").data] == ["Algebra I", "Algebra II"]


def test_retire_hides_book(books):
    book_id = books.create_book("branch-a", total_copies=1, title="Old").data.id

    result = books.retire_book(book_id)

    assert result.success
    assert result.data.status == BookStatus.RETIRED
    assert books.list_books("branch-a").data == []
    assert books.retire_book(book_id).error == ErrorKind.NOT_FOUND


def test_retire_refused_while_loaned(books, loan_service):
    book_id = books.create_book("branch-a", total_copies=2).data.id
    loan_id = loan_service.issue_book(book_id, BorrowerRef.student("s-1")).data.id

    assert books.retire_book(book_id).error == ErrorKind.INVALID_STATE

    assert loan_service.return_book(loan_id).success
    assert books.retire_book(book_id).success


def test_branchless_staff_cannot_list_every_branch(books):
    books.create_book("branch-a", total_copies=1, title="Algebra I")
    books.create_book("branch-b", total_copies=1, title="Algebra II")

    staff = ActorContext("u-1", role="Librarian", branch_id=None)

    result = books.list_books(actor=staff)
    assert result.success is False
    assert result.error == ErrorKind.INVALID_INPUT
    assert books.create_book("branch-a", total_copies=1, actor=staff).error == ErrorKind.INVALID_INPUT
