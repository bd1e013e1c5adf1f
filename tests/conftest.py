from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from circulation import create_app
from circulation.config import LibrarySettings
from circulation.extensions import db
from circulation.services.book_service import BookService
from circulation.services.fine_calculator import FineCalculator
from circulation.services.loan_service import LoanService


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'library.db'}",
        "SQLALCHEMY_ENGINE_OPTIONS": {"connect_args": {"timeout": 30, "check_same_thread": False}},
        "JWT_SECRET_KEY": "test-jwt-secret-key-with-enough-length",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 0, 0))


@pytest.fixture
def settings():
    return LibrarySettings()


@pytest.fixture
def loan_service(app, settings, clock):
    return LoanService(db.session, settings, clock)


@pytest.fixture
def fine_service(app, settings, clock):
    return FineCalculator(db.session, settings, clock)


@pytest.fixture
def make_book(app):
    def _make(total=3, branch_id="branch-a", title="Sample Title"):
        result = BookService(db.session).create_book(branch_id, total_copies=total, title=title)
        assert result.success, result.message
        return result.data.id

    return _make


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(user_id="librarian-1", role="Librarian", branch_id="branch-a"):
        token = create_access_token(
            identity=user_id,
            additional_claims={"role": role, "branch_id": branch_id},
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
