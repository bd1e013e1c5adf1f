from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from circulation.extensions import db
from circulation.services.book_service import BookService
from circulation.utils.auth import current_actor
from circulation.utils.decorators import LIBRARY_STAFF, role_required
from circulation.utils.responses import send_result
from circulation.utils.serializers import book_to_dict, many

book_bp = Blueprint("books", __name__)


@book_bp.get("/")
@jwt_required()
def list_books():
    result = BookService(db.session).list_books(
        request.args.get("branch_id"),
        actor=current_actor(),
        title=request.args.get("title"),
    )
    return send_result(result, many(book_to_dict))


@book_bp.post("/")
@jwt_required()
@role_required(*LIBRARY_STAFF)
def create_book():
    data = request.get_json(silent=True) or {}
    result = BookService(db.session).create_book(
        data.get("branch_id"),
        total_copies=data.get("total_copies", 1),
        title=data.get("title"),
        actor=current_actor(),
    )
    return send_result(result, book_to_dict, success_code=201)


@book_bp.delete("/<int:book_id>")
@jwt_required()
@role_required(*LIBRARY_STAFF)
def delete_book(book_id: int):
    return send_result(BookService(db.session).retire_book(book_id), book_to_dict)
