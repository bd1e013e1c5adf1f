from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from circulation.extensions import db
from circulation.models.borrower import BorrowerRef
from circulation.services.loan_service import LoanService
from circulation.utils.auth import current_actor
from circulation.utils.responses import json_error, send_result
from circulation.utils.serializers import loan_to_dict, many

loan_bp = Blueprint("loans", __name__)


def _service():
    return LoanService(db.session, current_app.extensions["library_settings"])


@loan_bp.post("/issue")
@jwt_required()
def issue_book():
    data = request.get_json(silent=True) or {}
    try:
        book_id = int(data["book_id"])
        borrower = BorrowerRef.parse(data.get("borrower_type"), data.get("borrower_id"))
    except KeyError:
        return json_error("book_id is required", 400)
    except (TypeError, ValueError) as e:
        return json_error(str(e), 400)

    result = _service().issue_book(
        book_id,
        borrower,
        issued_by=current_actor().user_id,
        notes=data.get("notes"),
    )
    return send_result(result, loan_to_dict, success_code=201)


@loan_bp.post("/<int:loan_id>/return")
@jwt_required()
def return_book(loan_id: int):
    data = request.get_json(silent=True) or {}
    returned_to = data.get("returned_to") or current_actor().user_id
    return send_result(_service().return_book(loan_id, returned_to), loan_to_dict)


@loan_bp.post("/<int:loan_id>/renew")
@jwt_required()
def renew_book(loan_id: int):
    return send_result(_service().renew_book(loan_id), loan_to_dict)


@loan_bp.get("/borrower/<borrower_id>")
@jwt_required()
def borrower_loans(borrower_id: str):
    try:
        borrower = BorrowerRef.parse(request.args.get("borrower_type"), borrower_id)
    except ValueError as e:
        return json_error(str(e), 400)
    result = _service().get_borrower_loans(borrower, actor=current_actor())
    return send_result(result, many(loan_to_dict))


@loan_bp.get("/overdue")
@jwt_required()
def overdue_loans():
    result = _service().get_overdue_loans(request.args.get("branch_id"), actor=current_actor())
    return send_result(result, many(loan_to_dict))
