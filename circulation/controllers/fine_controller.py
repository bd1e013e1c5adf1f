from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from circulation.extensions import db
from circulation.models.borrower import BorrowerRef
from circulation.services.fine_calculator import FineCalculator
from circulation.utils.auth import current_actor
from circulation.utils.responses import json_error, send_result
from circulation.utils.serializers import fine_to_dict, many

fine_bp = Blueprint("fines", __name__)


def _service():
    return FineCalculator(db.session, current_app.extensions["library_settings"])


@fine_bp.get("/borrower/<borrower_id>")
@jwt_required()
def borrower_fines(borrower_id: str):
    try:
        borrower = BorrowerRef.parse(request.args.get("borrower_type"), borrower_id)
    except ValueError as e:
        return json_error(str(e), 400)
    return send_result(_service().get_borrower_fines(borrower), many(fine_to_dict))


@fine_bp.post("/<int:fine_id>/pay")
@jwt_required()
def pay_fine(fine_id: int):
    data = request.get_json(silent=True) or {}
    if "amount" not in data:
        return json_error("amount is required", 400)
    result = _service().record_payment(fine_id, data["amount"], data.get("method"))
    return send_result(result, fine_to_dict)


@fine_bp.post("/<int:fine_id>/waive")
@jwt_required()
def waive_fine(fine_id: int):
    data = request.get_json(silent=True) or {}
    result = _service().waive(fine_id, current_actor().user_id, data.get("reason"))
    return send_result(result, fine_to_dict)
