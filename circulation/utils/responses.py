from flask import jsonify

from circulation.services.results import ErrorKind, ServiceResult

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAVAILABLE: 409,
    ErrorKind.BLOCKED: 409,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.LIMIT_REACHED: 409,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INTERNAL: 500,
}


def json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code


def send_result(result: ServiceResult, serialize=None, success_code=200):
    if result.success:
        return jsonify(result.to_dict(serialize)), success_code
    return jsonify(result.to_dict()), STATUS_BY_KIND.get(result.error, 400)
