from functools import wraps

from flask import current_app, request
from flask_jwt_extended import verify_jwt_in_request

from circulation.utils.auth import SUPER_ADMIN, current_actor
from circulation.utils.responses import json_error

LIBRARY_STAFF = (SUPER_ADMIN, "Admin", "Librarian")


def role_required(*roles):
    allowed = set(roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            actor = current_actor()
            if actor.role not in allowed:
                current_app.logger.warning(
                    f"[auth] user={actor.user_id} role={actor.role} denied on {request.endpoint}"
                )
                return json_error("Forbidden", 403)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
