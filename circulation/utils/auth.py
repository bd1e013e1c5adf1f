from dataclasses import dataclass
from typing import Optional

from flask_jwt_extended import get_jwt, get_jwt_identity

from circulation.services.results import InvalidInputError

SUPER_ADMIN = "SuperAdmin"


@dataclass(frozen=True)
class ActorContext:
    user_id: str
    role: Optional[str] = None
    branch_id: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == SUPER_ADMIN

    def visible_branch(self, requested: Optional[str]) -> Optional[str]:
        """SuperAdmin may look at any branch (or all); others only their own.

        A non-SuperAdmin without a branch claim is refused rather than
        given an unscoped view.
        """
        if self.is_super_admin:
            return requested or None
        if not self.branch_id:
            raise InvalidInputError("Actor has no branch")
        return self.branch_id


def current_actor() -> ActorContext:
    """Actor for the current request, from the JWT identity and claims."""
    claims = get_jwt() or {}
    return ActorContext(
        user_id=str(get_jwt_identity()),
        role=claims.get("role"),
        branch_id=claims.get("branch_id"),
    )
