"""Typed outcomes for circulation operations.

Every public service method returns a :class:`ServiceResult` instead of
raising. Inside a service, expected refusals are raised as
:class:`CirculationError` subclasses; :func:`service_operation` rolls the
session back and turns them into failed results carrying an
:class:`ErrorKind`, so callers branch on the kind rather than on message
text. Data-store failures and anything unexpected become an opaque
``internal`` result.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    BLOCKED = "blocked"
    INVALID_STATE = "invalid_state"
    LIMIT_REACHED = "limit_reached"
    INVALID_INPUT = "invalid_input"
    INTERNAL = "internal"


class CirculationError(Exception):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CirculationError):
    kind = ErrorKind.NOT_FOUND


class UnavailableError(CirculationError):
    kind = ErrorKind.UNAVAILABLE


class BlockedError(CirculationError):
    kind = ErrorKind.BLOCKED


class InvalidStateError(CirculationError):
    kind = ErrorKind.INVALID_STATE


class LimitReachedError(CirculationError):
    kind = ErrorKind.LIMIT_REACHED


class InvalidInputError(CirculationError):
    kind = ErrorKind.INVALID_INPUT


class InventoryInconsistencyError(Exception):
    """The copy counters disagree with the loans that reference them."""


class ConcurrentUpdateError(Exception):
    """An optimistic update kept losing to concurrent writers."""


@dataclass
class ServiceResult:
    success: bool
    message: str
    data: Any = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ServiceResult":
        return cls(True, message, data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "ServiceResult":
        return cls(False, message, None, kind)

    def to_dict(self, serialize: Optional[Callable[[Any], Any]] = None) -> dict:
        payload = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = serialize(self.data) if serialize else self.data
        if self.error is not None:
            payload["error"] = self.error.value
        return payload


def service_operation(failure_message: str):
    """Run a service method as one unit of work on ``self.session``.

    Commits when the method returns, rolls back on any exception. Expected
    refusals come back as failed results; anything else is logged and
    reported as ``failure_message``.
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(self, *args, **kwargs):
            session = self.session
            try:
                result = fn(self, *args, **kwargs)
                session.commit()
                return result
            except CirculationError as e:
                session.rollback()
                logger.info(f"[{fn.__name__}] refused ({e.kind.value}): {e.message}")
                return ServiceResult.fail(e.kind, e.message)
            except (SQLAlchemyError, InventoryInconsistencyError, ConcurrentUpdateError) as e:
                session.rollback()
                logger.exception(f"[{fn.__name__}] failed: {e}")
                return ServiceResult.fail(ErrorKind.INTERNAL, failure_message)
            except Exception as e:
                session.rollback()
                logger.exception(f"[{fn.__name__}] unexpected error: {e}")
                return ServiceResult.fail(ErrorKind.INTERNAL, failure_message)

        return wrapper

    return decorator
