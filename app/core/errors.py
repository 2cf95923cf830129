# app/core/errors.py
from typing import Optional

from pydantic import ValidationError as PydanticValidationError


class GoalsError(Exception):
    """Base class for domain errors raised by the services."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GoalsError):
    """Malformed or out-of-constraint input. Rendered as 400."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class OutOfRangeError(ValidationError):
    """A leaf index that does not exist in the goal's metadata."""

    def __init__(self, collection: str, index: int):
        super().__init__(f"{collection} index {index} is out of range", field=collection)
        self.index = index


class NotFoundError(GoalsError):
    status_code = 404


class DataIntegrityError(GoalsError):
    """A stored record violates an internal invariant.

    The message is kept for the server log; clients only ever see a generic failure.
    """

    status_code = 500


def first_validation_error(exc: PydanticValidationError, prefix: str = "") -> ValidationError:
    """Reduce a pydantic error list to the first failing field."""
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    field = ".".join(part for part in (prefix, loc) if part) or None
    message = f"{field}: {err['msg']}" if field else err["msg"]
    return ValidationError(message, field=field)
