from __future__ import annotations

from typing import Optional


class ExpertPressError(Exception):
    """Base class for errors raised by the authoring layer.

    ``status_code`` is the HTTP status the server reports for the error.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, *, level: str = "normal", err: Optional[BaseException] = None) -> None:
        self.message = message or (str(err) if err else self.default_message)
        self.level = level
        self.err = err
        super().__init__(self.message)


class ValidationError(ExpertPressError):
    status_code = 422
    default_message = "Validation error, cannot save resource."


class NotFoundError(ExpertPressError):
    status_code = 404
    default_message = "Resource could not be found."


class NoPermissionError(ExpertPressError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class InternalServerError(ExpertPressError):
    status_code = 500
