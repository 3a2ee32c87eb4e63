"""Operational errors raised by the quiz engine and CRUD layers.

Every error carries the HTTP status it maps to at the API boundary. Anything
that is not an ``AppError`` is treated as a programming error there.
"""


class AppError(Exception):
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def status(self) -> str:
        return "fail" if str(self.status_code).startswith("4") else "error"


class InsufficientData(AppError):
    status_code = 404
    default_message = "Not enough questions available."


class NoActiveSession(AppError):
    status_code = 400
    default_message = (
        "No active quiz found. Please start a new quiz, "
        "or your active quiz might have expired."
    )


class SessionExpired(AppError):
    status_code = 400
    default_message = "Your quiz time has expired."


class AlreadySubmitted(AppError):
    status_code = 409
    default_message = "This quiz has already been submitted."


class AnswerSetMismatch(AppError):
    status_code = 400
    default_message = "One or more submitted questions are not part of your active quiz."


class QuestionNotFound(AppError):
    status_code = 404
    default_message = "No question found with that ID"


class ValidationFault(AppError):
    status_code = 400
    default_message = "Invalid input data."


class NotFound(AppError):
    status_code = 404
    default_message = "No document found with that ID"


class DuplicateValue(AppError):
    status_code = 400
    default_message = "Duplicate field value. Please use another value!"
