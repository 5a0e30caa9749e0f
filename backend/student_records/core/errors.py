"""Application error taxonomy.

Every error carries the HTTP status it maps to; the translator installed in
``student_records.main`` turns them into ``{"message": ...}`` responses.
"""


class StudentRecordsError(Exception):
    """Base exception for all student records errors."""

    status_code = 500
    default_message = "Something went wrong!"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StudentRecordsError):
    """Raised when request input is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(StudentRecordsError):
    """Raised when a username/password pair does not match a user.

    Unknown users and wrong passwords share this message so that callers
    cannot tell the two apart.
    """

    status_code = 401
    default_message = "Invalid credentials"


class AuthorizationError(StudentRecordsError):
    """Raised by the access guard when a request carries no usable token."""

    status_code = 401


class MissingTokenError(AuthorizationError):
    status_code = 401
    default_message = "Access denied. No token provided."


class InvalidTokenError(AuthorizationError):
    status_code = 400
    default_message = "Invalid or expired token."


class NotFoundError(StudentRecordsError):
    status_code = 404
    default_message = "Student not found"


class StoreError(StudentRecordsError):
    """Raised when the underlying database call fails.

    The driver error is kept as ``__cause__`` for server-side logging; the
    client only ever sees the generic message.
    """

    status_code = 500
