"""Domain errors raised by services and repositories.

Each error carries the HTTP status it maps to; the handlers registered in
``devtrack.main`` turn them into JSON responses.
"""


class DevTrackError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None, details: list | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details


class ValidationError(DevTrackError):
    status_code = 400
    message = "Validation failed"


class AuthError(DevTrackError):
    status_code = 401
    message = "Please authenticate"


class InvalidCredentialsError(AuthError):
    # Login failures answer 400, not 401
    status_code = 400
    message = "Invalid login credentials"


class NotFoundError(DevTrackError):
    status_code = 404
    message = "Not found"
