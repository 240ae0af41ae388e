"""Client-facing failures raised by the request handlers.

Each carries the HTTP status and the short message rendered as
``{"error": message}``. Anything else that escapes a handler is treated
as an internal failure by the app's catch-all.
"""


class ApiError(Exception):
    status_code = 400
    message = "Bad request"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"error": self.message}


class DuplicateEnrollment(ApiError):
    message = "Enrollment already registered"


class InvalidCredentials(ApiError):
    message = "Invalid credentials"


class NotLoggedIn(ApiError):
    status_code = 401
    message = "Not logged in"


class NotAuthorized(ApiError):
    status_code = 403
    message = "Not authorized"


class LoginRequired(ApiError):
    status_code = 401
    message = "Login required"


class AlreadyRegistered(ApiError):
    message = "Already registered"
