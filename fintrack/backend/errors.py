# fintrack/backend/errors.py
"""Exceptions raised by the services and rendered by the app as JSON."""


class ApiError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"message": self.message}


class ValidationError(ApiError):
    status_code = 400
    message = "Invalid request"


class DuplicateEmail(ApiError):
    status_code = 400
    message = "User already exists"


class Conflict(ApiError):
    status_code = 400
    message = "Category already exists"


class DefaultCategoryProtected(ApiError):
    status_code = 400
    message = "Cannot delete default category"


class Unauthenticated(ApiError):
    status_code = 401
    message = "Not authorized, no token"


class InvalidCredentials(Unauthenticated):
    message = "Invalid email or password"


class Forbidden(ApiError):
    # ownership failures are reported as 401 on this API
    status_code = 401
    message = "Not authorized"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class StoreError(ApiError):
    status_code = 500
    message = "Database error"
