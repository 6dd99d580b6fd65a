# campusconnect/core/exceptions.py
from typing import List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Access denied. No token provided."


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid token."


class ExpiredTokenError(AuthenticationError):
    default_message = "Token expired."


class UserNotFoundError(AuthenticationError):
    default_message = "Invalid token. User not found."


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Access denied. Insufficient permissions."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class StorageError(AppError):
    status_code = 500
    default_message = "Storage failure"
