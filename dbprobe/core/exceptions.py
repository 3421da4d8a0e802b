"""App-wide exception hierarchy.

This module provides a unified exception system with automatic HTTP status code
mapping and consistent error response formatting.
"""


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


# Database errors (500)
class DatabaseError(AppException):
    """Base class for failures talking to the database."""

    status_code = 500
    error_type = "database_error"

    def __init__(self, message: str = "Database error"):
        super().__init__(message)


class ConnectionAcquisitionError(DatabaseError):
    """Raised when the pool cannot supply a connection.

    Covers pool exhaustion, unreachable hosts and rejected credentials.
    """

    error_type = "connection_acquisition_error"

    def __init__(self, message: str = "Could not acquire a database connection"):
        super().__init__(message)


class ValidityCheckError(DatabaseError):
    """Raised when the connection validity check fails instead of answering."""

    error_type = "validity_check_error"

    def __init__(self, message: str = "Connection validity check failed"):
        super().__init__(message)
