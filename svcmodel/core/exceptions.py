"""Exceptions raised by svcmodel."""

from typing import Any, Dict, List, Optional

from svcmodel.core.constants import (
    DEFAULT_ERROR_STATUS,
    DEFAULT_JSON_ERROR_CODE,
    DEFAULT_JSON_STATUS,
    MSG_DB_UNREACHABLE,
    MSG_INVALID_DB_CONFIG,
    MSG_INVALID_JSON,
    MSG_INVALID_PAGINATION,
)


class ServiceModelError(Exception):
    """Base error carrying an HTTP-style status code and an optional error code."""

    def __init__(self, message: str, status_code: int = DEFAULT_ERROR_STATUS,
                 error_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses."""
        return {
            "message": self.message,
            "statusCode": self.status_code,
            "errorCode": self.error_code,
        }


class ConfigurationError(ServiceModelError):
    """Raised when the database configuration is missing required fields or is malformed."""

    def __init__(self, message: str = MSG_INVALID_DB_CONFIG,
                 errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(message, status_code=DEFAULT_ERROR_STATUS)


class ConnectivityError(ServiceModelError):
    """Raised when the database cannot be reached or rejects the credentials."""

    def __init__(self, message: str = MSG_DB_UNREACHABLE):
        super().__init__(message, status_code=DEFAULT_ERROR_STATUS)


class ValidationError(ServiceModelError):
    """Raised when pagination options fail validation."""

    def __init__(self, message: str = MSG_INVALID_PAGINATION,
                 errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(message, status_code=400)


class ParseError(ServiceModelError):
    """Raised when a JSON string cannot be decoded."""

    def __init__(self, message: str = MSG_INVALID_JSON,
                 status_code: int = DEFAULT_JSON_STATUS,
                 error_code: int = DEFAULT_JSON_ERROR_CODE):
        super().__init__(message, status_code=status_code, error_code=error_code)
