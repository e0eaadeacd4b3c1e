"""
Domain Exceptions
Each error carries the HTTP status it is rendered with by the API layer
"""


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500
    error_type = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is missing, invalid or violates domain rules."""

    status_code = 400
    error_type = "validation_error"


class IntegrityError(DomainError):
    """Raised when a payment gateway signature does not match."""

    status_code = 401
    error_type = "integrity_error"


class NotFoundError(DomainError):
    """Raised when an expected staff member or record does not exist."""

    status_code = 404
    error_type = "not_found"


class GatewayError(DomainError):
    """Raised when the payment gateway is unconfigured, unreachable or rejects a call."""

    status_code = 502
    error_type = "gateway_error"


class StorageError(DomainError):
    """Raised when MongoDB cannot be reached or a write fails. Safe to retry."""

    status_code = 503
    error_type = "storage_error"
