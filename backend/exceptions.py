"""
Custom exception classes for the application.

This module defines domain-specific exceptions that provide better error handling
and clearer error messages throughout the application.

Persistence failures are not wrapped: SQLAlchemy errors propagate to callers
unchanged so transaction helpers can roll back and re-raise them.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when there's a configuration issue"""

    def __init__(self, message: str, missing_keys: list[str] | None = None):
        details = {"missing_keys": missing_keys} if missing_keys else {}
        super().__init__(message, details)


class ValidationError(ApplicationError):
    """
    Raised when validation fails.

    invalid_fields maps a field name to the list of messages for that field.
    """

    def __init__(self, message: str, invalid_fields: dict[str, list[str]] | None = None):
        self.invalid_fields = invalid_fields or {}
        details = {"invalid_fields": self.invalid_fields} if self.invalid_fields else {}
        super().__init__(message, details)


class RepositoryError(ApplicationError):
    """Raised when a repository or unit of work is misused"""

    def __init__(self, operation: str, message: str):
        details = {"operation": operation}
        super().__init__(message, details)


class EntityIdentityError(ApplicationError):
    """Raised when an entity's identity or creation audit data is reassigned"""

    def __init__(self, entity_type: str, field: str):
        details = {"entity_type": entity_type, "field": field}
        super().__init__(f"{entity_type}.{field} cannot be changed once assigned", details)
