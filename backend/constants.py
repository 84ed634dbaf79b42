"""
Application-wide constants.

This module centralizes all magic strings and numbers used throughout the application
to improve maintainability and reduce duplication.
"""


class HTTPStatus:
    """HTTP status codes used throughout the application"""

    # Success
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # Client Errors
    BAD_REQUEST = 400
    NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422

    # Server Errors
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class ResponseMessages:
    """User-facing messages returned in API envelopes"""

    PRODUCT_CREATED = "Product created successfully"
    PRODUCT_NOT_FOUND = "Product not found"
    VALIDATION_FAILED = "One or more validation errors occurred"


class ProductLimits:
    """Column sizes and value bounds for products"""

    NAME_MAX_LENGTH = 200
    PRICE_PRECISION = 18
    PRICE_SCALE = 2
    MIN_PRICE = 0
    MIN_STOCK = 0


class LogConfig:
    """Rotating log file settings"""

    FILE_NAME = "backend.log"
    MAX_BYTES = 10 * 1024 * 1024  # 10MB
    BACKUP_COUNT = 5
    FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ExecutionOptions:
    """Custom SQLAlchemy execution option keys"""

    NO_TRACKING = "no_tracking"
