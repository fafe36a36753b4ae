"""
Utilities Module

Provides shared utilities across the application:
- Logging configuration
- Custom exceptions
- Rate limiting
"""

from .logging import get_logger, setup_logging, log_form_action
from .exceptions import (
    HumeConnectError,
    FormNotFoundError,
    FormConfigurationInvalidError,
    SubmissionValidationError,
    ValidationSystemError,
    AuthenticationError,
    AuthorizationError,
)
from .rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    RATE_LIMITS,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_form_action",
    # Exceptions
    "HumeConnectError",
    "FormNotFoundError",
    "FormConfigurationInvalidError",
    "SubmissionValidationError",
    "ValidationSystemError",
    "AuthenticationError",
    "AuthorizationError",
    # Rate Limiting
    "limiter",
    "rate_limit_exceeded_handler",
    "RATE_LIMITS",
]
