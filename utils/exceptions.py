"""
Custom Exceptions Module

Defines application-specific exceptions for clearer error handling.
All exceptions inherit from a base HumeConnectError so a single FastAPI
exception handler can render every one of them.

Usage:
    from utils.exceptions import FormNotFoundError

    form = await service.get_form(form_id)  # raises FormNotFoundError
"""

from typing import Optional, Dict, Any, List


class HumeConnectError(Exception):
    """
    Base exception for all Hume Connect application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code to return (optional)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "success": False,
            "error": self.message,
            "errorType": self.__class__.__name__,
            "details": self.details
        }


# =============================================================================
# Form Configuration Exceptions
# =============================================================================

class FormNotFoundError(HumeConnectError):
    """Raised when a form configuration id does not resolve."""

    def __init__(self, form_id: Any, message: str = "Form configuration not found"):
        super().__init__(
            message=message,
            details={"form_id": form_id},
            status_code=404
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class FormConfigurationInvalidError(HumeConnectError):
    """
    Raised when a form configuration violates its structural invariants.

    Common causes:
        - Duplicate field orders
        - Duplicate field ids within the form
        - Missing name, application type or fields
    """

    def __init__(
        self,
        errors: List[str],
        message: str = "Validation failed"
    ):
        self.errors = errors
        super().__init__(
            message=message,
            details={"errors": errors},
            status_code=400
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "details": self.errors
        }


# =============================================================================
# Submission Exceptions
# =============================================================================

class SubmissionValidationError(HumeConnectError):
    """
    Raised when a submission fails dynamic validation.

    Carries every error and warning collected for the submission so the
    client sees all problems in one round trip.
    """

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        warnings: List[Dict[str, Any]],
        form_info: Dict[str, Any]
    ):
        self.errors = errors
        self.warnings = warnings
        self.form_info = form_info
        self.messages = [
            e.get("message") or f"{e.get('label') or e.get('field') or 'Field'} validation failed"
            for e in errors
        ]
        super().__init__(
            message=f"Form validation failed: {', '.join(self.messages)}",
            details={"errors": errors},
            status_code=400
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "errorType": "VALIDATION_ERROR",
            "details": self.messages,
            "rawDetails": self.errors,
            "formConfiguration": self.form_info,
        }
        if self.warnings:
            body["warnings"] = self.warnings
        return body


class ValidationSystemError(HumeConnectError):
    """
    Raised when the validation pipeline itself fails (e.g. store errors).

    The raw cause is exposed to clients only in development mode.
    """

    def __init__(self, cause: Optional[str] = None, expose_details: bool = False):
        self.cause = cause
        self.expose_details = expose_details
        super().__init__(
            message="Validation system error. Please try again.",
            details={"cause": cause},
            status_code=500
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "errorType": "VALIDATION_SYSTEM_ERROR",
        }
        if self.expose_details and self.cause:
            body["details"] = self.cause
        return body


# =============================================================================
# Authentication Exceptions
# =============================================================================

class AuthenticationError(HumeConnectError):
    """
    Raised when authentication fails.

    Common causes:
        - Missing bearer token
        - Expired or malformed token
    """

    def __init__(
        self,
        message: str = "Admin authentication required",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=401
        )


class AuthorizationError(HumeConnectError):
    """Raised when an authenticated caller lacks the admin role."""

    def __init__(
        self,
        message: str = "Permission denied",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=403
        )
