"""
Exception classes for the Padma backend
Flow: Error occurrence → Classification → Logging → Registrar decision

Error Types:
- MalformedDescriptorError   → fatal, run aborts before any create call
- AlreadyRegisteredError     → benign, swallowed by the registrar
- RegistrationFailureError   → accumulated, surfaced at end of run
- ExternalServiceError       → CMS unreachable, run aborts
- RegistrationAbortedError   → raised by the process supervisor to terminate
"""

from typing import Any, Dict, List, Optional

from padma_backend.core.logging import get_logger

logger = get_logger(__name__)

ALREADY_EXISTS_REASON = "component.alreadyExists"


class PadmaBackendException(Exception):
    """
    Base exception class for the Padma backend.

    Features:
    - Structured error context
    - HTTP status code mapping
    - Optional error codes
    """

    log_level = "error"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        """Initialize base exception."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code

        getattr(logger, self.log_level)(
            "Padma backend exception occurred",
            error_type=self.__class__.__name__,
            message=message,
            error_code=error_code,
            status_code=status_code,
            details=self.details
        )


class MalformedDescriptorError(PadmaBackendException):
    """
    A descriptor file could not be decoded or lacks required fields.

    This is a configuration defect: the file must be fixed before re-running.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        missing_fields: Optional[List[str]] = None,
        error_code: str = "MALFORMED_DESCRIPTOR"
    ):
        """Initialize malformed descriptor error."""
        details: Dict[str, Any] = {}
        if source:
            details["source"] = source
        if missing_fields:
            details["missing_fields"] = missing_fields

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=422
        )
        self.source = source
        self.missing_fields = missing_fields or []


class RegistrationError(PadmaBackendException):
    """Base class for failures of a single create-component call."""

    def __init__(
        self,
        message: str,
        uid: str,
        reason: str,
        error_code: str,
        status_code: int
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details={"uid": uid, "reason": reason},
            status_code=status_code
        )
        self.uid = uid
        self.reason = reason


class AlreadyRegisteredError(RegistrationError):
    """The CMS already holds a component with this uid."""

    log_level = "warning"

    def __init__(self, uid: str, reason: str = ALREADY_EXISTS_REASON):
        super().__init__(
            message=f"Component {uid} is already registered",
            uid=uid,
            reason=reason,
            error_code="COMPONENT_ALREADY_EXISTS",
            status_code=409
        )


class RegistrationFailureError(RegistrationError):
    """Any create-component failure other than "already exists"."""

    def __init__(self, uid: str, reason: str, status_code: int = 502):
        super().__init__(
            message=f"Error registering component {uid}: {reason}",
            uid=uid,
            reason=reason,
            error_code="COMPONENT_REGISTRATION_FAILED",
            status_code=status_code
        )


class ExternalServiceError(PadmaBackendException):
    """
    External service error for CMS failures outside a single create call.
    """

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        error_code: str = "EXTERNAL_SERVICE_ERROR"
    ):
        """Initialize external service error."""
        details = {}
        if service_name:
            details["service_name"] = service_name

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=502
        )
        self.service_name = service_name


class RegistrationAbortedError(PadmaBackendException):
    """Raised by the process supervisor when a run must terminate."""

    log_level = "critical"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="REGISTRATION_ABORTED",
            details={"detail": detail} if detail else None,
            status_code=500
        )
        self.detail = detail
