"""Error Hierarchy: typed, categorized exceptions for every gateway failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - NotFound / client errors are 400-level; backend failures are 500-level
    - to_response() produces the flat REST envelope: {"error": <message>, "code", ...}
    - Adapters raise these; routes never catch them (global handlers render them)

Design Decisions:
    - Single hierarchy with GatewayError base: one FastAPI handler renders all of them
    - "error" holds the human message so clients can read it without unwrapping
"""

from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    UPSTREAM = "upstream"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(GatewayError):
    """Keyed lookup, update or delete matched nothing."""
    def __init__(self, resource_type: str, resource_id: str, message: str | None = None):
        super().__init__(
            message or f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class MissingFileError(GatewayError):
    """Multipart upload arrived without a file part."""
    def __init__(self):
        super().__init__(
            "Nenhum arquivo enviado.",
            "MISSING_FILE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )


class PayloadTooLargeError(GatewayError):
    """Uploaded file exceeds the configured size limit."""
    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Arquivo excede o limite de {limit // (1024 * 1024)} MB.",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 413,
            details={"size": size, "limit": limit},
        )


# ─── Backend Errors (500-level) ─────────────────────────────────

class UpstreamError(GatewayError):
    """A backend client raised (connectivity, constraint violation, bad query)."""
    def __init__(self, message: str, backend: str, details: Any = None):
        super().__init__(
            message, "UPSTREAM_FAILURE", ErrorCategory.UPSTREAM,
            ErrorSeverity.CRITICAL, 500, details,
        )
        self.backend = backend


class BackendUnavailableError(GatewayError):
    """Backend could not be reached in time (e.g. connection pool exhausted)."""
    def __init__(self, message: str, backend: str, details: Any = None):
        super().__init__(
            message, "BACKEND_UNAVAILABLE", ErrorCategory.UNAVAILABLE,
            ErrorSeverity.CRITICAL, 503, details,
        )
        self.backend = backend
