"""Error Hierarchy — typed, categorized exceptions for all list-state failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) leave the collection state unchanged
    - to_response() produces the REST envelope: {"success": false, "error": ..., "code": ...}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ListStateError base: FastAPI global handler catches all
    - Client-side transport failures live in the same hierarchy so the list
      controller handles one exception type
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


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
    TRANSPORT = "transport"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    item_ids: list[int] | None = None
    path: str | None = None


class ListStateError(Exception):
    """Base exception for all list-state errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidOrderError(ListStateError):
    """Submitted ordering is not a permutation of the base sequence."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"sortedItems is not a permutation of the collection: {reason}",
            "INVALID_ORDER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.reason = reason


class IdNotFoundError(ListStateError):
    """One or more ids are absent from the current order."""
    def __init__(self, missing_ids: list[int], context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.item_ids = missing_ids
        super().__init__(
            f"Item id(s) not found: {', '.join(str(i) for i in missing_ids)}",
            "INVALID_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.missing_ids = missing_ids


class InvalidPageError(ListStateError):
    """Page number or page size below 1."""
    def __init__(self, page: int, page_size: int, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid page window (page={page}, pageSize={page_size})",
            "INVALID_PAGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.page = page
        self.page_size = page_size


class EndpointNotFoundError(ListStateError):
    """No route matches the request."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            "Endpoint not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


# ─── Client / Infrastructure Errors ─────────────────────────────

class TransportFailureError(ListStateError):
    """HTTP call from the list client failed (network, timeout, or error response)."""
    def __init__(
        self,
        message: str,
        operation: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{operation} failed: {message}",
            "TRANSPORT_FAILURE", ErrorCategory.TRANSPORT,
            ErrorSeverity.ERROR, context, 503,
        )
        self.operation = operation
        self.status_code = status_code
