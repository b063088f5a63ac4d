"""Error Hierarchy — typed, categorized exceptions for all StudyFront failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are rejected before any side effect
    - Upstream errors (classifier, completion) never reach the client: callers
      catch UpstreamServiceError and take the local fallback path
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with StudyFrontError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    QUOTA = "quota"
    MODERATION = "moderation"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class StudyFrontError(Exception):
    """Base exception for all StudyFront errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "operation": self.context.operation,
                "retry_after_ms": self.context.retry_after_ms,
            },
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ContentValidationError(StudyFrontError):
    """Input failed a validation rule not expressible in the request schema."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, details={"field": field},
        )
        self.field = field


class UnauthorizedError(StudyFrontError):
    """Action requires an established identity."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"Authentication required to {action}",
            "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(StudyFrontError):
    """Identity is established but not allowed to perform the action."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(StudyFrontError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class QuotaExceededError(StudyFrontError):
    """Daily budget for a rate-limited action is exhausted."""
    def __init__(
        self,
        message: str,
        limit: int,
        upgrade: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "QUOTA_EXCEEDED", ErrorCategory.QUOTA,
            ErrorSeverity.WARNING, context, 429,
            details={"remaining": 0, "limit": limit, "upgrade": upgrade},
        )
        self.limit = limit
        self.upgrade = upgrade


class ModerationRejectedError(StudyFrontError):
    """Content failed the moderation gate."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            reason, "MODERATION_REJECTED", ErrorCategory.MODERATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


class DuplicateReportError(StudyFrontError):
    """Reporter already filed a report against this target."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You have already reported this content",
            "DUPLICATE_REPORT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(StudyFrontError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class UpstreamServiceError(StudyFrontError):
    """Remote classifier or completion service unreachable or misbehaving."""
    def __init__(
        self,
        message: str,
        service: str,
        error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"{service} error ({error_type}): {message}",
            "UPSTREAM_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, ctx, 503,
        )
        self.service = service
        self.error_type = error_type


class CompletionServiceError(UpstreamServiceError):
    """Completion API call failed after retries."""
    def __init__(
        self,
        message: str,
        error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "Completion API", error_type,
            retry_after_ms=retry_after_ms, context=context,
        )


class QuizShapeError(StudyFrontError):
    """Completion output did not match the quiz schema."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "QUIZ_SHAPE_INVALID", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )
