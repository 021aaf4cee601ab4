"""Error Hierarchy — typed, categorized exceptions for every article-service failure mode.

Invariants:
    - Every error has a kind (ErrorKind), code (str), category, severity and http_status
    - Stores and adapters raise these types; the orchestrator forwards them unchanged
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ArticleServiceError base: FastAPI global handler catches all
    - ErrorKind mirrors the six failure modes of the public operations, so callers
      branch on kind instead of on concrete classes
    - ErrorContext as dataclass: log/response context without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorKind(str, Enum):
    """Failure modes surfaced by the public operations."""
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    FAILED_PRECONDITION = "failed_precondition"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


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
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    article_id: str | None = None
    author_id: str | None = None
    storage_key: str | None = None


class ArticleServiceError(Exception):
    """Base exception for all article-service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "article_id": self.context.article_id,
                    "author_id": self.context.author_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidArgumentError(ArticleServiceError):
    """Missing or invalid required field, or non-positive pagination."""
    def __init__(
        self, message: str, fields: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorKind.INVALID_ARGUMENT,
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields or []


class NotFoundError(ArticleServiceError):
    """Requested article, attachment or identity does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorKind.NOT_FOUND,
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AlreadyExistsError(ArticleServiceError):
    """Duplicate like for an (author, article) pair."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ALREADY_EXISTS", ErrorKind.ALREADY_EXISTS,
            ErrorCategory.CONFLICT, ErrorSeverity.WARNING, context, 409,
        )


class FailedPreconditionError(ArticleServiceError):
    """Operation requires a prior state that does not hold (unlike without like)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FAILED_PRECONDITION", ErrorKind.FAILED_PRECONDITION,
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.WARNING, context, 412,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UnavailableError(ArticleServiceError):
    """External service (object store, identity service) unreachable or failing."""
    def __init__(
        self, message: str, service: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{service} unavailable: {message}",
            "UNAVAILABLE", ErrorKind.UNAVAILABLE,
            ErrorCategory.EXTERNAL_API, ErrorSeverity.CRITICAL, context, 503,
        )
        self.service = service


class InternalError(ArticleServiceError):
    """Unexpected failure inside the service."""
    def __init__(
        self, message: str, code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorKind.INTERNAL,
            category, ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(InternalError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE, context,
        )
        self.operation = operation
