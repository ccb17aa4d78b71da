"""Error Hierarchy - typed, categorized exceptions for every repostore failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are recoverable; store failures (5xx) are critical
    - Not-found errors expose is_not_found = True so callers branch without string matching
    - DatabaseError.operation names the step that failed ("create", "watch", "upsert", ...)

Design Decisions:
    - Single hierarchy with RepostoreError base: one except clause catches every core failure
    - http_status carried as a hint only; status mapping stays with the caller
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from repostore.core.domain_types import RepoId, UserId


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
    CONFLICT = "conflict"
    PERMISSION = "permission"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    repo_id: RepoId | None = None
    user_id: UserId | None = None
    owner_id: UserId | None = None


class RepostoreError(Exception):
    """Base exception for all repostore errors."""

    is_not_found = False

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
        """Convert to a structured error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "repo_id": self.context.repo_id,
                    "user_id": self.context.user_id,
                    "owner_id": self.context.owner_id,
                },
            }
        }


def _format_details(details: dict[str, Any]) -> str:
    return ", ".join(f"{k}={v!r}" for k, v in details.items())


# ─── Domain Errors (4xx) ────────────────────────────────────────

class InvalidArgumentError(RepostoreError):
    """Caller supplied an argument the store cannot use."""
    def __init__(self, message: str, argument: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.argument = argument


class NameNotAllowedError(RepostoreError):
    """Repository name rejected by the name validator."""
    def __init__(self, details: dict[str, Any], context: ErrorContext | None = None):
        super().__init__(
            f"name is not allowed: {_format_details(details)}",
            "NAME_NOT_ALLOWED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details


class RepoNotFoundError(RepostoreError):
    """Repository does not exist."""

    is_not_found = True

    def __init__(self, details: dict[str, Any], context: ErrorContext | None = None):
        super().__init__(
            f"repository does not exist: {_format_details(details)}",
            "REPO_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.details = details


class RepoAlreadyExistsError(RepostoreError):
    """Owner already has a repository with the same (case-insensitive) name."""
    def __init__(self, details: dict[str, Any], context: ErrorContext | None = None):
        super().__init__(
            f"repository already exists: {_format_details(details)}",
            "REPO_ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.details = details


class PermissionDeniedError(RepostoreError):
    """User lacks the access level required for the operation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class DatabaseError(RepostoreError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.detail = message
        self.operation = operation


def is_not_found(exc: BaseException) -> bool:
    """True when exc (or anything in its cause chain) is a not-found error."""
    while exc is not None:
        if getattr(exc, "is_not_found", False):
            return True
        exc = exc.__cause__
    return False
