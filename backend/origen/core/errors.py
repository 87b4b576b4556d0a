"""Error Hierarchy — typed, categorized exceptions for all Origen failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - SchemaMissingError is a DatabaseError: callers that only care about "backend failed"
      catch the parent, callers that track deployment health catch the child
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with OrigenError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Not-found on "does it exist" lookups is NOT an error — gateways return None/False
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection: str | None = None
    operation: str | None = None
    username: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class OrigenError(Exception):
    """Base exception for all Origen errors."""

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
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "collection": self.context.collection,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(OrigenError):
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


class DuplicateItemError(OrigenError):
    """An item with the same code is already in the catalog."""
    def __init__(self, code: str, context: ErrorContext | None = None):
        super().__init__(
            f"Item code '{code}' already exists",
            "DUPLICATE_ITEM", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.item_code = code


class UserAlreadyExistsError(OrigenError):
    """Username already registered."""
    def __init__(self, username: str, context: ErrorContext | None = None):
        super().__init__(
            f"User '{username}' is already registered",
            "USER_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.username = username


class AdminLimitError(OrigenError):
    """Only one administrator account may exist."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An administrator account is already registered",
            "ADMIN_LIMIT_REACHED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class AuthenticationError(OrigenError):
    """Credentials rejected or no active session."""
    def __init__(self, message: str = "Invalid username or password", context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(OrigenError):
    """Gateway operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class SchemaMissingError(DatabaseError):
    """Backing table does not exist — deployment was never provisioned."""
    def __init__(self, relation: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            f"relation {relation or '<unknown>'} not found", "schema", context,
        )
        self.code = "SCHEMA_MISSING"
        self.relation = relation
