"""Error Hierarchy — typed, categorized exceptions for all storefront failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every route
    - Authentication failures never say which part of the credential was wrong

Design Decisions:
    - Single hierarchy with StorefrontError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Read failures are NOT errors (resources degrade to defaults); only writes raise
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
    AUTHENTICATION = "authentication"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERSISTENCE = "persistence"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_key: str | None = None
    order_id: int | None = None
    resources: list[str] | None = None
    debug_info: dict[str, Any] | None = None


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

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
            "message": self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(StorefrontError):
    """Malformed or missing required field, rejected before any mutation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class AuthenticationError(StorefrontError):
    """Missing or invalid admin credential / identity token."""
    def __init__(
        self, message: str = "Invalid token", http_status: int = 403,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message,
            "UNAUTHORIZED" if http_status == 401 else "FORBIDDEN",
            ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, http_status,
        )


class InsufficientPointsError(StorefrontError):
    """Redemption requested with a balance below the reward cost."""
    def __init__(self, points: int, cost: int, context: ErrorContext | None = None):
        super().__init__(
            f"Not enough points: {points}/{cost}",
            "INSUFFICIENT_POINTS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.INFO, context, 400,
        )
        self.points = points
        self.cost = cost


class ResourceNotFoundError(StorefrontError):
    """Requested order, product or user does not exist."""
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


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(StorefrontError):
    """One or more resource writes failed; siblings were still attempted."""
    def __init__(
        self, message: str, resources: list[str], context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resources = resources
        super().__init__(
            f"Persistence failed for {', '.join(resources)}: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.resources = resources


class ConfigurationError(StorefrontError):
    """Required configuration missing at startup (e.g. bot secret)."""
    def __init__(self, message: str, setting: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.setting = setting
