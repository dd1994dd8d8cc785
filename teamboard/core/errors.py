"""Error Hierarchy — typed, categorized exceptions for all Teamboard failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; integrity/infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details (constraint names, trigger names, SQL) leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TeamboardError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Core raises these directly; the shell never re-wraps them
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone
from uuid import UUID


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
    DATA_INTEGRITY = "data_integrity"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    team_id: str | None = None
    parent_id: str | None = None
    membership_id: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TeamboardError(Exception):
    """Base exception for all Teamboard errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "team_id": self.context.team_id,
                    "parent_id": self.context.parent_id,
                    "membership_id": self.context.membership_id,
                    "user_id": self.context.user_id,
                },
            }
        }


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


# ─── Domain Errors (400-level) ──────────────────────────────────

class CircularReferenceError(TeamboardError):
    """Assigning the proposed parent would make a team its own ancestor."""
    def __init__(
        self,
        team_id: UUID,
        proposed_parent_id: UUID,
        team_name: str | None = None,
        parent_name: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.team_id = str(team_id)
        ctx.parent_id = str(proposed_parent_id)
        if team_id == proposed_parent_id:
            detail = f"team '{team_name}' cannot be its own parent" if team_name \
                else "a team cannot be its own parent"
        elif team_name and parent_name:
            detail = f"'{parent_name}' is a descendant of '{team_name}'"
        else:
            detail = "the selected parent is a descendant of this team"
        super().__init__(
            "Cannot set parent team: this would create a circular reference "
            f"in the team hierarchy ({detail})",
            "CIRCULAR_REFERENCE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.team_id = team_id
        self.proposed_parent_id = proposed_parent_id


class InvalidParentError(TeamboardError):
    """Proposed parent team does not exist."""
    def __init__(self, parent_id: UUID, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.parent_id = str(parent_id)
        super().__init__(
            f"Parent team '{parent_id}' does not exist",
            "INVALID_PARENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.parent_id = parent_id


class TeamHasChildrenError(TeamboardError):
    """Deletion refused because the team still has child teams."""
    def __init__(
        self, team_id: UUID, child_count: int, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.team_id = str(team_id)
        super().__init__(
            f"Cannot delete team: it has {child_count} child team(s). "
            "Move or delete the child teams first.",
            "TEAM_HAS_CHILDREN", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.team_id = team_id
        self.child_count = child_count


class DuplicateMembershipError(TeamboardError):
    """User already holds a direct membership on the team."""
    def __init__(
        self, user_id: UUID, team_id: UUID, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.user_id = str(user_id)
        ctx.team_id = str(team_id)
        super().__init__(
            "User is already a direct member of this team",
            "DUPLICATE_MEMBERSHIP", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class DuplicateEmailError(TeamboardError):
    """Email already registered to another user."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "A user with this email already exists",
            "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.email = email


class ResourceNotFoundError(TeamboardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Data Integrity Errors (500-level) ──────────────────────────

class MalformedHierarchyError(TeamboardError):
    """Stored hierarchy is corrupt: dangling parent, duplicate id, or cycle."""
    def __init__(
        self,
        message: str,
        team_ids: list[UUID] | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        self.team_ids = list(team_ids or [])
        if self.team_ids:
            ctx.team_id = _str_or_none(self.team_ids[0])
            ctx.debug_info = {"team_ids": [str(t) for t in self.team_ids]}
        super().__init__(
            message, "MALFORMED_HIERARCHY", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.CRITICAL, ctx, 500,
        )


class DanglingMembershipError(TeamboardError):
    """Membership references a user record that does not exist."""
    def __init__(
        self,
        membership_id: UUID,
        user_id: UUID,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.membership_id = str(membership_id)
        ctx.user_id = str(user_id)
        super().__init__(
            f"Membership '{membership_id}' references missing user '{user_id}'",
            "DANGLING_MEMBERSHIP", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.membership_id = membership_id
        self.user_id = user_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TeamboardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
