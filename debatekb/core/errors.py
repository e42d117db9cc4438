"""Error Hierarchy — typed, categorized exceptions for all debatekb failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Fatal errors (migration, unsupported snapshot) are CRITICAL and always propagate
    - Per-item import failures are never raised out of the merge engine: they become
      MergeReport data
    - to_response() produces the REST envelope; no internal details in messages

Design Decisions:
    - Single hierarchy with DebateKBError base: FastAPI global handler catches all
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    MIGRATION = "migration"
    SNAPSHOT = "snapshot"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_type: str | None = None
    entity_id: str | None = None
    store_version: int | None = None
    debug_info: dict[str, Any] | None = None


class DebateKBError(Exception):
    """Base exception for all debatekb errors."""

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
                    "entity_type": self.context.entity_type,
                    "entity_id": self.context.entity_id,
                    "store_version": self.context.store_version,
                },
            }
        }


# ─── Validation / Domain Errors (400-level) ─────────────────────

class EntityValidationError(DebateKBError, ValueError):
    """Entity field rejected at construction/update, before reaching the store."""
    def __init__(
        self, message: str, field_name: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field_name = field_name


class ResourceNotFoundError(DebateKBError):
    """Requested entity does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(entity_type=resource_type, entity_id=resource_id)
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class DanglingReferenceError(DebateKBError):
    """Entity references a parent that does not exist locally."""
    def __init__(
        self, message: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "DANGLING_REFERENCE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class DuplicateLabelError(DebateKBError):
    """Tag label already in use."""
    def __init__(self, label: str, context: ErrorContext | None = None):
        super().__init__(
            f"Tag label '{label}' already exists",
            "DUPLICATE_LABEL", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.label = label


class DuplicateIdError(DebateKBError):
    """Entity created with an id that is already taken."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(entity_type=resource_type, entity_id=resource_id)
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            "DUPLICATE_ID", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class TransferInProgressError(DebateKBError):
    """An import (or export) is already running against this store."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Another {operation} is already running",
            "TRANSFER_IN_PROGRESS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.operation = operation


# ─── Fatal Errors ───────────────────────────────────────────────

class SnapshotFormatError(DebateKBError):
    """Snapshot bytes are not a decodable snapshot document."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid snapshot: {message}",
            "SNAPSHOT_FORMAT_INVALID", ErrorCategory.SNAPSHOT,
            ErrorSeverity.CRITICAL, context, 400,
        )


class UnsupportedSnapshotVersionError(DebateKBError):
    """Snapshot declares a format version this engine does not support."""
    def __init__(
        self, found: str | None, supported: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Unsupported snapshot format version: {found!r} (supported: {supported!r})",
            "SNAPSHOT_VERSION_UNSUPPORTED", ErrorCategory.SNAPSHOT,
            ErrorSeverity.CRITICAL, context, 422,
        )
        self.found = found
        self.supported = supported


class MigrationError(DebateKBError):
    """Store could not be brought to the expected schema version."""
    def __init__(
        self,
        message: str,
        from_version: int,
        failed_step: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(store_version=from_version)
        super().__init__(
            message, "MIGRATION_FAILED", ErrorCategory.MIGRATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.from_version = from_version
        self.failed_step = failed_step


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DebateKBError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
