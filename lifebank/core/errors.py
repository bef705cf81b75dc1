"""Error Hierarchy — typed, categorized exceptions for all ledger failure modes.

Invariants:
    - Every error has a code (str), ledger_code (int), category (ErrorCategory),
      severity (ErrorSeverity) and http_status
    - Domain errors (400-409) are caller-correctable; infrastructure errors (503) are critical
    - to_response() produces the REST envelope
    - ledger_code values match the numeric codes published by the on-chain contracts
    - Schema rejections (InvalidInputError) and unexpected failures (InternalError) share
      the same envelope; both use the contracts' generic code 12

Design Decisions:
    - Single hierarchy with LifebankError base: FastAPI global handler catches all
    - Pure validators RETURN error instances (never raise); services raise them, so the
      same error object flows from core verdict to HTTP envelope
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    """High-level error groups: the kinds a caller can branch on."""
    LIFECYCLE = "lifecycle"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STATE = "state"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    domain: str | None = None
    entity_id: int | str | None = None
    caller: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class LifebankError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        ledger_code: int = 12,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.ledger_code = ledger_code

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "ledger_code": self.ledger_code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "domain": self.context.domain,
                    "entity_id": self.context.entity_id,
                },
            }
        }


# ─── Lifecycle Errors ───────────────────────────────────────────

class AlreadyInitializedError(LifebankError):
    """initialize() called on a domain that already has an admin."""
    def __init__(self, domain: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(domain=domain)
        super().__init__(
            f"The {domain} ledger is already initialized",
            "ALREADY_INITIALIZED", ErrorCategory.LIFECYCLE,
            ErrorSeverity.WARNING, ctx, 409, ledger_code=0,
        )


class NotInitializedError(LifebankError):
    """Operation requires an admin but initialize() was never called."""
    def __init__(self, domain: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(domain=domain)
        super().__init__(
            f"The {domain} ledger has not been initialized",
            "NOT_INITIALIZED", ErrorCategory.LIFECYCLE,
            ErrorSeverity.ERROR, ctx, 409, ledger_code=1,
        )


# ─── Authorization Errors ───────────────────────────────────────

class UnauthorizedError(LifebankError):
    """Verified caller is not the identity the operation requires."""
    def __init__(self, caller: str, required: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(caller=caller)
        super().__init__(
            f"Caller '{caller}' is not authorized; operation requires {required}",
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, ctx, 403, ledger_code=2,
        )
        self.required = required


class NotAuthorizedBloodBankError(LifebankError):
    """Bank is not on the unit registry allow-list."""
    def __init__(self, bank_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(caller=bank_id)
        super().__init__(
            f"Blood bank '{bank_id}' is not authorized to register units",
            "NOT_AUTHORIZED_BLOOD_BANK", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, ctx, 403, ledger_code=32,
        )


class NotAuthorizedHospitalError(LifebankError):
    """Hospital is not on the request ledger allow-list."""
    def __init__(self, hospital_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(caller=hospital_id)
        super().__init__(
            f"Hospital '{hospital_id}' is not authorized to create requests",
            "NOT_AUTHORIZED_HOSPITAL", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, ctx, 403, ledger_code=32,
        )


# ─── Validation Errors ──────────────────────────────────────────

class InvalidQuantityError(LifebankError):
    """quantity_ml outside the domain's accepted range."""
    def __init__(
        self, quantity_ml: int, minimum: int, maximum: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Quantity {quantity_ml} ml is outside the accepted range "
            f"[{minimum}, {maximum}] ml",
            "INVALID_QUANTITY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, ledger_code=16,
        )
        self.quantity_ml = quantity_ml


class InvalidExpirationError(LifebankError):
    """Unit expiration outside the shelf-life window."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid expiration: {reason}",
            "INVALID_EXPIRATION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, ledger_code=17,
        )
        self.reason = reason


class InvalidRequiredByError(LifebankError):
    """Request deadline outside the urgency lead-time window."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid required_by: {reason}",
            "INVALID_REQUIRED_BY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, ledger_code=17,
        )
        self.reason = reason


class InvalidDeliveryAddressError(LifebankError):
    """Empty or blank delivery address."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Delivery address must not be empty",
            "INVALID_DELIVERY_ADDRESS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, ledger_code=19,
        )


class InvalidInputError(LifebankError):
    """Request payload failed schema validation before reaching the ledger."""
    def __init__(
        self, details: list[dict[str, str]], domain: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(domain=domain)
        super().__init__(
            "Invalid request data",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400, ledger_code=12,
        )
        self.details = details

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["details"] = self.details
        return body


# ─── Lookup Errors ──────────────────────────────────────────────

class ResourceNotFoundError(LifebankError):
    """Requested record does not exist."""
    def __init__(
        self, resource_type: str, resource_id: int, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(entity_id=resource_id)
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404, ledger_code=21,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── State Errors ───────────────────────────────────────────────

class InvalidStatusTransitionError(LifebankError):
    """Status change not permitted by the state machine."""
    def __init__(self, old_status: str, new_status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot transition from '{old_status}' to '{new_status}'",
            "INVALID_STATUS_TRANSITION", ErrorCategory.STATE,
            ErrorSeverity.ERROR, context, 409, ledger_code=41,
        )
        self.old_status = old_status
        self.new_status = new_status


class ExpiredError(LifebankError):
    """Deadline already passed at the time of the operation."""
    def __init__(self, deadline: int, now: int, context: ErrorContext | None = None):
        super().__init__(
            f"Deadline {deadline} has passed (now {now})",
            "EXPIRED", ErrorCategory.STATE,
            ErrorSeverity.ERROR, context, 409, ledger_code=22,
        )
        self.deadline = deadline
        self.now = now


class CannotCancelRequestError(LifebankError):
    """Cancellation attempted outside pending/approved."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Request in status '{status}' cannot be cancelled",
            "CANNOT_CANCEL_REQUEST", ErrorCategory.STATE,
            ErrorSeverity.ERROR, context, 409, ledger_code=42,
        )
        self.status = status


class DuplicateRecordError(LifebankError):
    """A record or ledger entry already occupies the key being created."""
    def __init__(
        self, resource_type: str, resource_id: int | str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(entity_id=resource_id)
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            "DUPLICATE_RECORD", ErrorCategory.STATE,
            ErrorSeverity.CRITICAL, ctx, 409, ledger_code=24,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LifebankError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503, ledger_code=12,
        )
        self.operation = operation


class InternalError(LifebankError):
    """Unexpected failure. The envelope never carries the underlying exception text."""
    def __init__(self, domain: str | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext(domain=domain)
        super().__init__(
            "An unexpected error occurred",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 500, ledger_code=12,
        )
