from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..bookings.model import BookingConflictInfo


class DomainError(Exception):
    """Base exception for business rule violations.

    Callers can recover from these; the HTTP layer maps `code` and
    `http_status` straight into the response.
    """

    code = "DOMAIN_ERROR"
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = str(self)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class InvalidDateRangeError(ValidationError):
    """End date must be on or after start date."""

    code = "INVALID_DATE_RANGE"


class InvalidCategoryError(ValidationError):
    """Unknown leave category."""

    code = "INVALID_CATEGORY"


class InvalidIntervalError(ValidationError):
    """Start time must be before end time."""

    code = "INVALID_INTERVAL"


class NotFoundError(DomainError):
    """Entity does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class DeviceNotFoundError(NotFoundError):
    """Device not found."""


class RoomNotFoundError(NotFoundError):
    """Meeting room not found."""


class InvalidStateError(DomainError):
    """Operation is not valid from the current status."""

    code = "INVALID_STATE"
    http_status = 409

    def __init__(self, message: str = "", *, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.current_status is not None:
            out["status"] = self.current_status
        return out


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    http_status = 403


class NotOwnerError(AuthorizationError):
    """Can only operate on own request."""

    code = "NOT_OWNER"


class SelfApprovalError(AuthorizationError):
    """Cannot approve, reject or cancel-as-approver one's own request."""

    code = "SELF_APPROVAL"


class ResourceUnavailableError(DomainError):
    """Device has no available units."""

    code = "DEVICE_NOT_AVAILABLE"
    http_status = 409


DeviceNotAvailableError = ResourceUnavailableError


class BookingConflictError(DomainError):
    """Booking time conflicts with an active booking."""

    code = "BOOKING_CONFLICT"
    http_status = 409

    def __init__(self, conflict: "BookingConflictInfo", message: str = ""):
        super().__init__(
            message
            or (
                f"Room already booked {conflict.start_time:%H:%M}-{conflict.end_time:%H:%M}"
                f" by {conflict.employee_name}"
            )
        )
        self.conflict = conflict

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["conflict"] = self.conflict.to_dict()
        return out


class BookingLimitExceededError(DomainError):
    """Already holds an active booking."""

    code = "BOOKING_LIMIT_EXCEEDED"
    http_status = 409


class PersistenceError(Exception):
    """Storage failure unrelated to business rules; retry or escalate."""

    code = "INTERNAL_ERROR"
    http_status = 500
