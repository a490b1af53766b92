"""
Custom exceptions for the booking engine.
Centralized error handling: every failure carries the HTTP status the
boundary layer should use when mapping it to a response.
"""

from typing import Any, Dict, Optional


class BookingError(Exception):
    """Base class for all booking validation failures."""

    status_code = 500
    error = "booking_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(BookingError):
    """A referenced Shop/Service/Customer/Staff record does not exist."""

    status_code = 404
    error = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity} with ID {entity_id} not found",
            {"entity": entity, "id": str(entity_id)},
        )
        self.entity = entity
        self.entity_id = entity_id


class BadRequestError(BookingError):
    """An entity exists but breaks a relationship or structural invariant."""

    status_code = 400
    error = "bad_request"


class ConflictError(BookingError):
    """Double booking, or the slot is taken on the provider side."""

    status_code = 409
    error = "conflict"


class ExternalAvailabilityError(BookingError):
    """
    Raised by the external availability adapter when the provider call fails.
    The verifier absorbs it under the fail-open policy.
    """

    status_code = 502
    error = "external_availability_error"
