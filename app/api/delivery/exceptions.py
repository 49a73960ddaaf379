"""
Delivery domain errors.

Every error carries the HTTP status, a stable ``error_code`` and the message
shown to the customer or admin. They are converted to JSON responses by
``app.core.exception_handlers.delivery_exception_handler``.
"""
from typing import Optional

from fastapi import status


class DeliveryError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "delivery_error"
    default_message: str = "Unable to process delivery request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(DeliveryError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_input"
    default_message = "Please enter a valid 6-digit pincode"


class NoCoverageError(DeliveryError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_serviceable"
    default_message = "Delivery is not available for this pincode"

    def __init__(self, pincode: Optional[str] = None, message: Optional[str] = None):
        self.pincode = pincode
        if message is None and pincode:
            message = f"Delivery not available for pincode {pincode}"
        super().__init__(message)


class ZoneInactiveError(DeliveryError):
    """Matched a zone that is administratively disabled. Shown as not serviceable."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_serviceable"
    default_message = "Delivery is not available for this pincode"

    def __init__(self, pincode: Optional[str] = None, zone_id: Optional[int] = None, zone_number: Optional[int] = None):
        self.pincode = pincode
        self.zone_id = zone_id
        self.zone_number = zone_number
        message = f"Delivery not available for pincode {pincode}" if pincode else None
        super().__init__(message)


class UpstreamUnavailableError(DeliveryError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "upstream_unavailable"
    default_message = "Unable to check delivery availability right now, please try again later"


class ReferentialError(DeliveryError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "zone_in_use"
    default_message = "Zone still has regions assigned"


class DuplicateZoneNumberError(DeliveryError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate_zone_number"
    default_message = "A zone with this number already exists"


class RegionConflictError(DeliveryError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "region_conflict"
    default_message = "Region is already assigned to another zone"


NOT_SERVICEABLE_ERRORS = (NoCoverageError, ZoneInactiveError)
