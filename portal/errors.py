"""Domain errors for the venue portal and their HTTP mapping.

Routers stay thin: they catch PortalError subclasses and call
``portal_error_to_http`` instead of scattering status codes.
"""
from fastapi import HTTPException

STATUS_BAD_REQUEST = 400
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


class PortalError(Exception):
    """Base class for every error raised by portal services."""


class InvalidArgument(PortalError, ValueError):
    """Structurally invalid request (empty weekday set, missing dates, ...)."""


class MalformedRecord(PortalError, ValueError):
    """A single analytics input document with missing or invalid fields.

    Aggregation code raises this internally and substitutes a neutral value;
    it never reaches the caller.
    """


class SessionError(PortalError):
    """The caller could not be resolved to an admin with venue access."""


class VenueSelectionRequired(SessionError):
    """The admin manages several venues and did not pick one."""

    def __init__(self, venue_ids: list[str]):
        super().__init__("Multiple venues assigned; select a venue first.")
        self.venue_ids = venue_ids


class EventNotFound(PortalError):
    """No event with the given id exists for the active venue."""


class VenueNotFound(PortalError):
    """The active venue has no stored profile."""


# (exception type, status code). First match wins, so subclasses go first.
PORTAL_ERROR_RULES: list[tuple[type[PortalError], int]] = [
    (VenueSelectionRequired, STATUS_CONFLICT),
    (SessionError, STATUS_FORBIDDEN),
    (InvalidArgument, STATUS_BAD_REQUEST),
    (EventNotFound, STATUS_NOT_FOUND),
    (VenueNotFound, STATUS_NOT_FOUND),
]


def portal_error_to_http(exc: PortalError) -> HTTPException:
    """Map a PortalError into an HTTPException (500 when no rule matches)."""
    for error_type, status_code in PORTAL_ERROR_RULES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
