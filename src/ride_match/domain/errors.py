# ride_match/domain/errors.py


class RideMatchError(Exception):
    """Base class for caller-facing errors. `code` is stable and safe to expose."""

    code = "error"


class InvalidInput(RideMatchError, ValueError):
    """Raised when a field is missing or ill-formed at a creation endpoint."""

    code = "invalid_body"


class InvalidCapacity(InvalidInput):
    """Raised when an offer is created with fewer than one seat."""

    code = "invalid_capacity"


class UnknownDriver(RideMatchError, LookupError):
    """Raised when an offer references a user that is not a registered driver."""

    code = "unknown_driver"


class UnknownPassenger(RideMatchError, LookupError):
    """Raised when a request references a user that is not a registered passenger."""

    code = "unknown_passenger"


class QueueFull(RideMatchError):
    """Raised when the request queue is at capacity; the request is dropped."""

    code = "queue_full"


class NotFound(RideMatchError, LookupError):
    code = "not_found"


class NoPath(RideMatchError):
    code = "no_path"


class PathTooLong(RideMatchError):
    """Raised when a shortest path has more places than `max_path_length`."""

    code = "path_too_long"
