"""Error taxonomy shared by the core and mapped to HTTP statuses in app.py."""


class TrackerError(Exception):
    """Base class for every error the core raises on purpose."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Bad or missing input, including the off-day lock."""

    status_code = 400


class NotFoundError(TrackerError):
    status_code = 404


class PermissionDenied(TrackerError):
    """The acting user's role is not allowed to perform the mutation."""

    status_code = 403


class PersistenceError(TrackerError):
    """The store could not be read or written. Not retried automatically."""

    status_code = 500


class ConflictError(PersistenceError):
    """Another writer changed the collection since it was read."""

    status_code = 409
