"""Error taxonomy for the Brevly service.

Every error carries the HTTP status the web layer answers with, so routes
never have to match on message text.
"""


class BrevlyError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BrevlyError):
    """Malformed input (bad URL, bad short code, bad paging)."""

    status_code = 400


class ConflictError(BrevlyError):
    """Short code already in use."""

    status_code = 409


class NotFoundError(BrevlyError):
    """Requested row does not exist."""

    status_code = 404


class EmptyReportError(NotFoundError):
    """No links exist to put in a report."""


class StorageError(BrevlyError):
    """Object storage upload failed."""

    status_code = 500


class InternalError(BrevlyError):
    """Unexpected failure. The message is safe to show to clients."""

    status_code = 500


class TransactionRetryError(Exception):
    """Store transaction lost a race and may be re-run.

    Raised for serialization failures, deadlocks and a concurrent insert of
    the same original URL. Never reaches the HTTP layer.
    """
