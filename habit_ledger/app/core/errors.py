"""
Typed errors raised by the record store and the service layer.

Services raise these instead of returning sentinel values so that the
HTTP layer can translate each kind into a status code in one place
(see ``main.create_app``).
"""


class LedgerError(Exception):
    """Base class for all habit ledger errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(LedgerError):
    """Malformed date, empty name or an inverted date range."""

    status_code = 422


class AuthError(LedgerError):
    """Credentials could not be verified."""

    status_code = 401


class NotFound(LedgerError):
    """The target record does not exist (or was deleted concurrently)."""

    status_code = 404


class DuplicateRecord(LedgerError):
    """A record with the same id is already stored."""

    status_code = 409


class StoreUnavailable(LedgerError):
    """The backing store could not be reached."""

    status_code = 503
