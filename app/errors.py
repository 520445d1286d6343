# app/errors.py
# Role: Error taxonomy shared by the ledger store and the HTTP layer.
#       Each error knows the HTTP status it maps to; the message is safe to show to clients.


class LedgerError(Exception):
    """Base class for all ledger failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Malformed or missing input."""

    status_code = 400


class NotFoundError(LedgerError):
    """No asset record with the requested id."""

    status_code = 404


class StorageError(LedgerError):
    """
    The database failed underneath an operation.

    The message stays generic; driver details only go to the log.
    """

    status_code = 500
