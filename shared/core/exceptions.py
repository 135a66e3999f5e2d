from shared.utils.app_status_code import AppStatusCode


class LedgerError(Exception):
    """Base class for errors raised by the contract ledger."""

    http_status = 500
    status_code = AppStatusCode.OPERATION_FAILED

    def __init__(self, message: str, status_code: str | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(LedgerError):
    http_status = 404
    status_code = AppStatusCode.NOT_FOUND


class ValidationError(LedgerError):
    http_status = 400
    status_code = AppStatusCode.REQUIRED_VALIDATION_ERROR


class StoreError(LedgerError):
    http_status = 500
    status_code = AppStatusCode.OPERATION_ERROR
