class ServiceError(Exception):
    status = 400

    def __init__(self, code="SERVICE_ERROR", message="Service error", details=None, status=None):
        self.code = code
        self.message = message
        self.details = details or {}
        if status is not None:
            self.status = status
        super().__init__(message)


class LedgerError(ServiceError):
    """Base for the wallet ledger taxonomy; subclasses fix code and status."""

    code = "LEDGER_ERROR"
    default_message = "Ledger error"

    def __init__(self, message=None, details=None):
        super().__init__(self.code, message or self.default_message, details)


class InvalidAmount(LedgerError):
    code = "INVALID_AMOUNT"
    default_message = "Amount must be greater than zero"


class InvalidTransactionType(LedgerError):
    code = "INVALID_TRANSACTION_TYPE"
    status = 422
    default_message = "Unknown transaction type"


class InsufficientFunds(LedgerError):
    code = "INSUFFICIENT_FUNDS"
    default_message = "Not enough balance"


class UnknownUser(LedgerError):
    code = "UNKNOWN_USER"
    status = 404
    default_message = "No wallet exists for this user"


class DuplicateAccount(LedgerError):
    code = "DUPLICATE_ACCOUNT"
    status = 409
    default_message = "Account already provisioned"


class NotFound(LedgerError):
    code = "NOT_FOUND"
    status = 404
    default_message = "Resource not found"


class InvalidStateTransition(LedgerError):
    code = "INVALID_STATE"
    status = 409
    default_message = "Invalid state transition"


class Conflict(LedgerError):
    # Transient store contention that survived every retry.
    code = "TRANSIENT_CONFLICT"
    status = 503
    default_message = "The request conflicted with a concurrent update, please retry"
