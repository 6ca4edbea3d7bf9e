"""
Ledger Error Taxonomy

Every failure an account or the registry can report. Each error carries a
stable machine-readable code and structured details so callers can render
it without parsing messages. Errors are always raised before any mutation.
"""

from typing import Any, Dict


class LedgerError(Exception):
    """Base class for all reportable ledger failures"""

    code = "LEDGER_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        """Structured failure value for presentation layers"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidAmountError(LedgerError):
    """Deposit or withdrawal amount is not a positive number"""
    code = "INVALID_AMOUNT"


class InsufficientFundsError(LedgerError):
    """Standard withdrawal exceeds the balance"""
    code = "INSUFFICIENT_FUNDS"


class BelowMinimumBalanceError(LedgerError):
    """Savings withdrawal would breach the minimum balance"""
    code = "BELOW_MINIMUM_BALANCE"


class OverdraftLimitExceededError(LedgerError):
    """Checking withdrawal exceeds balance plus overdraft limit"""
    code = "OVERDRAFT_LIMIT_EXCEEDED"


class AccountNotFoundError(LedgerError):
    """No account registered under the given id"""
    code = "ACCOUNT_NOT_FOUND"


class InvalidAccountTermsError(LedgerError):
    """Account creation parameters are unusable"""
    code = "INVALID_ACCOUNT_TERMS"


class UnsupportedOperationError(LedgerError):
    """Operation does not apply to this kind of account"""
    code = "UNSUPPORTED_OPERATION"
