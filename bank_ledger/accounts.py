"""
Account Management Module

Accounts hold an identity, a balance and an append-only ledger. The kind of
account is a tagged variant (standard, savings, checking) carrying its own
parameters; withdrawal policy is chosen by dispatching on that tag, after
which every operation goes through one shared mutate-and-log step.

Balances always equal the balance_after of the latest ledger entry, or the
opening balance when nothing has been recorded yet.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, List, Optional, Tuple, Union
from enum import Enum
from contextlib import contextmanager
import threading

from .amounts import (
    ZERO, AmountLike, exact_arithmetic, format_amount, quantize, require_positive, to_amount
)
from .errors import (
    BelowMinimumBalanceError, InsufficientFundsError, InvalidAccountTermsError,
    InvalidAmountError, LedgerError, OverdraftLimitExceededError, UnsupportedOperationError
)
from .events import EventDispatcher, EventPayload, LedgerEvent
from .ledger import AccountLedger, EntryType, LedgerEntry
from .logging_config import get_logger, log_action


MIN_BALANCE = Decimal('100.00')   # Savings floor after any withdrawal
OVERDRAFT_FEE = Decimal('35.00')  # Charged when a checking withdrawal goes negative

logger = get_logger("bank_ledger.accounts")


class AccountKind(Enum):
    """Behavioral kinds of account"""
    STANDARD = "standard"
    SAVINGS = "savings"
    CHECKING = "checking"


def _terms_decimal(value: AmountLike, name: str) -> Decimal:
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAccountTermsError(f"{name} must be a number", **{name: str(value)})
    if not result.is_finite():
        raise InvalidAccountTermsError(f"{name} must be a finite number", **{name: str(value)})
    if result < 0:
        raise InvalidAccountTermsError(f"{name} cannot be negative", **{name: str(value)})
    return result


@dataclass(frozen=True)
class StandardTerms:
    """Plain account: withdrawals limited to the balance"""
    kind: ClassVar[AccountKind] = AccountKind.STANDARD

    @property
    def parameter(self) -> Optional[Decimal]:
        return None


@dataclass(frozen=True)
class SavingsTerms:
    """Savings account: minimum balance, interest on demand"""
    interest_rate_percent: Decimal
    kind: ClassVar[AccountKind] = AccountKind.SAVINGS

    def __post_init__(self):
        object.__setattr__(
            self, 'interest_rate_percent',
            _terms_decimal(self.interest_rate_percent, "interest_rate_percent")
        )

    @property
    def parameter(self) -> Optional[Decimal]:
        return self.interest_rate_percent


@dataclass(frozen=True)
class CheckingTerms:
    """Checking account: overdraft up to a limit, fee when negative"""
    overdraft_limit: Decimal
    kind: ClassVar[AccountKind] = AccountKind.CHECKING

    def __post_init__(self):
        limit = _terms_decimal(self.overdraft_limit, "overdraft_limit")
        try:
            limit = quantize(limit)
        except InvalidAmountError as e:
            raise InvalidAccountTermsError(e.message, overdraft_limit=str(self.overdraft_limit))
        object.__setattr__(self, 'overdraft_limit', limit)

    @property
    def parameter(self) -> Optional[Decimal]:
        return self.overdraft_limit


AccountTerms = Union[StandardTerms, SavingsTerms, CheckingTerms]

# Postings are (entry type, non-negative amount) pairs applied in order
Posting = Tuple[EntryType, Decimal]


def _standard_withdrawal(account: 'Account', amount: Decimal) -> List[Posting]:
    balance = account.balance()
    if amount > balance:
        raise InsufficientFundsError(
            f"Insufficient funds. Current balance: {format_amount(balance)}",
            balance=str(balance), amount=str(amount)
        )
    return [(EntryType.WITHDRAW, amount)]


def _savings_withdrawal(account: 'Account', amount: Decimal) -> List[Posting]:
    balance = account.balance()
    if balance - amount < MIN_BALANCE:
        raise BelowMinimumBalanceError(
            f"Cannot withdraw. Minimum balance of {format_amount(MIN_BALANCE)} must be maintained.",
            balance=str(balance), amount=str(amount), minimum_balance=str(MIN_BALANCE)
        )
    return [(EntryType.WITHDRAW, amount)]


def _checking_withdrawal(account: 'Account', amount: Decimal) -> List[Posting]:
    balance = account.balance()
    limit = account.terms.overdraft_limit
    if amount > balance + limit:
        raise OverdraftLimitExceededError(
            "Transaction declined. Exceeds overdraft limit.",
            balance=str(balance), amount=str(amount), overdraft_limit=str(limit)
        )
    postings = [(EntryType.WITHDRAW, amount)]
    if balance - amount < ZERO:
        postings.append((EntryType.OVERDRAFT_FEE, OVERDRAFT_FEE))
    return postings


WITHDRAWAL_POLICIES: Dict[AccountKind, Callable[['Account', Decimal], List[Posting]]] = {
    AccountKind.STANDARD: _standard_withdrawal,
    AccountKind.SAVINGS: _savings_withdrawal,
    AccountKind.CHECKING: _checking_withdrawal,
}

_POSTED_EVENTS = {
    EntryType.DEPOSIT: LedgerEvent.DEPOSIT_POSTED,
    EntryType.WITHDRAW: LedgerEvent.WITHDRAWAL_POSTED,
    EntryType.OVERDRAFT_FEE: LedgerEvent.OVERDRAFT_FEE_CHARGED,
    EntryType.INTEREST: LedgerEvent.INTEREST_ACCRUED,
}


@dataclass(frozen=True)
class AccountSummary:
    """One row of the registry listing"""
    account_id: str
    holder_name: str
    kind: AccountKind
    balance: Decimal


@dataclass(frozen=True)
class AccountDetails:
    """Account metadata together with its kind-specific parameters"""
    account_id: str
    holder_name: str
    kind: AccountKind
    balance: Decimal
    created_at: datetime
    interest_rate_percent: Optional[Decimal] = None
    minimum_balance: Optional[Decimal] = None
    overdraft_limit: Optional[Decimal] = None
    overdraft_fee: Optional[Decimal] = None


class Account:
    """
    Bank account with its own balance and ledger

    All mutations happen through deposit, withdraw and accrue_interest.
    Each runs its checks and its ledger append under the account lock, so a
    concurrent withdrawal can never pass a check against a stale balance.
    """

    def __init__(
        self,
        account_id: str,
        holder_name: str,
        terms: Optional[AccountTerms] = None,
        initial_balance: AmountLike = ZERO,
        dispatcher: Optional[EventDispatcher] = None
    ):
        self.id = account_id
        self.holder_name = holder_name
        self.terms = terms if terms is not None else StandardTerms()
        self.created_at = datetime.now(timezone.utc)
        self.initial_balance = to_amount(initial_balance)

        self._ledger = AccountLedger()
        self._lock = threading.RLock()
        self._dispatcher = dispatcher
        self._balance = self.initial_balance

        # Non-positive opening balances are kept but leave no entry
        if self._balance > ZERO:
            self._ledger.append(LedgerEntry(EntryType.DEPOSIT, self._balance, self._balance))

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, kind={self.kind.value}, balance={self.balance()})"

    @property
    def kind(self) -> AccountKind:
        return self.terms.kind

    @property
    def kind_parameter(self) -> Optional[Decimal]:
        """Interest rate for savings, overdraft limit for checking"""
        return self.terms.parameter

    def balance(self) -> Decimal:
        """Current balance"""
        with self._lock:
            return self._balance

    def history(self) -> Tuple[LedgerEntry, ...]:
        """Full ledger in chronological order"""
        return self._ledger.entries()

    def deposit(self, amount: AmountLike) -> Decimal:
        """
        Deposit a positive amount

        Returns:
            New balance

        Raises:
            InvalidAmountError: If amount is not positive
        """
        with self._reporting_declines("deposit", amount):
            amount = require_positive(amount, "deposit")
            with self._lock:
                entries = self._apply([(EntryType.DEPOSIT, amount)])
        self._announce(entries)
        return entries[-1].balance_after

    def withdraw(self, amount: AmountLike) -> Decimal:
        """
        Withdraw under this account's policy

        Checking withdrawals that leave the balance negative also charge
        the overdraft fee; both entries are recorded as one step.

        Returns:
            Final balance, after any fee

        Raises:
            InvalidAmountError: If amount is not positive
            InsufficientFundsError: Standard account, amount exceeds balance
            BelowMinimumBalanceError: Savings account would fall below MIN_BALANCE
            OverdraftLimitExceededError: Checking account beyond its overdraft limit
        """
        with self._reporting_declines("withdraw", amount):
            amount = require_positive(amount, "withdrawal")
            policy = WITHDRAWAL_POLICIES[self.kind]
            with self._lock:
                entries = self._apply(policy(self, amount))
        self._announce(entries)
        return entries[-1].balance_after

    def accrue_interest(self) -> Decimal:
        """
        Add interest at the account's rate to the balance

        Interest is balance * rate / 100 rounded to the cent. A balance that
        is zero or negative earns nothing.

        Returns:
            Interest amount credited

        Raises:
            UnsupportedOperationError: If this is not a savings account
        """
        with self._reporting_declines("interest", None):
            if self.kind is not AccountKind.SAVINGS:
                raise UnsupportedOperationError(
                    "Interest can only be added to Savings accounts.",
                    account_kind=self.kind.value
                )
            with self._lock:
                interest = quantize(self._balance * self.terms.interest_rate_percent / 100)
                interest = max(interest, ZERO)
                entries = self._apply([(EntryType.INTEREST, interest)])
        self._announce(entries)
        return interest

    def describe(self) -> AccountDetails:
        """Account metadata for display"""
        terms = self.terms
        details = {}
        if isinstance(terms, SavingsTerms):
            details = {
                'interest_rate_percent': terms.interest_rate_percent,
                'minimum_balance': MIN_BALANCE
            }
        elif isinstance(terms, CheckingTerms):
            details = {
                'overdraft_limit': terms.overdraft_limit,
                'overdraft_fee': OVERDRAFT_FEE
            }
        return AccountDetails(
            account_id=self.id,
            holder_name=self.holder_name,
            kind=self.kind,
            balance=self.balance(),
            created_at=self.created_at,
            **details
        )

    def summary(self) -> AccountSummary:
        return AccountSummary(
            account_id=self.id,
            holder_name=self.holder_name,
            kind=self.kind,
            balance=self.balance()
        )

    def _apply(self, postings: List[Posting]) -> List[LedgerEntry]:
        """Apply postings in order and record them; caller holds the lock"""
        balance = self._balance
        entries = []
        with exact_arithmetic():
            for entry_type, amount in postings:
                if entry_type.is_credit:
                    balance = balance + amount
                else:
                    balance = balance - amount
                entries.append(LedgerEntry(entry_type, amount, balance))

        self._ledger.append(*entries)
        self._balance = balance
        return entries

    def _announce(self, entries: List[LedgerEntry]) -> None:
        for entry in entries:
            log_action(
                logger, "info",
                f"{entry.entry_type.value} {entry.amount} on {self.id}, balance {entry.balance_after}",
                action=entry.entry_type.value.lower(),
                resource=self.id,
                extra={"amount": str(entry.amount), "balance_after": str(entry.balance_after)}
            )
            self._publish(_POSTED_EVENTS[entry.entry_type], {
                "entry_id": entry.entry_id,
                "amount": str(entry.amount),
                "balance_after": str(entry.balance_after)
            })

    @contextmanager
    def _reporting_declines(self, operation: str, amount):
        try:
            yield
        except LedgerError as e:
            log_action(
                logger, "warning",
                f"{operation} declined on {self.id}: {e.message}",
                action=operation,
                resource=self.id,
                extra={"error": e.code, "amount": None if amount is None else str(amount)}
            )
            self._publish(LedgerEvent.OPERATION_DECLINED, {
                "operation": operation,
                "error": e.code,
                "message": e.message
            })
            raise

    def _publish(self, event_type: LedgerEvent, data: Dict) -> None:
        if self._dispatcher is not None:
            self._dispatcher.publish(EventPayload(event_type, self.id, data))
