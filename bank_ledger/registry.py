"""
Account Registry Module

Owns every account, assigns identifiers and provides lookup. Identifiers
are a kind prefix followed by a sequence number that only ever increases,
so an id is never reused.
"""

from decimal import Decimal
from typing import Dict, Iterator, List, Optional
import threading

from .accounts import (
    Account, AccountKind, AccountSummary, AccountTerms,
    CheckingTerms, SavingsTerms, StandardTerms
)
from .amounts import ZERO, AmountLike
from .config import LedgerConfig, get_config
from .errors import AccountNotFoundError, InvalidAccountTermsError
from .events import EventDispatcher, EventPayload, LedgerEvent
from .logging_config import get_logger, log_action


ID_PREFIXES = {
    AccountKind.SAVINGS: "SAV",
    AccountKind.CHECKING: "CHK",
    AccountKind.STANDARD: "ACC",
}

logger = get_logger("bank_ledger.registry")


def build_terms(kind: AccountKind, kind_param: Optional[AmountLike] = None) -> AccountTerms:
    """
    Build the variant terms for a kind of account

    Args:
        kind: Account kind
        kind_param: Interest rate percent for savings, overdraft limit for checking

    Raises:
        InvalidAccountTermsError: If the parameter is missing or unusable
    """
    if kind is AccountKind.STANDARD:
        return StandardTerms()

    if kind_param is None:
        name = "interest_rate_percent" if kind is AccountKind.SAVINGS else "overdraft_limit"
        raise InvalidAccountTermsError(f"{name} is required for {kind.value} accounts", kind=kind.value)

    if kind is AccountKind.SAVINGS:
        return SavingsTerms(interest_rate_percent=kind_param)
    return CheckingTerms(overdraft_limit=kind_param)


class AccountRegistry:
    """
    Bank: the owning collection of accounts

    Accounts are kept in creation order. One event dispatcher is shared by
    the registry and every account it opens.
    """

    def __init__(
        self,
        first_sequence: Optional[int] = None,
        dispatcher: Optional[EventDispatcher] = None,
        config: Optional[LedgerConfig] = None
    ):
        config = config or get_config()
        self.next_sequence = first_sequence if first_sequence is not None else config.first_account_sequence
        self.dispatcher = dispatcher or EventDispatcher()
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.Lock()

    def create(
        self,
        kind: AccountKind,
        holder_name: str,
        initial_balance: AmountLike = ZERO,
        kind_param: Optional[AmountLike] = None
    ) -> Account:
        """
        Open a new account

        A positive initial balance is recorded as an opening deposit. A zero
        or negative one is accepted as the balance without a ledger entry.

        Args:
            kind: Account kind (or its string value)
            holder_name: Name of the account holder
            initial_balance: Opening balance
            kind_param: Interest rate percent (savings) or overdraft limit (checking)

        Returns:
            The new Account

        Raises:
            InvalidAccountTermsError: Unknown kind, blank holder or bad parameter
            InvalidAmountError: If the opening balance is not a number
        """
        try:
            kind = AccountKind(kind)
        except ValueError:
            raise InvalidAccountTermsError(f"Unknown account kind: {kind}", kind=str(kind))

        holder_name = (holder_name or "").strip()
        if not holder_name:
            raise InvalidAccountTermsError("Account holder name is required")

        terms = build_terms(kind, kind_param)

        with self._lock:
            account_id = f"{ID_PREFIXES[kind]}{self.next_sequence}"
            account = Account(
                account_id=account_id,
                holder_name=holder_name,
                terms=terms,
                initial_balance=initial_balance,
                dispatcher=self.dispatcher
            )
            self.next_sequence += 1
            self._accounts[account_id] = account

        if account.initial_balance < ZERO:
            log_action(
                logger, "warning",
                f"Account {account_id} opened with negative balance {account.initial_balance}",
                action="open_account", resource=account_id
            )

        log_action(
            logger, "info",
            f"{kind.value.capitalize()} account {account_id} created for {holder_name}",
            action="open_account",
            resource=account_id,
            extra={
                "kind": kind.value,
                "initial_balance": str(account.initial_balance),
                "kind_parameter": None if terms.parameter is None else str(terms.parameter)
            }
        )
        self.dispatcher.publish(EventPayload(LedgerEvent.ACCOUNT_OPENED, account_id, {
            "kind": kind.value,
            "holder_name": holder_name,
            "initial_balance": str(account.initial_balance)
        }))
        return account

    def open_savings(self, holder_name: str, initial_balance: AmountLike,
                     interest_rate_percent: AmountLike) -> Account:
        """Open a savings account"""
        return self.create(AccountKind.SAVINGS, holder_name, initial_balance, interest_rate_percent)

    def open_checking(self, holder_name: str, initial_balance: AmountLike,
                      overdraft_limit: AmountLike) -> Account:
        """Open a checking account"""
        return self.create(AccountKind.CHECKING, holder_name, initial_balance, overdraft_limit)

    def find(self, account_id: str) -> Optional[Account]:
        """Exact-match lookup, None if absent"""
        return self._accounts.get(account_id)

    def get(self, account_id: str) -> Account:
        """Exact-match lookup that raises when the account does not exist"""
        account = self.find(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found", account_id=account_id)
        return account

    def list(self) -> List[AccountSummary]:
        """Summaries of all accounts in creation order"""
        with self._lock:
            accounts = list(self._accounts.values())
        return [account.summary() for account in accounts]

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __iter__(self) -> Iterator[Account]:
        with self._lock:
            return iter(list(self._accounts.values()))


def seed_sample_accounts(registry: AccountRegistry) -> List[Account]:
    """Create the two demonstration accounts"""
    return [
        registry.open_savings("John Doe", Decimal('1000.00'), Decimal('2.5')),
        registry.open_checking("Jane Smith", Decimal('500.00'), Decimal('1000.00')),
    ]
