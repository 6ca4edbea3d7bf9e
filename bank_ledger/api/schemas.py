"""
Pydantic schemas for API requests and responses
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from ..accounts import AccountDetails, AccountSummary
from ..ledger import LedgerEntry


def _money(value) -> Optional[str]:
    return None if value is None else str(value)


class CreateAccountRequest(BaseModel):
    kind: str = Field(..., description="Account kind (savings, checking, standard)")
    holder_name: str
    initial_balance: str = Field("0.00", description="Decimal amount as string")
    interest_rate: Optional[str] = Field(None, description="Interest rate percent, savings only")
    overdraft_limit: Optional[str] = Field(None, description="Overdraft limit, checking only")


class AmountRequest(BaseModel):
    amount: str = Field(..., description="Decimal amount as string")


class AccountDetailsModel(BaseModel):
    account_id: str
    holder_name: str
    kind: str
    balance: str
    created_at: str
    interest_rate_percent: Optional[str] = None
    minimum_balance: Optional[str] = None
    overdraft_limit: Optional[str] = None
    overdraft_fee: Optional[str] = None

    @classmethod
    def from_details(cls, details: AccountDetails) -> 'AccountDetailsModel':
        return cls(
            account_id=details.account_id,
            holder_name=details.holder_name,
            kind=details.kind.value,
            balance=str(details.balance),
            created_at=details.created_at.isoformat(),
            interest_rate_percent=_money(details.interest_rate_percent),
            minimum_balance=_money(details.minimum_balance),
            overdraft_limit=_money(details.overdraft_limit),
            overdraft_fee=_money(details.overdraft_fee)
        )


class AccountSummaryModel(BaseModel):
    account_id: str
    holder_name: str
    kind: str
    balance: str

    @classmethod
    def from_summary(cls, summary: AccountSummary) -> 'AccountSummaryModel':
        return cls(
            account_id=summary.account_id,
            holder_name=summary.holder_name,
            kind=summary.kind.value,
            balance=str(summary.balance)
        )


class LedgerEntryModel(BaseModel):
    entry_id: str
    entry_type: str
    amount: str
    balance_after: str
    timestamp: str

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> 'LedgerEntryModel':
        return cls(**entry.to_dict())


class BalanceResponse(BaseModel):
    account_id: str
    balance: str


class InterestResponse(BaseModel):
    account_id: str
    interest: str
    balance: str


class HistoryResponse(BaseModel):
    account_id: str
    entries: List[LedgerEntryModel]
