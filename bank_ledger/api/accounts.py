"""
Account endpoints
"""

from typing import List
from fastapi import APIRouter, Depends, Request, status

from .schemas import (
    AccountDetailsModel, AccountSummaryModel, AmountRequest, BalanceResponse,
    CreateAccountRequest, HistoryResponse, InterestResponse, LedgerEntryModel
)
from ..accounts import AccountKind
from ..registry import AccountRegistry


router = APIRouter()


def get_registry(request: Request) -> AccountRegistry:
    return request.app.state.registry


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AccountDetailsModel)
async def create_account(
    request: CreateAccountRequest,
    registry: AccountRegistry = Depends(get_registry)
):
    """Open a new account"""
    kind_param = None
    if request.kind == AccountKind.SAVINGS.value:
        kind_param = request.interest_rate
    elif request.kind == AccountKind.CHECKING.value:
        kind_param = request.overdraft_limit

    account = registry.create(
        kind=request.kind,
        holder_name=request.holder_name,
        initial_balance=request.initial_balance,
        kind_param=kind_param
    )
    return AccountDetailsModel.from_details(account.describe())


@router.get("", response_model=List[AccountSummaryModel])
async def list_accounts(registry: AccountRegistry = Depends(get_registry)):
    """All accounts in creation order"""
    return [AccountSummaryModel.from_summary(s) for s in registry.list()]


@router.get("/{account_id}", response_model=AccountDetailsModel)
async def get_account(account_id: str, registry: AccountRegistry = Depends(get_registry)):
    """Get account details"""
    return AccountDetailsModel.from_details(registry.get(account_id).describe())


@router.get("/{account_id}/balance", response_model=BalanceResponse)
async def get_balance(account_id: str, registry: AccountRegistry = Depends(get_registry)):
    account = registry.get(account_id)
    return BalanceResponse(account_id=account.id, balance=str(account.balance()))


@router.get("/{account_id}/history", response_model=HistoryResponse)
async def get_history(account_id: str, registry: AccountRegistry = Depends(get_registry)):
    """Full ledger for an account"""
    account = registry.get(account_id)
    return HistoryResponse(
        account_id=account.id,
        entries=[LedgerEntryModel.from_entry(e) for e in account.history()]
    )


@router.post("/{account_id}/deposit", response_model=BalanceResponse)
async def deposit(
    account_id: str,
    request: AmountRequest,
    registry: AccountRegistry = Depends(get_registry)
):
    account = registry.get(account_id)
    balance = account.deposit(request.amount)
    return BalanceResponse(account_id=account.id, balance=str(balance))


@router.post("/{account_id}/withdraw", response_model=BalanceResponse)
async def withdraw(
    account_id: str,
    request: AmountRequest,
    registry: AccountRegistry = Depends(get_registry)
):
    account = registry.get(account_id)
    balance = account.withdraw(request.amount)
    return BalanceResponse(account_id=account.id, balance=str(balance))


@router.post("/{account_id}/interest", response_model=InterestResponse)
async def accrue_interest(account_id: str, registry: AccountRegistry = Depends(get_registry)):
    """Credit interest to a savings account"""
    account = registry.get(account_id)
    interest = account.accrue_interest()
    return InterestResponse(
        account_id=account.id,
        interest=str(interest),
        balance=str(account.balance())
    )
