"""
Account Ledger Module

Immutable ledger entries and the append-only log each account owns.
Every entry records the balance after it was applied, so the log alone
reconstructs the full balance history without replaying amounts.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Dict, Tuple
from enum import Enum
import threading
import uuid


class EntryType(Enum):
    """Balance-affecting events"""
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    INTEREST = "INTEREST"
    OVERDRAFT_FEE = "OVERDRAFT_FEE"

    @property
    def is_credit(self) -> bool:
        """Check if this kind of entry increases the balance"""
        return self in (EntryType.DEPOSIT, EntryType.INTEREST)


@dataclass(frozen=True)
class LedgerEntry:
    """
    One balance-affecting event
    Amount is always non-negative; the direction comes from the entry type
    """
    entry_type: EntryType
    amount: Decimal
    balance_after: Decimal
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entry_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Ledger entry amount cannot be negative: {self.amount}")

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for serialization"""
        return {
            "entry_id": self.entry_id,
            "entry_type": self.entry_type.value,
            "amount": str(self.amount),
            "balance_after": str(self.balance_after),
            "timestamp": self.timestamp.isoformat()
        }


class AccountLedger:
    """
    Append-only sequence of ledger entries
    Insertion order is chronological order. Entries are never removed.
    """

    def __init__(self):
        self._entries = []
        self._lock = threading.Lock()

    def append(self, *entries: LedgerEntry) -> None:
        """
        Append one or more entries as a single step

        Readers see either all of the given entries or none of them.
        """
        if not entries:
            raise ValueError("At least one ledger entry is required")

        with self._lock:
            # Rebind, never extend in place: readers hold the old list or the new one
            self._entries = self._entries + list(entries)

    def entries(self) -> Tuple[LedgerEntry, ...]:
        """Read-only view of all entries in append order"""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

