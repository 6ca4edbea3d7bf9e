"""
Test suite for ledger module

Tests immutable ledger entries and the append-only account ledger.
"""

import dataclasses
import pytest
from decimal import Decimal
from datetime import datetime

from bank_ledger.ledger import AccountLedger, EntryType, LedgerEntry


class TestLedgerEntry:
    """Test LedgerEntry value type"""

    def test_entry_creation(self):
        """Test creating an entry with defaults"""
        entry = LedgerEntry(EntryType.DEPOSIT, Decimal('100.00'), Decimal('100.00'))

        assert entry.entry_type == EntryType.DEPOSIT
        assert entry.amount == Decimal('100.00')
        assert entry.balance_after == Decimal('100.00')
        assert isinstance(entry.timestamp, datetime)
        assert entry.timestamp.tzinfo is not None
        assert len(entry.entry_id) > 0
        assert entry.entry_type.is_credit

    def test_entry_is_immutable(self):
        """Test that entries cannot be modified after creation"""
        entry = LedgerEntry(EntryType.WITHDRAW, Decimal('10.00'), Decimal('90.00'))

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.amount = Decimal('20.00')

    def test_negative_amount_rejected(self):
        """Test that amounts must be non-negative"""
        with pytest.raises(ValueError, match="cannot be negative"):
            LedgerEntry(EntryType.WITHDRAW, Decimal('-1.00'), Decimal('0.00'))

    def test_fee_entry_may_carry_negative_balance(self):
        """Test that balance_after is not constrained"""
        entry = LedgerEntry(EntryType.OVERDRAFT_FEE, Decimal('35.00'), Decimal('-135.00'))

        assert entry.balance_after == Decimal('-135.00')
        assert not entry.entry_type.is_credit

    def test_to_dict(self):
        """Test serialization to strings"""
        entry = LedgerEntry(EntryType.INTEREST, Decimal('2.50'), Decimal('102.50'))
        data = entry.to_dict()

        assert data['entry_type'] == "INTEREST"
        assert data['amount'] == "2.50"
        assert data['balance_after'] == "102.50"
        assert data['entry_id'] == entry.entry_id
        assert datetime.fromisoformat(data['timestamp']) == entry.timestamp


class TestAccountLedger:
    """Test append-only ledger"""

    def test_empty_ledger(self):
        """Test a fresh ledger"""
        ledger = AccountLedger()

        assert len(ledger) == 0
        assert ledger.entries() == ()

    def test_append_preserves_order(self):
        """Test that insertion order is kept"""
        ledger = AccountLedger()
        first = LedgerEntry(EntryType.DEPOSIT, Decimal('100.00'), Decimal('100.00'))
        second = LedgerEntry(EntryType.WITHDRAW, Decimal('40.00'), Decimal('60.00'))

        ledger.append(first)
        ledger.append(second)

        assert ledger.entries() == (first, second)

    def test_append_multiple_entries_in_one_step(self):
        """Test appending a withdrawal and its fee together"""
        ledger = AccountLedger()
        withdrawal = LedgerEntry(EntryType.WITHDRAW, Decimal('600.00'), Decimal('-100.00'))
        fee = LedgerEntry(EntryType.OVERDRAFT_FEE, Decimal('35.00'), Decimal('-135.00'))

        ledger.append(withdrawal, fee)

        assert len(ledger) == 2
        assert ledger.entries() == (withdrawal, fee)

    def test_append_requires_entries(self):
        """Test that an empty append is rejected"""
        ledger = AccountLedger()

        with pytest.raises(ValueError, match="At least one ledger entry"):
            ledger.append()

    def test_entries_view_is_a_snapshot(self):
        """Test that returned views do not change after later appends"""
        ledger = AccountLedger()
        ledger.append(LedgerEntry(EntryType.DEPOSIT, Decimal('5.00'), Decimal('5.00')))

        snapshot = ledger.entries()
        ledger.append(LedgerEntry(EntryType.DEPOSIT, Decimal('5.00'), Decimal('10.00')))

        assert len(snapshot) == 1
        assert len(ledger.entries()) == 2
