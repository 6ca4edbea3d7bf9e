"""
Test suite for registry module

Tests id assignment, lookup and creation-order listing.
"""

import threading
import pytest
from decimal import Decimal

from bank_ledger.accounts import AccountKind
from bank_ledger.config import LedgerConfig
from bank_ledger.errors import AccountNotFoundError, InvalidAccountTermsError
from bank_ledger.events import EventDispatcher, LedgerEvent
from bank_ledger.ledger import EntryType
from bank_ledger.registry import AccountRegistry, build_terms, seed_sample_accounts


@pytest.fixture
def registry():
    return AccountRegistry()


class TestAccountCreation:
    """Test creating accounts through the registry"""

    def test_scenario_ids_and_lookup(self, registry):
        """Test sequential ids with kind prefixes"""
        savings = registry.create(AccountKind.SAVINGS, "John Doe", Decimal('1000.00'), Decimal('2.5'))
        checking = registry.create(AccountKind.CHECKING, "Jane Smith", Decimal('500.00'), Decimal('1000.00'))

        assert savings.id == "SAV1001"
        assert checking.id == "CHK1002"
        assert registry.find("SAV1001") is savings
        assert registry.find("XXX") is None

    def test_kind_accepts_string_value(self, registry):
        account = registry.create("checking", "Jane", "10", "50")

        assert account.kind == AccountKind.CHECKING
        assert account.kind_parameter == Decimal('50.00')

    def test_standard_accounts_use_acc_prefix(self, registry):
        account = registry.create(AccountKind.STANDARD, "Plain", Decimal('10'))

        assert account.id == "ACC1001"
        assert account.kind_parameter is None

    def test_convenience_creators(self, registry):
        savings = registry.open_savings("A", Decimal('200'), Decimal('1.5'))
        checking = registry.open_checking("B", Decimal('0'), Decimal('250'))

        assert savings.kind == AccountKind.SAVINGS
        assert checking.kind == AccountKind.CHECKING
        assert checking.history() == ()

    def test_negative_initial_balance_is_accepted(self, registry):
        """Test that a negative opening balance is kept without an entry"""
        account = registry.open_checking("Debtor", Decimal('-20.00'), Decimal('100'))

        assert account.balance() == Decimal('-20.00')
        assert account.history() == ()

    def test_opening_deposit_entry(self, registry):
        account = registry.open_savings("Saver", Decimal('250.00'), Decimal('2'))

        assert [e.entry_type for e in account.history()] == [EntryType.DEPOSIT]

    def test_invalid_creation_requests(self, registry):
        """Test validation errors and that no id is consumed"""
        with pytest.raises(InvalidAccountTermsError, match="Unknown account kind"):
            registry.create("brokerage", "X", Decimal('1'))

        with pytest.raises(InvalidAccountTermsError, match="holder name is required"):
            registry.create(AccountKind.SAVINGS, "   ", Decimal('1'), Decimal('1'))

        with pytest.raises(InvalidAccountTermsError, match="overdraft_limit is required"):
            registry.create(AccountKind.CHECKING, "X", Decimal('1'))

        with pytest.raises(InvalidAccountTermsError, match="cannot be negative"):
            registry.open_savings("X", Decimal('1'), Decimal('-2'))

        assert len(registry) == 0
        assert registry.open_savings("Y", Decimal('1'), Decimal('1')).id == "SAV1001"

    def test_first_sequence_from_config(self):
        registry = AccountRegistry(config=LedgerConfig(first_account_sequence=5000))

        assert registry.open_savings("Z", Decimal('1'), Decimal('1')).id == "SAV5000"

    def test_explicit_first_sequence(self):
        registry = AccountRegistry(first_sequence=1)

        assert registry.open_checking("Z", Decimal('1'), Decimal('1')).id == "CHK1"


class TestLookup:
    """Test lookup and listing"""

    def test_get_raises_for_unknown_id(self, registry):
        with pytest.raises(AccountNotFoundError, match="Account XXX not found") as exc_info:
            registry.get("XXX")

        assert exc_info.value.to_dict() == {
            "error": "ACCOUNT_NOT_FOUND",
            "message": "Account XXX not found",
            "details": {"account_id": "XXX"}
        }

    def test_lookup_is_exact_match(self, registry):
        registry.open_savings("John", Decimal('100'), Decimal('1'))

        assert registry.find("sav1001") is None
        assert registry.find("SAV100") is None
        assert "SAV1001" in registry
        assert "SAV100" not in registry

    def test_list_preserves_creation_order(self, registry):
        registry.open_checking("First", Decimal('10'), Decimal('0'))
        registry.open_savings("Second", Decimal('20'), Decimal('1'))
        registry.create(AccountKind.STANDARD, "Third", Decimal('30'))

        summaries = registry.list()

        assert [s.account_id for s in summaries] == ["CHK1001", "SAV1002", "ACC1003"]
        assert [s.holder_name for s in summaries] == ["First", "Second", "Third"]
        assert summaries[1].kind == AccountKind.SAVINGS
        assert summaries[2].balance == Decimal('30.00')
        assert [a.id for a in registry] == ["CHK1001", "SAV1002", "ACC1003"]

    def test_empty_registry(self, registry):
        assert registry.list() == []
        assert len(registry) == 0


class TestRegistryEvents:

    def test_account_opened_event_and_shared_dispatcher(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.subscribe_all(received.append)
        registry = AccountRegistry(dispatcher=dispatcher)

        account = registry.open_savings("John", Decimal('150'), Decimal('1'))
        account.deposit(Decimal('5'))

        assert [e.event_type for e in received] == [
            LedgerEvent.ACCOUNT_OPENED, LedgerEvent.DEPOSIT_POSTED
        ]
        assert received[0].data["kind"] == "savings"
        assert received[0].account_id == "SAV1001"


class TestConcurrentCreation:

    def test_ids_are_unique_under_contention(self, registry):
        def worker():
            for _ in range(25):
                registry.open_checking("Racer", Decimal('1'), Decimal('1'))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = [s.account_id for s in registry.list()]
        assert len(ids) == 200
        assert len(set(ids)) == 200
        assert registry.next_sequence == 1201


class TestHelpers:

    def test_build_terms(self):
        assert build_terms(AccountKind.SAVINGS, "2.5").interest_rate_percent == Decimal('2.5')
        assert build_terms(AccountKind.CHECKING, 100).overdraft_limit == Decimal('100.00')
        assert build_terms(AccountKind.STANDARD).parameter is None

    def test_seed_sample_accounts(self, registry):
        john, jane = seed_sample_accounts(registry)

        assert (john.id, john.holder_name, john.balance()) == ("SAV1001", "John Doe", Decimal('1000.00'))
        assert john.kind_parameter == Decimal('2.5')
        assert (jane.id, jane.holder_name, jane.balance()) == ("CHK1002", "Jane Smith", Decimal('500.00'))
        assert jane.kind_parameter == Decimal('1000.00')
