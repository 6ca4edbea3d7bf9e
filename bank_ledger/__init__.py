"""
Account Ledger

In-memory registry of savings and checking accounts, each with a
strictly consistent balance and an append-only ledger, using Decimal for
every monetary value.
"""

__version__ = "1.0.0"
