"""
Shared-Expense Balance Engine

This module provides:
- Pairwise running balances between two users over one-on-one records
- Group debt ledgers with per-pair netting of opposite debts
- Per-member totals, owes and owed-by summaries
- An in-memory record store and an authorisation-aware service layer
"""

from .engine import (
    DebtLedger,
    compute_group_ledger,
    compute_pairwise_balance,
    is_involved,
)
from .models import (
    Expense,
    Group,
    GroupMember,
    MemberRole,
    Settlement,
    Split,
    User,
)
from .service import BalanceService
from .storage import InMemoryRecordStore

__all__ = [
    "DebtLedger",
    "compute_group_ledger",
    "compute_pairwise_balance",
    "is_involved",
    "Expense",
    "Group",
    "GroupMember",
    "MemberRole",
    "Settlement",
    "Split",
    "User",
    "BalanceService",
    "InMemoryRecordStore",
]
