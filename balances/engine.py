"""Balance and debt-ledger computations.

Both entry points are pure: they read already-authorised records, never
mutate them and never touch the store. Records that do not fit the
computation (a split for a non-member, a settlement with a third party)
are skipped and logged rather than failing the whole view.
"""

import logging
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from .exceptions import InvalidArgumentError
from .models import (
    Credit,
    Debt,
    Expense,
    GroupLedgerResult,
    MemberBalance,
    PairwiseResult,
    Settlement,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def is_involved(expense: Expense, user_id: UUID) -> bool:
    """A user is involved in an expense if they paid it or hold a split in it."""
    return expense.paid_by_user_id == user_id or expense.split_for(user_id) is not None


def _by_recency(records):
    return sorted(records, key=lambda r: r.date, reverse=True)


def compute_pairwise_balance(
    self_id: UUID,
    other_id: UUID,
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
) -> PairwiseResult:
    """Running balance between two users over their one-on-one records.

    A positive balance means ``other_id`` owes ``self_id``; negative means
    ``self_id`` owes ``other_id``.
    """
    if self_id == other_id:
        raise InvalidArgumentError("Cannot query yourself")

    pair = (self_id, other_id)
    shared = [
        e for e in expenses
        if e.group_id is None
        and e.paid_by_user_id in pair
        and is_involved(e, self_id)
        and is_involved(e, other_id)
    ]
    between = [
        s for s in settlements
        if s.group_id is None and s.is_between(self_id, other_id)
    ]

    balance = ZERO
    for expense in shared:
        if expense.paid_by_user_id == self_id:
            debtor, sign = other_id, 1
        else:
            debtor, sign = self_id, -1
        split = expense.split_for(debtor)
        if split is not None and not split.paid:
            balance += sign * split.amount

    for settlement in between:
        if settlement.paid_by_user_id == self_id:
            balance += settlement.amount
        else:
            balance -= settlement.amount

    return PairwiseResult(
        balance=balance,
        expenses=_by_recency(shared),
        settlements=_by_recency(between),
    )


class DebtLedger:
    """Square who-owes-whom matrix over a fixed member index.

    ``ledger.get(a, b)`` is the amount ``a`` owes ``b``. Cells are addressed
    through a stable id -> index mapping built from the member order.
    """

    def __init__(self, member_ids: list[UUID]):
        self.member_ids = list(member_ids)
        self.index = {m: i for i, m in enumerate(self.member_ids)}
        size = len(self.member_ids)
        self.cells = [[ZERO] * size for _ in range(size)]

    def __contains__(self, user_id: UUID) -> bool:
        return user_id in self.index

    def get(self, debtor: UUID, creditor: UUID) -> Decimal:
        return self.cells[self.index[debtor]][self.index[creditor]]

    def add(self, debtor: UUID, creditor: UUID, amount: Decimal) -> None:
        self.cells[self.index[debtor]][self.index[creditor]] += amount

    def net(self) -> None:
        """Collapse opposite debts of every pair into a single direction.

        Each unordered pair is visited once (i < j). Netting is per pair
        only; chains across three or more members are left alone.
        """
        size = len(self.member_ids)
        cells = self.cells
        for i in range(size):
            for j in range(i + 1, size):
                diff = cells[i][j] - cells[j][i]
                if diff > 0:
                    cells[i][j], cells[j][i] = diff, ZERO
                elif diff < 0:
                    cells[i][j], cells[j][i] = ZERO, -diff
                else:
                    cells[i][j] = cells[j][i] = ZERO

    def is_netted(self) -> bool:
        size = len(self.member_ids)
        return all(
            self.cells[i][j] == 0 or self.cells[j][i] == 0
            for i in range(size)
            for j in range(i + 1, size)
        )

    def owes(self, member: UUID) -> list[Debt]:
        row = self.cells[self.index[member]]
        return [
            Debt(to=other, amount=row[j])
            for j, other in enumerate(self.member_ids)
            if row[j] > 0
        ]

    def owed_by(self, member: UUID) -> list[Credit]:
        col = self.index[member]
        return [
            Credit(from_=other, amount=self.cells[i][col])
            for i, other in enumerate(self.member_ids)
            if self.cells[i][col] > 0
        ]

    def to_dict(self) -> dict[UUID, dict[UUID, Decimal]]:
        """Nonzero cells only, keyed debtor -> creditor -> amount."""
        result: dict[UUID, dict[UUID, Decimal]] = {}
        for i, debtor in enumerate(self.member_ids):
            row = {
                creditor: self.cells[i][j]
                for j, creditor in enumerate(self.member_ids)
                if i != j and self.cells[i][j] != 0
            }
            if row:
                result[debtor] = row
        return result


def _validate_members(members: Iterable[UUID]) -> list[UUID]:
    member_ids = list(members)
    if not member_ids:
        raise InvalidArgumentError("Group ledger needs at least one member")
    if len(set(member_ids)) != len(member_ids):
        raise InvalidArgumentError("Group member ids must be unique")
    return member_ids


def _apply_expense(expense: Expense, totals: dict, ledger: DebtLedger) -> None:
    payer = expense.paid_by_user_id
    if payer not in ledger:
        logger.warning(f"Expense {expense.id} paid by non-member {payer}, skipping")
        return
    for split in expense.splits:
        if split.user_id == payer or split.paid:
            continue
        if split.user_id not in ledger:
            logger.warning(
                f"Expense {expense.id} has a split for non-member {split.user_id}, skipping split"
            )
            continue
        totals[payer] += split.amount
        totals[split.user_id] -= split.amount
        ledger.add(split.user_id, payer, split.amount)


def _apply_settlement(settlement: Settlement, totals: dict, ledger: DebtLedger) -> None:
    payer, receiver = settlement.paid_by_user_id, settlement.received_by_user_id
    if payer == receiver or payer not in ledger or receiver not in ledger:
        logger.warning(f"Settlement {settlement.id} is not between two members, skipping")
        return
    totals[payer] += settlement.amount
    totals[receiver] -= settlement.amount
    # Can go negative here; netting moves it to the other direction.
    ledger.add(payer, receiver, -settlement.amount)


def build_group_ledger(
    members: Iterable[UUID],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
) -> tuple[dict[UUID, Decimal], DebtLedger]:
    """Accumulate totals and the pre-netting ledger for one group."""
    member_ids = _validate_members(members)
    totals = {m: ZERO for m in member_ids}
    ledger = DebtLedger(member_ids)

    for expense in expenses:
        _apply_expense(expense, totals, ledger)
    for settlement in settlements:
        _apply_settlement(settlement, totals, ledger)

    return totals, ledger


def compute_group_ledger(
    members: Iterable[UUID],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
) -> GroupLedgerResult:
    """Net balances and the simplified pairwise debt graph for a group."""
    totals, ledger = build_group_ledger(members, expenses, settlements)
    ledger.net()

    balances = [
        MemberBalance(
            user_id=member,
            total_balance=totals[member],
            owes=ledger.owes(member),
            owed_by=ledger.owed_by(member),
        )
        for member in ledger.member_ids
    ]
    return GroupLedgerResult(totals=totals, ledger=ledger.to_dict(), balances=balances)
