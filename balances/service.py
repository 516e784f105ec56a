import logging
from typing import Optional
from uuid import UUID

from .engine import compute_group_ledger, compute_pairwise_balance
from .exceptions import (
    ExpensePermissionError,
    InvalidArgumentError,
    NotGroupMemberError,
)
from .models import (
    DeleteExpenseResponse,
    GroupExpensesResponse,
    PairwiseBalanceResponse,
)
from .shaper import member_details, shape_group, shape_pairwise
from .storage import InMemoryRecordStore

logger = logging.getLogger(__name__)


class BalanceService:
    """Authorisation and orchestration around the balance engine.

    Every method takes the acting user's id explicitly; resolving who is
    calling happens upstream.
    """

    def __init__(self, store: Optional[InMemoryRecordStore] = None):
        self.store = store or InMemoryRecordStore()

    def get_expenses_between_users(self, current_user_id: UUID, user_id: UUID) -> PairwiseBalanceResponse:
        if current_user_id == user_id:
            raise InvalidArgumentError("Cannot query yourself")

        self.store.get_user(current_user_id)
        other = self.store.get_user(user_id)

        # Payer index narrows to one-on-one expenses either of us paid;
        # the engine keeps only those involving both.
        candidates = (
            self.store.expenses_paid_by(current_user_id)
            + self.store.expenses_paid_by(user_id)
        )
        settlements = self.store.settlements_between(current_user_id, user_id)

        result = compute_pairwise_balance(current_user_id, user_id, candidates, settlements)
        logger.info(
            f"Balance {current_user_id} <-> {user_id}: {result.balance} "
            f"over {len(result.expenses)} expenses, {len(result.settlements)} settlements"
        )
        return shape_pairwise(result, other)

    def get_group_expenses(self, current_user_id: UUID, group_id: UUID) -> GroupExpensesResponse:
        group = self.store.get_group(group_id)
        if not group.has_member(current_user_id):
            raise NotGroupMemberError("You are not a member of this group")

        expenses = self.store.group_expenses(group_id)
        settlements = self.store.group_settlements(group_id)

        users = {m: self.store.get_user(m) for m in group.member_ids}
        members = member_details(group, users)

        result = compute_group_ledger(group.member_ids, expenses, settlements)
        logger.info(
            f"Group {group_id} ledger: {len(expenses)} expenses, "
            f"{len(settlements)} settlements, {len(members)} members"
        )
        return shape_group(group, members, expenses, settlements, result)

    def delete_expense(self, current_user_id: UUID, expense_id: UUID) -> DeleteExpenseResponse:
        expense = self.store.get_expense(expense_id)

        # Only the creator of the expense or the payer can delete it
        if current_user_id not in (expense.created_by, expense.paid_by_user_id):
            raise ExpensePermissionError("You don't have permission to delete this expense")

        self.store.delete_expense(expense_id)
        logger.info(f"Expense {expense_id} deleted by {current_user_id}")
        return DeleteExpenseResponse(success=True, expense_id=expense_id)
