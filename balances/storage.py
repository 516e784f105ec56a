import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from .exceptions import ExpenseNotFoundError, GroupNotFoundError, UserNotFoundError
from .models import (
    Expense,
    Group,
    GroupMember,
    MemberRole,
    Settlement,
    Split,
    User,
)

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Users, groups, expenses and settlements held in process memory.

    Reads return the stored (immutable) records. Expenses are also indexed
    by ``(paid_by_user_id, group_id)`` so one-on-one candidates for a pair
    can be fetched without scanning every expense.
    """

    def __init__(self, seed: bool = False):
        self.users: dict[UUID, User] = {}
        self.groups: dict[UUID, Group] = {}
        self.expenses: dict[UUID, Expense] = {}
        self.settlements: dict[UUID, Settlement] = {}
        self.payer_index: dict[tuple[UUID, Optional[UUID]], dict[UUID, None]] = {}
        if seed:
            self._seed_data()

    def add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def add_group(self, group: Group) -> Group:
        self.groups[group.id] = group
        return group

    def add_expense(self, expense: Expense) -> Expense:
        self.expenses[expense.id] = expense
        key = (expense.paid_by_user_id, expense.group_id)
        self.payer_index.setdefault(key, {})[expense.id] = None
        return expense

    def add_settlement(self, settlement: Settlement) -> Settlement:
        self.settlements[settlement.id] = settlement
        return settlement

    def get_user(self, user_id: UUID) -> User:
        user = self.users.get(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def get_group(self, group_id: UUID) -> Group:
        group = self.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(group_id)
        return group

    def get_expense(self, expense_id: UUID) -> Expense:
        expense = self.expenses.get(expense_id)
        if not expense:
            raise ExpenseNotFoundError(expense_id)
        return expense

    def delete_expense(self, expense_id: UUID) -> None:
        expense = self.expenses.pop(expense_id, None)
        if not expense:
            raise ExpenseNotFoundError(expense_id)
        self.payer_index.get((expense.paid_by_user_id, expense.group_id), {}).pop(expense_id, None)

    def expenses_paid_by(self, user_id: UUID, group_id: Optional[UUID] = None) -> list[Expense]:
        """Expenses paid by ``user_id`` in ``group_id`` (``None`` for one-on-one)."""
        ids = self.payer_index.get((user_id, group_id), {})
        return [self.expenses[i] for i in ids]

    def group_expenses(self, group_id: UUID) -> list[Expense]:
        return [e for e in self.expenses.values() if e.group_id == group_id]

    def group_settlements(self, group_id: UUID) -> list[Settlement]:
        return [s for s in self.settlements.values() if s.group_id == group_id]

    def settlements_between(self, user_a: UUID, user_b: UUID) -> list[Settlement]:
        """One-on-one settlements in either direction between two users."""
        return [
            s for s in self.settlements.values()
            if s.group_id is None and s.is_between(user_a, user_b)
        ]

    def _seed_data(self):
        alice_id = UUID("550e8400-e29b-41d4-a716-446655440000")
        bob_id = UUID("660e8400-e29b-41d4-a716-446655440001")
        carol_id = UUID("770e8400-e29b-41d4-a716-446655440002")
        trip_id = UUID("11111111-1111-1111-1111-111111111111")
        now = datetime.now(timezone.utc)

        self.add_user(User(id=alice_id, name="Alice Payer", email="alice@example.com"))
        self.add_user(User(id=bob_id, name="Bob Borrower", email="bob@example.com"))
        self.add_user(User(id=carol_id, name="Carol Friend", email="carol@example.com"))

        self.add_group(Group(
            id=trip_id, name="Weekend Trip", description="Cabin, groceries and fuel",
            members=[
                GroupMember(user_id=alice_id, role=MemberRole.ADMIN),
                GroupMember(user_id=bob_id),
                GroupMember(user_id=carol_id),
            ],
        ))

        self.add_expense(Expense(
            id=UUID("22222222-2222-2222-2222-222222222201"),
            description="Cabin rental", amount=Decimal("60.00"),
            paid_by_user_id=alice_id, group_id=trip_id, date=now - timedelta(days=3),
            created_by=alice_id,
            splits=[
                Split(user_id=alice_id, amount=Decimal("20.00"), paid=True),
                Split(user_id=bob_id, amount=Decimal("20.00")),
                Split(user_id=carol_id, amount=Decimal("20.00")),
            ],
        ))
        self.add_settlement(Settlement(
            id=UUID("33333333-3333-3333-3333-333333333301"),
            paid_by_user_id=bob_id, received_by_user_id=alice_id,
            amount=Decimal("10.00"), group_id=trip_id, date=now - timedelta(days=1),
        ))

        self.add_expense(Expense(
            id=UUID("22222222-2222-2222-2222-222222222202"),
            description="Concert tickets", amount=Decimal("90.00"),
            paid_by_user_id=alice_id, date=now - timedelta(days=2), created_by=alice_id,
            splits=[
                Split(user_id=alice_id, amount=Decimal("45.00"), paid=True),
                Split(user_id=bob_id, amount=Decimal("45.00")),
            ],
        ))
        logger.info(f"Seeded {len(self.users)} users and {len(self.expenses)} expenses")
