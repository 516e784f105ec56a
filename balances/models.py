from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict, model_validator


class MemberRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class User(BaseModel):
    id: UUID
    name: str
    email: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class Split(BaseModel):
    user_id: UUID
    amount: Decimal = Field(..., ge=0)
    paid: bool = False

    model_config = ConfigDict(from_attributes=True, frozen=True)


class Expense(BaseModel):
    id: UUID
    description: str = ""
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    paid_by_user_id: UUID
    group_id: Optional[UUID] = None
    date: datetime
    splits: list[Split] = Field(default_factory=list)
    created_by: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True, frozen=True, json_schema_extra={
        "example": {
            "id": "7a1c1e0e-54a4-4a8e-9d2a-3b1c2f5d9e10",
            "description": "Dinner",
            "amount": "60.00",
            "paid_by_user_id": "550e8400-e29b-41d4-a716-446655440000",
            "group_id": None,
            "date": "2024-05-01T19:30:00Z",
            "splits": [
                {"user_id": "550e8400-e29b-41d4-a716-446655440000", "amount": "30.00", "paid": True},
                {"user_id": "660e8400-e29b-41d4-a716-446655440001", "amount": "30.00", "paid": False},
            ],
        }
    })

    def split_for(self, user_id: UUID) -> Optional[Split]:
        for split in self.splits:
            if split.user_id == user_id:
                return split
        return None


class Settlement(BaseModel):
    id: UUID
    paid_by_user_id: UUID
    received_by_user_id: UUID
    amount: Decimal = Field(..., gt=0)
    date: datetime
    group_id: Optional[UUID] = None
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def is_between(self, user_a: UUID, user_b: UUID) -> bool:
        return {self.paid_by_user_id, self.received_by_user_id} == {user_a, user_b} and user_a != user_b


class GroupMember(BaseModel):
    user_id: UUID
    role: MemberRole = MemberRole.MEMBER

    model_config = ConfigDict(frozen=True)


class Group(BaseModel):
    id: UUID
    name: str
    description: str = ""
    members: list[GroupMember] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @model_validator(mode="after")
    def _members_unique(self) -> "Group":
        ids = [m.user_id for m in self.members]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Group {self.id} lists the same user more than once")
        return self

    @property
    def member_ids(self) -> list[UUID]:
        return [m.user_id for m in self.members]

    def has_member(self, user_id: UUID) -> bool:
        return any(m.user_id == user_id for m in self.members)


# Engine results

class PairwiseResult(BaseModel):
    balance: Decimal
    expenses: list[Expense]
    settlements: list[Settlement]


class Debt(BaseModel):
    to: UUID
    amount: Decimal


class Credit(BaseModel):
    from_: UUID = Field(..., alias="from")
    amount: Decimal

    model_config = ConfigDict(populate_by_name=True)


class MemberBalance(BaseModel):
    user_id: UUID
    total_balance: Decimal
    owes: list[Debt] = Field(default_factory=list)
    owed_by: list[Credit] = Field(default_factory=list)


class GroupLedgerResult(BaseModel):
    totals: dict[UUID, Decimal]
    ledger: dict[UUID, dict[UUID, Decimal]]
    balances: list[MemberBalance]


# Shaped responses

class UserSummary(BaseModel):
    id: UUID
    name: str
    email: str
    image_url: Optional[str] = None


class PairwiseBalanceResponse(BaseModel):
    expenses: list[Expense]
    settlements: list[Settlement]
    other_user: UserSummary
    balance: Decimal


class GroupSummary(BaseModel):
    id: UUID
    name: str
    description: str


class MemberDetail(BaseModel):
    id: UUID
    name: str
    image_url: Optional[str] = None
    role: MemberRole


class MemberBalanceView(MemberDetail):
    total_balance: Decimal
    owes: list[Debt]
    owed_by: list[Credit]


class GroupExpensesResponse(BaseModel):
    group: GroupSummary
    members: list[MemberDetail]
    expenses: list[Expense]
    settlements: list[Settlement]
    balances: list[MemberBalanceView]
    user_lookup_map: dict[UUID, MemberDetail]


class DeleteExpenseResponse(BaseModel):
    success: bool
    expense_id: UUID
