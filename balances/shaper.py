"""Merge engine output with user and member metadata for display."""

from .models import (
    Expense,
    Group,
    GroupExpensesResponse,
    GroupLedgerResult,
    GroupSummary,
    MemberBalanceView,
    MemberDetail,
    PairwiseBalanceResponse,
    PairwiseResult,
    Settlement,
    User,
    UserSummary,
)


def shape_pairwise(result: PairwiseResult, other: User) -> PairwiseBalanceResponse:
    return PairwiseBalanceResponse(
        expenses=result.expenses,
        settlements=result.settlements,
        other_user=UserSummary(
            id=other.id, name=other.name, email=other.email, image_url=other.image_url,
        ),
        balance=result.balance,
    )


def member_details(group: Group, users: dict) -> list[MemberDetail]:
    """Member rows in group order; ``users`` maps user id to ``User``."""
    return [
        MemberDetail(
            id=m.user_id,
            name=users[m.user_id].name,
            image_url=users[m.user_id].image_url,
            role=m.role,
        )
        for m in group.members
    ]


def shape_group(
    group: Group,
    members: list[MemberDetail],
    expenses: list[Expense],
    settlements: list[Settlement],
    result: GroupLedgerResult,
) -> GroupExpensesResponse:
    by_id = {b.user_id: b for b in result.balances}
    balances = [
        MemberBalanceView(
            **m.model_dump(),
            total_balance=by_id[m.id].total_balance,
            owes=by_id[m.id].owes,
            owed_by=by_id[m.id].owed_by,
        )
        for m in members
    ]
    return GroupExpensesResponse(
        group=GroupSummary(id=group.id, name=group.name, description=group.description),
        members=members,
        expenses=expenses,
        settlements=settlements,
        balances=balances,
        user_lookup_map={m.id: m for m in members},
    )
