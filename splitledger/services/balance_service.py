"""
services/balance_service.py - Balance aggregation over expense and settlement records.

This is the glue between stored records and the balance simplifier. The host
application loads ExpenseRecord / SettlementRecord objects (names already
resolved) and hands them in; everything here is in-memory.

Conversion rules (the only place they are written down in code):
  - Expense:    every split participant other than the payer owes the payer
                their share. The payer's own share produces no obligation.
  - Settlement: recorded as a reversed obligation. The receiver "owes back"
                the amount, which cancels part of the debt the payer had.

Layer rules:
  - No storage, HTTP or framework imports.
  - Receives plain records; returns dataclasses, or plain dicts for the
    report helper.
"""

from __future__ import annotations

import logging
from typing import Hashable, Iterable, Sequence

from splitledger.config import ActiveConfig
from splitledger.models.balance import (
    BalanceSummary,
    Obligation,
    OptimizedSettlement,
    UserBalance,
)
from splitledger.models.record import ExpenseRecord, SettlementRecord
from splitledger.schemas.balance_schema import NetBalanceSchema, OptimizedSettlementSchema
from splitledger.services.balance_simplifier import compute_net_balances, simplify
from splitledger.utils.money import to_number

logger = logging.getLogger(__name__)


# ── Record filters ─────────────────────────────────────────────────────────

def filter_expenses(
        expenses: Iterable[ExpenseRecord],
        group_id: Hashable | None = None,
) -> list[ExpenseRecord]:
    """Returns the expenses belonging to `group_id`, or all of them when it is None."""
    return [e for e in expenses if group_id is None or e.group_id == group_id]


def filter_settlements(
        settlements: Iterable[SettlementRecord],
        group_id: Hashable | None = None,
) -> list[SettlementRecord]:
    """Returns the settlements belonging to `group_id`, or all of them when it is None."""
    return [s for s in settlements if group_id is None or s.group_id == group_id]


# ── Conversion ─────────────────────────────────────────────────────────────

def build_obligations(
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord],
) -> list[Obligation]:
    """Converts records into directed obligations, expenses first, in record order."""
    obligations: list[Obligation] = []

    for expense in expenses:
        for split in expense.splits:
            if split.party.id != expense.payer.id:
                obligations.append(Obligation(
                    debtor=split.party,
                    creditor=expense.payer,
                    amount=split.share,
                ))

    # Settlements reduce debts: reverse the direction of payment.
    for settlement in settlements:
        obligations.append(Obligation(
            debtor=settlement.to_party,
            creditor=settlement.from_party,
            amount=settlement.amount,
        ))

    return obligations


# ── Public service functions ───────────────────────────────────────────────

def get_settlement_suggestions(
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord],
        group_id: Hashable | None = None,
        epsilon=None,
) -> list[OptimizedSettlement]:
    """Returns the simplified payments that would clear every debt in the group."""
    obligations = build_obligations(
        filter_expenses(expenses, group_id),
        filter_settlements(settlements, group_id),
    )
    return simplify(compute_net_balances(obligations), epsilon=epsilon)


def get_user_balances(
        user_id: Hashable,
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord],
        group_id: Hashable | None = None,
        epsilon=None,
) -> BalanceSummary:
    """
    Pairwise balances between one user and everyone they share records with.

    Each UserBalance.amount is positive when the counterparty owes the user
    and negative when the user owes them. Counterparties whose balance is
    within epsilon of zero are left out. Results are sorted by absolute
    amount, largest first.
    """
    eps = ActiveConfig.BALANCE_EPSILON if epsilon is None else to_number(epsilon)

    # counterparty id -> [name, amount]; insertion order is encounter order.
    balance_map: dict[Hashable, list] = {}

    def _adjust(party, delta) -> None:
        entry = balance_map.setdefault(party.id, [party.name, 0])
        entry[1] += delta

    for expense in filter_expenses(expenses, group_id):
        payer = expense.payer
        for split in expense.splits:
            if payer.id == user_id and split.party.id != user_id:
                # The user paid; the participant owes the user.
                _adjust(split.party, split.share)
            elif split.party.id == user_id and payer.id != user_id:
                # Someone else paid; the user owes them.
                _adjust(payer, -split.share)

    for settlement in filter_settlements(settlements, group_id):
        amount = to_number(settlement.amount)
        if settlement.from_party.id == user_id:
            # The user paid someone, reducing what the user owes them.
            _adjust(settlement.to_party, amount)
        elif settlement.to_party.id == user_id:
            # Someone paid the user, reducing what they owe the user.
            _adjust(settlement.from_party, -amount)

    summary = BalanceSummary()
    for other_id, (name, amount) in balance_map.items():
        if abs(amount) < eps:
            continue
        if amount > 0:
            summary.total_owed += amount
        else:
            summary.total_owing += -amount
        summary.balances.append(UserBalance(other_id, name, amount))

    summary.balances.sort(key=lambda b: abs(b.amount), reverse=True)
    summary.net_balance = summary.total_owed - summary.total_owing
    return summary


def get_group_balances(
        expenses: Sequence[ExpenseRecord],
        settlements: Sequence[SettlementRecord],
        group_id: Hashable,
        epsilon=None,
) -> dict[Hashable, BalanceSummary]:
    """
    Returns a BalanceSummary for every participant of the group's expenses.

    Members are those who paid or shared in at least one of the group's
    expenses, keyed in encounter order.
    """
    member_ids: dict[Hashable, None] = {}
    for expense in filter_expenses(expenses, group_id):
        member_ids.setdefault(expense.payer.id)
        for split in expense.splits:
            member_ids.setdefault(split.party.id)

    return {
        member_id: get_user_balances(member_id, expenses, settlements, group_id, epsilon)
        for member_id in member_ids
    }


def get_balance_report(
        expenses: Sequence[ExpenseRecord],
        settlements: Sequence[SettlementRecord],
        group_id: Hashable | None = None,
        epsilon=None,
) -> dict:
    """
    Builds a serialisable balance payload for a group.

    Returns:
        {"group_id", "balances", "simplified_debts", "balance_sum"} where
        balances and simplified_debts are dumped through the output schemas
        and balance_sum is the sum of all net balances as a string. Netting
        conserves money, so it is "0" for any well-formed input.
    """
    obligations = build_obligations(
        filter_expenses(expenses, group_id),
        filter_settlements(settlements, group_id),
    )
    net_balances = compute_net_balances(obligations)
    simplified = simplify(net_balances, epsilon=epsilon)

    balance_sum = sum((b.balance for b in net_balances.values()), 0)
    logger.debug(
        "Balance report for group %s: %d parties, %d suggested settlements",
        group_id, len(net_balances), len(simplified),
    )

    return {
        "group_id": group_id,
        "balances": NetBalanceSchema(many=True).dump(list(net_balances.values())),
        "simplified_debts": OptimizedSettlementSchema(many=True).dump(simplified),
        "balance_sum": str(balance_sum),
    }
