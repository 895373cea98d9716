"""
services/balance_simplifier.py - Net balances and greedy debt simplification.

Example:
  Before: A owes B 10, B owes C 5, C owes A 3
  Net:    A -7, B +5, C +2
  After:  A→B 5, A→C 2   (two payments instead of three)

Algorithm (simplify):
  1. Split parties into creditors (balance > eps) and debtors (balance < -eps).
  2. Stable-sort creditors by balance descending and debtors ascending
     (most negative first). Ties keep their encounter order.
  3. Walk both lists with two cursors. Each step settles
     min(credit, |debt|) between the current pair, then advances whichever
     cursor's party is within eps of zero (both may advance).
  4. Stop when either list is exhausted.

Layer rules:
  - Pure computation. Inputs are never mutated; the sweep works on copies.
  - No error cases. Excluding non-finite amounts is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Hashable, Iterable, Mapping

from splitledger.config import ActiveConfig
from splitledger.models.balance import NetBalance, Obligation, OptimizedSettlement, Party
from splitledger.utils.money import round_half_up, to_number

logger = logging.getLogger(__name__)


def _epsilon(epsilon) -> Decimal:
    return ActiveConfig.BALANCE_EPSILON if epsilon is None else to_number(epsilon)


def compute_net_balances(obligations: Iterable[Obligation]) -> dict[Hashable, NetBalance]:
    """
    Nets directed obligations into one balance per party.

    The debtor of each obligation loses `amount`, the creditor gains it.
    Only parties that appear in some obligation are present in the result;
    the result does not depend on the order of `obligations`.
    """
    net_balances: dict[Hashable, NetBalance] = {}

    for obligation in obligations:
        amount = to_number(obligation.amount)

        debtor = obligation.debtor
        if debtor.id not in net_balances:
            net_balances[debtor.id] = NetBalance(debtor.id, debtor.name, 0)
        net_balances[debtor.id].balance -= amount

        creditor = obligation.creditor
        if creditor.id not in net_balances:
            net_balances[creditor.id] = NetBalance(creditor.id, creditor.name, 0)
        net_balances[creditor.id].balance += amount

    return net_balances


def simplify(
        net_balances: Mapping[Hashable, NetBalance],
        epsilon=None,
) -> list[OptimizedSettlement]:
    """
    Greedy minimum cash flow simplification.

    Args:
        net_balances: {participant_id: NetBalance}, as from compute_net_balances().
        epsilon:      Balances within this distance of zero count as settled.
                      Defaults to the configured BALANCE_EPSILON (0.01).

    Returns:
        Suggested payments, debtor → creditor, amounts rounded to whole units.
        An empty list means nobody owes anything.
    """
    eps = _epsilon(epsilon)

    creditors: list[NetBalance] = []
    debtors: list[NetBalance] = []

    for entry in net_balances.values():
        balance = to_number(entry.balance)
        if balance > eps:
            creditors.append(replace(entry, balance=balance))
        elif balance < -eps:
            debtors.append(replace(entry, balance=balance))

    # sorted() is stable, including with reverse=True.
    creditors.sort(key=lambda b: b.balance, reverse=True)
    debtors.sort(key=lambda b: b.balance)

    settlements: list[OptimizedSettlement] = []
    i = 0  # creditor cursor
    j = 0  # debtor cursor

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(creditor.balance, -debtor.balance)

        if amount > eps:
            settlements.append(OptimizedSettlement(
                from_party=Party(debtor.participant_id, debtor.name),
                to_party=Party(creditor.participant_id, creditor.name),
                amount=round_half_up(amount),
            ))

        creditor.balance -= amount
        debtor.balance += amount

        # The == 0 checks keep the sweep moving when eps is zero.
        if creditor.balance < eps or creditor.balance == 0:
            i += 1
        if debtor.balance > -eps or debtor.balance == 0:
            j += 1

    logger.debug(
        "Simplified %d creditors and %d debtors into %d settlements",
        len(creditors), len(debtors), len(settlements),
    )
    return settlements


def get_simplified_settlements(
        obligations: Iterable[Obligation],
        epsilon=None,
) -> list[OptimizedSettlement]:
    """compute_net_balances() followed by simplify()."""
    return simplify(compute_net_balances(obligations), epsilon=epsilon)
