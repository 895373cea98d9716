"""
models/balance.py - Obligation, balance and settlement-suggestion shapes.

No business logic. No imports from services or schemas.

Sign convention (used everywhere a balance appears):
  positive  → the party is owed money (net creditor)
  negative  → the party owes money (net debtor)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Hashable, Union

Number = Union[int, Decimal]


@dataclass(frozen=True)
class Party:
    """A participant id plus its display name. The name carries no semantics."""

    id: Hashable
    name: str


@dataclass(frozen=True)
class Obligation:
    """A directed debt: `debtor` owes `creditor` `amount`."""

    debtor: Party
    creditor: Party
    amount: Number


@dataclass
class NetBalance:
    participant_id: Hashable
    name: str
    balance: Number


@dataclass(frozen=True)
class OptimizedSettlement:
    """A suggested payment. Output only; never mutated once produced."""

    from_party: Party
    to_party: Party
    amount: int


@dataclass
class UserBalance:
    """One counterparty as seen from a single user's side of the ledger."""

    participant_id: Hashable
    name: str
    amount: Number  # positive = they owe the user, negative = the user owes them


@dataclass
class BalanceSummary:
    total_owed: Number = 0    # what others owe the user
    total_owing: Number = 0   # what the user owes others
    net_balance: Number = 0
    balances: list[UserBalance] = field(default_factory=list)
