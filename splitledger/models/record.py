"""
models/record.py - Stored expense and settlement records, as handed to the
balance aggregation layer.

Loading these from storage is the host application's job. They arrive here
with display names already resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable

from splitledger.models.balance import Number, Party


@dataclass(frozen=True)
class SplitShare:
    party: Party
    share: int


@dataclass(frozen=True)
class ExpenseRecord:
    payer: Party
    splits: tuple[SplitShare, ...] = field(default_factory=tuple)
    group_id: Hashable | None = None


@dataclass(frozen=True)
class SettlementRecord:
    """`from_party` paid `to_party` `amount` to reduce an existing debt."""

    from_party: Party
    to_party: Party
    amount: Number
    group_id: Hashable | None = None
