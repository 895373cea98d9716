"""
splitledger - ledger arithmetic for shared expenses.

Two pure components:
  calculate_splits()            one expense total → per-participant integer shares
                                (EQUAL, EXACT, PERCENTAGE)
  get_simplified_settlements()  directed debts → net balances → the fewest
                                greedy payments that clear them

Storage, HTTP and authentication belong to the host application, which
supplies validated data (see splitledger.schemas) and persists the results.
Nothing here keeps state between calls, so every function is safe to call
from any thread.
"""

from splitledger.errors import (
    EmptyParticipantSet,
    ErrorCode,
    InvalidSplitAmount,
    InvalidSplitError,
    LedgerError,
    PercentageSumMismatch,
    SplitSumMismatch,
    UnknownSplitPolicy,
)
from splitledger.models.balance import NetBalance, Obligation, OptimizedSettlement, Party
from splitledger.models.split import CalculatedSplit, SplitInput, SplitType
from splitledger.services.balance_simplifier import (
    compute_net_balances,
    get_simplified_settlements,
    simplify,
)
from splitledger.services.split_calculator import calculate_splits

__all__ = [
    "CalculatedSplit",
    "EmptyParticipantSet",
    "ErrorCode",
    "InvalidSplitAmount",
    "InvalidSplitError",
    "LedgerError",
    "NetBalance",
    "Obligation",
    "OptimizedSettlement",
    "Party",
    "PercentageSumMismatch",
    "SplitInput",
    "SplitSumMismatch",
    "SplitType",
    "UnknownSplitPolicy",
    "calculate_splits",
    "compute_net_balances",
    "get_simplified_settlements",
    "simplify",
]
