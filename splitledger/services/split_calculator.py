"""
services/split_calculator.py - Turns one expense total into per-participant shares.

Policies:
  EQUAL       floor(total / n) each; the remainder is spread one unit at a
              time over the first participants in input order.
  EXACT       each participant owes the amount supplied. The supplied amounts
              may differ from the total by at most one unit; they are never
              rescaled.
  PERCENTAGE  floor(total * pct / 100) each; whatever the flooring loses is
              added, in full, to the first participant.

Guarantees:
  - sum(share) == total_amount exactly for EQUAL and PERCENTAGE.
  - Input order is significant. Callers must pass a stable order (for
    example group membership order) to get reproducible shares.

Layer rules:
  - Pure computation. No I/O, no shared state, no knowledge of storage or HTTP.
  - Failures raise an InvalidSplitError subclass with a fixed message template.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Hashable, Sequence

from splitledger.config import ActiveConfig
from splitledger.errors import (
    EmptyParticipantSet,
    InvalidSplitAmount,
    InvalidSplitError,
    PercentageSumMismatch,
    SplitSumMismatch,
    UnknownSplitPolicy,
)
from splitledger.models.split import CalculatedSplit, SplitInput, SplitType
from splitledger.utils.money import ONE_HUNDRED, ZERO, is_whole, percentage_share, to_decimal

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _resolve_split_type(split_type) -> SplitType:
    """Accepts a SplitType or its string value; raises UnknownSplitPolicy otherwise."""
    if isinstance(split_type, SplitType):
        return split_type
    try:
        return SplitType(split_type)
    except ValueError:
        raise UnknownSplitPolicy(
            f"Invalid split type: {split_type}",
            field="split_type",
        ) from None


def _validate_total_amount(total_amount) -> None:
    if isinstance(total_amount, bool) or not isinstance(total_amount, int) or total_amount <= 0:
        raise InvalidSplitAmount(
            "Total amount must be a positive whole number of currency units",
            field="total_amount",
        )


_EXACT_AMOUNT_MESSAGE = "Each split must have a non-negative amount for EXACT split"
_PERCENTAGE_MESSAGE = "Each split must have a percentage between 0 and 100"


def _exact_amount(split: SplitInput) -> int:
    """Returns the split's exact amount as an int, or raises InvalidSplitAmount."""
    if split.amount is None or isinstance(split.amount, bool):
        raise InvalidSplitAmount(_EXACT_AMOUNT_MESSAGE, field="splits")
    try:
        value = to_decimal(split.amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidSplitAmount(_EXACT_AMOUNT_MESSAGE, field="splits") from None
    if not is_whole(value) or value < ZERO:
        raise InvalidSplitAmount(_EXACT_AMOUNT_MESSAGE, field="splits")
    return int(value)


def _percentage(split: SplitInput) -> Decimal:
    """Returns the split's percentage as a Decimal, or raises InvalidSplitAmount."""
    if split.amount is None or isinstance(split.amount, bool):
        raise InvalidSplitAmount(_PERCENTAGE_MESSAGE, field="splits")
    try:
        value = to_decimal(split.amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidSplitAmount(_PERCENTAGE_MESSAGE, field="splits") from None
    if not value.is_finite() or value < ZERO or value > ONE_HUNDRED:
        raise InvalidSplitAmount(_PERCENTAGE_MESSAGE, field="splits")
    return value


def _calculate_equal_split(
        total_amount: int,
        splits: Sequence[SplitInput],
) -> list[CalculatedSplit]:
    n = len(splits)
    base = total_amount // n
    remainder = total_amount - base * n

    result = []
    for index, split in enumerate(splits):
        share = base + (1 if index < remainder else 0)
        result.append(CalculatedSplit(split.participant_id, amount=share, share=share))
    return result


def _calculate_exact_split(
        total_amount: int,
        splits: Sequence[SplitInput],
) -> list[CalculatedSplit]:
    amounts = [_exact_amount(split) for split in splits]

    total = sum(amounts)
    if abs(total - total_amount) > ActiveConfig.EXACT_SPLIT_TOLERANCE:
        raise SplitSumMismatch(
            f"Split amounts ({total}) must equal total amount ({total_amount})",
            field="splits",
        )

    return [
        CalculatedSplit(split.participant_id, amount=amount, share=amount)
        for split, amount in zip(splits, amounts)
    ]


def _calculate_percentage_split(
        total_amount: int,
        splits: Sequence[SplitInput],
) -> list[CalculatedSplit]:
    percentages = [_percentage(split) for split in splits]

    total_percentage = sum(percentages, ZERO)
    if abs(total_percentage - ONE_HUNDRED) > ActiveConfig.PERCENTAGE_SUM_TOLERANCE:
        raise PercentageSumMismatch(
            f"Percentages must sum to 100 (got {total_percentage})",
            field="splits",
        )

    result = [
        CalculatedSplit(
            split.participant_id,
            amount=percentage,
            share=percentage_share(total_amount, percentage),
        )
        for split, percentage in zip(splits, percentages)
    ]

    # Flooring loses at most a few units; the first participant absorbs them all.
    diff = total_amount - sum(s.share for s in result)
    if diff > 0:
        result[0].share += diff

    return result


_CALCULATORS = {
    SplitType.EQUAL:      _calculate_equal_split,
    SplitType.EXACT:      _calculate_exact_split,
    SplitType.PERCENTAGE: _calculate_percentage_split,
}


# ── Public service functions ───────────────────────────────────────────────

def calculate_splits(
        total_amount: int,
        split_type: SplitType | str,
        splits: Sequence[SplitInput],
) -> list[CalculatedSplit]:
    """
    Calculates each participant's share of `total_amount`.

    Args:
        total_amount: Positive int in the smallest currency unit.
        split_type:   SplitType, or its string value ("EQUAL", "EXACT", "PERCENTAGE").
        splits:       Participants in a stable order. `amount` is the exact
                      amount (EXACT) or the percentage (PERCENTAGE); ignored
                      for EQUAL.

    Returns:
        One CalculatedSplit per input, in input order.

    Raises:
        UnknownSplitPolicy     -- split_type is not one of the three policies.
        EmptyParticipantSet    -- no participants were supplied.
        InvalidSplitAmount     -- total is not a positive int, or an amount is
                                  missing or out of range for the policy.
        SplitSumMismatch       -- EXACT amounts differ from the total by more than 1.
        PercentageSumMismatch  -- percentages do not sum to 100 within 0.01.
    """
    policy = _resolve_split_type(split_type)

    if len(splits) == 0:
        raise EmptyParticipantSet(
            "At least one participant is required",
            field="splits",
        )
    _validate_total_amount(total_amount)

    try:
        result = _CALCULATORS[policy](total_amount, splits)
    except InvalidSplitError as error:
        logger.info("Rejected %s split of %s: %s", policy.value, total_amount, error.message)
        raise

    logger.debug(
        "Calculated %s split of %s across %d participants",
        policy.value, total_amount, len(result),
    )
    return result


def is_payer_included(payer_id: Hashable, splits: Sequence[SplitInput]) -> bool:
    """True if the payer is one of the split participants. Not required, often useful."""
    return any(split.participant_id == payer_id for split in splits)


def describe_split(split_type: SplitType | str, splits: Sequence[CalculatedSplit]) -> str:
    """Returns a one-line, display-ready summary of how an expense was split."""
    try:
        policy = _resolve_split_type(split_type)
    except UnknownSplitPolicy:
        return "Custom split"

    if policy == SplitType.EQUAL:
        return f"Split equally among {len(splits)} people"
    if policy == SplitType.EXACT:
        return "Split by exact amounts"
    return "Split by percentage"
