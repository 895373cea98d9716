"""
models/split.py - Split request and result shapes.

No business logic. No imports from services or schemas.

Key design points:
  - `share` is always an int in the smallest currency unit. Never float.
  - `amount` on a SplitInput is the policy-specific raw value: an exact
    currency amount under EXACT, percentage points under PERCENTAGE, and
    ignored under EQUAL. Percentages are Decimal.
  - SplitType is a Python enum so it can be imported by schemas and services
    without repeating string literals.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Hashable, Union

# An exact amount (int) or a percentage (Decimal). Floats are accepted at the
# boundary and converted by utils.money.to_decimal before any arithmetic.
RawAmount = Union[int, Decimal, float]


# ── Enum Definitions ───────────────────────────────────────────────────────

class SplitType(str, enum.Enum):
    EQUAL      = "EQUAL"
    EXACT      = "EXACT"
    PERCENTAGE = "PERCENTAGE"


# ── Shapes ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SplitInput:
    participant_id: Hashable
    amount: RawAmount | None = None


@dataclass
class CalculatedSplit:
    participant_id: Hashable
    amount: int | Decimal   # percentage for PERCENTAGE, otherwise equal to share
    share: int
