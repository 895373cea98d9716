"""
schemas/split_schema.py - Marshmallow schemas for split requests and results.

Validation responsibility:
  - This file:
      - Field types and ranges (strict positive int total, non-negative amounts)
      - split_type against the SplitType enum (UNKNOWN_SPLIT_POLICY)
      - At least one split (EMPTY_PARTICIPANT_SET)
      - DUPLICATE_SPLIT_USER - request shape rule
  - services/split_calculator.py:
      - Per-policy amount rules (missing amount, percentage range)
      - SPLIT_SUM_MISMATCH, PERCENTAGE_SUM_MISMATCH - require the policy's arithmetic

A loaded CalculateSplitsSchema payload can be passed straight through:

    data = CalculateSplitsSchema().load(payload)
    splits = calculate_splits(**data)
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    post_load,
    validate,
    validates_schema,
)

from splitledger.errors import ErrorCode
from splitledger.models.split import SplitInput, SplitType


def validate_participant_id(value) -> None:
    """
    Participant ids are opaque, but must be usable as mapping keys and must
    not be blank: a non-empty string or an int.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError("Participant id must be a string or an integer.")
    if isinstance(value, str) and not value.strip():
        raise ValidationError("Participant id must not be blank.")


def json_number(value):
    """Decimals are serialised as strings to preserve precision; ints pass through."""
    if isinstance(value, Decimal):
        return str(value)
    return value


# ── Sub-schema: one entry in the `splits` array ───────────────────────────

class SplitInputSchema(Schema):
    """
    A single participant in a split request.

    `amount` is optional here because EQUAL ignores it. Whether it is
    required (EXACT, PERCENTAGE) is decided by the calculator.
    """

    participant_id = fields.Raw(
        required=True,
        validate=validate_participant_id,
    )

    amount = fields.Decimal(
        load_default=None,
        allow_none=True,
        validate=validate.Range(min=0, error="Split amount must be non-negative."),
    )

    @post_load
    def make_split_input(self, data: dict, **kwargs) -> SplitInput:
        return SplitInput(**data)


# ── Split request ──────────────────────────────────────────────────────────

class CalculateSplitsSchema(Schema):
    """
    The three arguments of calculate_splits(), as sent by the host application.

    Checks in this schema:
      - total_amount is a strictly positive integer (smallest currency unit)
      - split_type is one of EQUAL / EXACT / PERCENTAGE
      - splits has at least one entry
      - DUPLICATE_SPLIT_USER: same participant_id appears twice
    """

    total_amount = fields.Int(
        required=True,
        strict=True,   # reject floats like 100.0
        validate=validate.Range(min=1, error="total_amount must be a positive integer."),
    )

    split_type = fields.Enum(
        SplitType,
        required=True,
        by_value=True,
        error_messages={"unknown": ErrorCode.UNKNOWN_SPLIT_POLICY},
    )

    splits = fields.List(
        fields.Nested(SplitInputSchema),
        required=True,
        validate=validate.Length(min=1, error=ErrorCode.EMPTY_PARTICIPANT_SET),
    )

    @validates_schema
    def validate_unique_participants(self, data: dict, **kwargs) -> None:
        splits = data.get("splits") or []
        participant_ids = [s.participant_id for s in splits]
        if len(participant_ids) != len(set(participant_ids)):
            raise ValidationError(
                {
                    "splits": [ErrorCode.DUPLICATE_SPLIT_USER],
                }
            )


# ── Result ─────────────────────────────────────────────────────────────────

class CalculatedSplitSchema(Schema):
    """Dump-only view of a CalculatedSplit. Percentages are dumped as strings."""

    participant_id = fields.Raw()
    amount = fields.Function(lambda split: json_number(split.amount))
    share = fields.Int()
