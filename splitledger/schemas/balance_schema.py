"""
schemas/balance_schema.py - Marshmallow schemas for obligations and balance output.

ObligationSchema loads the host application's debt records into Obligation
objects. The remaining schemas are dump-only views used to build responses.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    post_load,
    validates_schema,
)

from splitledger.errors import ErrorCode
from splitledger.models.balance import Obligation, Party
from splitledger.schemas.split_schema import json_number, validate_participant_id
from splitledger.utils.money import is_whole


def _validate_positive_amount(value: Decimal) -> None:
    if value <= Decimal("0"):
        raise ValidationError("Amount must be greater than zero.")


class PartySchema(Schema):

    id = fields.Raw(required=True, validate=validate_participant_id)
    name = fields.Str(required=True)

    @post_load
    def make_party(self, data: dict, **kwargs) -> Party:
        return Party(**data)


class ObligationSchema(Schema):
    """
    One directed debt: debtor owes creditor amount.

    Whole amounts are loaded as int so downstream balances stay integral.
    """

    debtor = fields.Nested(PartySchema, required=True)
    creditor = fields.Nested(PartySchema, required=True)
    amount = fields.Decimal(required=True, validate=_validate_positive_amount)

    @validates_schema
    def validate_not_self(self, data: dict, **kwargs) -> None:
        debtor, creditor = data.get("debtor"), data.get("creditor")
        if debtor is not None and creditor is not None and debtor.id == creditor.id:
            raise ValidationError(
                {
                    "creditor": [ErrorCode.SELF_OBLIGATION],
                }
            )

    @post_load
    def make_obligation(self, data: dict, **kwargs) -> Obligation:
        amount = data["amount"]
        if is_whole(amount):
            amount = int(amount)
        return Obligation(debtor=data["debtor"], creditor=data["creditor"], amount=amount)


class NetBalanceSchema(Schema):

    participant_id = fields.Raw()
    name = fields.Str()
    balance = fields.Function(lambda entry: json_number(entry.balance))


class OptimizedSettlementSchema(Schema):
    """Dumps as {"from": {...}, "to": {...}, "amount": int}."""

    from_party = fields.Nested(PartySchema, data_key="from")
    to_party = fields.Nested(PartySchema, data_key="to")
    amount = fields.Int()
