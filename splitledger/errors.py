"""
errors.py - LedgerError base class and error code registry.

Every failure raised by the ledger core uses a code defined here.
Do not raise strings or generic exceptions from service code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose with a fixed template per code,
    so callers and tests may match on the exact text.
  - The core carries no transport status. Mapping a code to an HTTP status
    (or anything else) is the calling application's job.
"""

from __future__ import annotations


class LedgerError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code    = code
        self.message = message
        self.field   = field  # which input field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# IMPORTANT: these string values are part of the public contract.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Split calculation ──────────────────────────────────────────────────
    EMPTY_PARTICIPANT_SET      = "EMPTY_PARTICIPANT_SET"
    INVALID_SPLIT_AMOUNT       = "INVALID_SPLIT_AMOUNT"
    SPLIT_SUM_MISMATCH         = "SPLIT_SUM_MISMATCH"
    PERCENTAGE_SUM_MISMATCH    = "PERCENTAGE_SUM_MISMATCH"
    UNKNOWN_SPLIT_POLICY       = "UNKNOWN_SPLIT_POLICY"

    # ── Schema / Input shape ───────────────────────────────────────────────
    DUPLICATE_SPLIT_USER       = "DUPLICATE_SPLIT_USER"
    SELF_OBLIGATION            = "SELF_OBLIGATION"


# ── Split errors ───────────────────────────────────────────────────────────
#
# One class per failure so callers can `except` the precise case, all
# sharing InvalidSplitError so they can also catch the family at once.
# ──────────────────────────────────────────────────────────────────────────

class InvalidSplitError(LedgerError):
    """A split request that cannot be turned into shares."""

    code: str = ErrorCode.INVALID_SPLIT_AMOUNT

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(type(self).code, message, field=field)


class EmptyParticipantSet(InvalidSplitError):
    code = ErrorCode.EMPTY_PARTICIPANT_SET


class InvalidSplitAmount(InvalidSplitError):
    code = ErrorCode.INVALID_SPLIT_AMOUNT


class SplitSumMismatch(InvalidSplitError):
    code = ErrorCode.SPLIT_SUM_MISMATCH


class PercentageSumMismatch(InvalidSplitError):
    code = ErrorCode.PERCENTAGE_SUM_MISMATCH


class UnknownSplitPolicy(InvalidSplitError):
    code = ErrorCode.UNKNOWN_SPLIT_POLICY
