"""
tests/conftest.py - Shared test setup.

Pins LEDGER_ENV to "testing" before any splitledger module is imported, so
ActiveConfig resolves to TestingConfig and the balance epsilon cannot be
moved by the caller's environment or a local .env file.
"""

import os

os.environ["LEDGER_ENV"] = "testing"
