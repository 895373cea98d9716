import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv


_PACKAGE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_DIR.parent

# Root .env is canonical; splitledger/.env remains a local override fallback.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_PACKAGE_DIR / ".env")


def _first_non_empty_env(*names: str, default: str) -> str:
    """Returns the first non-empty env var value from `names`, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value != "":
            return value
    return default


def _parse_decimal_env(*names: str, default: Decimal) -> Decimal:
    """
    Parses the first non-empty env var in `names` as a finite, non-negative
    Decimal. Falls back to `default` when the value does not parse, is not
    finite, or is negative.
    """
    raw = _first_non_empty_env(*names, default=str(default))
    try:
        value = Decimal(raw)
    except (InvalidOperation, TypeError, ValueError):
        return default
    if not value.is_finite() or value < 0:
        return default
    return value


class BaseConfig:

    # Balances within this distance of zero are treated as settled.
    # Absorbs residue from upstream proportional math. The alias
    # BALANCE_EPSILON is accepted for compatibility.
    BALANCE_EPSILON: Decimal = _parse_decimal_env(
        "LEDGER_BALANCE_EPSILON",
        "BALANCE_EPSILON",
        default=Decimal("0.01"),
    )

    # Fixed by the ledger's split rules; not overridable from the environment.
    EXACT_SPLIT_TOLERANCE: int = 1
    PERCENTAGE_SUM_TOLERANCE: Decimal = Decimal("0.01")

    LOG_LEVEL: str = _first_non_empty_env("LEDGER_LOG_LEVEL", default="INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False

    LOG_LEVEL: str = _first_non_empty_env("LEDGER_LOG_LEVEL", default="DEBUG")


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    # Tests assert exact arithmetic; the environment must not move the epsilon.
    BALANCE_EPSILON: Decimal = Decimal("0.01")
    LOG_LEVEL: str = "WARNING"


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False


def validate_config(config: type[BaseConfig]) -> None:
    """
    Fail-fast guard for ledger configuration.

    Call once at start-up by whatever process hosts the ledger core:

        validate_config(ActiveConfig)   # raises ValueError if misconfigured

    Raises ValueError if the balance epsilon is negative or not finite, or if
    LOG_LEVEL does not name a logging level.
    """
    epsilon = config.BALANCE_EPSILON
    if not epsilon.is_finite() or epsilon < 0:
        raise ValueError(
            f"BALANCE_EPSILON must be a finite, non-negative number (got {epsilon}). "
            "Set LEDGER_BALANCE_EPSILON to a value such as 0.01."
        )
    if not isinstance(logging.getLevelName(config.LOG_LEVEL.upper()), int):
        raise ValueError(
            f"LOG_LEVEL must be a logging level name (got {config.LOG_LEVEL!r})."
        )


def configure_logging(config: type[BaseConfig]) -> logging.Logger:
    """
    Applies the configured level to the package logger and returns it.

    Only the `splitledger` logger is touched. Handlers and the root logger
    belong to the host application.
    """
    logger = logging.getLogger("splitledger")
    logger.setLevel(config.LOG_LEVEL.upper())
    return logger


# ── Config selector ────────────────────────────────────────────────────────
#
#   from splitledger.config import config_by_name
#   config = config_by_name[ledger_env]
# ──────────────────────────────────────────────────────────────────────────

config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}

# Convenience alias - resolves the active config class from LEDGER_ENV.
# Defaults to development if the variable is not set.
ActiveConfig: type[BaseConfig] = config_by_name.get(
    os.getenv("LEDGER_ENV", "development"),
    DevelopmentConfig,
)
