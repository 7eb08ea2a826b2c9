"""Generator settings."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from finstate.domain.errors import ValidationError

DEFAULT_CURRENCY = "GBP"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class GeneratorSettings:
    """Settings for statement generation.

    Attributes:
        default_currency: Currency used when the entity has none configured
        balance_epsilon: Tolerance of the trial balance debit/credit check
        max_workers: Upper bound on concurrent reads within one call
        strict_reads: If True, failed reads raise QueryFailure instead of
            being treated as empty results
    """

    default_currency: str = DEFAULT_CURRENCY
    balance_epsilon: Decimal = Decimal("0.01")
    max_workers: int = 4
    strict_reads: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorSettings":
        """Build settings from FINSTATE_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        currency = env.get("FINSTATE_DEFAULT_CURRENCY", defaults.default_currency).strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError(f"Invalid FINSTATE_DEFAULT_CURRENCY '{currency}'")

        epsilon_raw = env.get("FINSTATE_BALANCE_EPSILON")
        epsilon = defaults.balance_epsilon
        if epsilon_raw is not None:
            try:
                epsilon = Decimal(epsilon_raw.strip())
            except InvalidOperation:
                raise ValidationError(
                    f"Invalid FINSTATE_BALANCE_EPSILON '{epsilon_raw}'"
                ) from None
            if epsilon <= 0:
                raise ValidationError("FINSTATE_BALANCE_EPSILON must be positive")

        workers_raw = env.get("FINSTATE_MAX_WORKERS")
        workers = defaults.max_workers
        if workers_raw is not None:
            try:
                workers = int(workers_raw)
            except ValueError:
                raise ValidationError(f"Invalid FINSTATE_MAX_WORKERS '{workers_raw}'") from None
            if workers < 1:
                raise ValidationError("FINSTATE_MAX_WORKERS must be at least 1")

        strict_raw = env.get("FINSTATE_STRICT_READS", "").strip().lower()
        if strict_raw in _TRUE_VALUES:
            strict = True
        elif strict_raw in _FALSE_VALUES:
            strict = False
        else:
            raise ValidationError(f"Invalid FINSTATE_STRICT_READS '{strict_raw}'")

        return cls(
            default_currency=currency,
            balance_epsilon=epsilon,
            max_workers=workers,
            strict_reads=strict,
        )
