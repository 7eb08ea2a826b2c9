"""Tests for generator settings."""

from decimal import Decimal

import pytest

from finstate.config import GeneratorSettings
from finstate.domain.errors import ValidationError


def test_defaults():
    settings = GeneratorSettings.from_env({})

    assert settings == GeneratorSettings()
    assert settings.default_currency == "GBP"
    assert settings.balance_epsilon == Decimal("0.01")
    assert settings.strict_reads is False


def test_from_env():
    settings = GeneratorSettings.from_env(
        {
            "FINSTATE_DEFAULT_CURRENCY": "eur",
            "FINSTATE_BALANCE_EPSILON": "0.5",
            "FINSTATE_MAX_WORKERS": "8",
            "FINSTATE_STRICT_READS": "yes",
        }
    )

    assert settings == GeneratorSettings(
        default_currency="EUR",
        balance_epsilon=Decimal("0.5"),
        max_workers=8,
        strict_reads=True,
    )


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("FINSTATE_DEFAULT_CURRENCY", "USD")

    assert GeneratorSettings.from_env().default_currency == "USD"


@pytest.mark.parametrize(
    "name,value",
    [
        ("FINSTATE_DEFAULT_CURRENCY", "EURO"),
        ("FINSTATE_BALANCE_EPSILON", "abc"),
        ("FINSTATE_BALANCE_EPSILON", "0"),
        ("FINSTATE_MAX_WORKERS", "many"),
        ("FINSTATE_MAX_WORKERS", "0"),
        ("FINSTATE_STRICT_READS", "maybe"),
    ],
)
def test_invalid_values(name, value):
    with pytest.raises(ValidationError, match=name):
        GeneratorSettings.from_env({name: value})
