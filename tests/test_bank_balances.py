"""Tests for bank statement period selection and cash tracking."""

from datetime import date
from decimal import Decimal

import pytest

from finstate.domain.bank_balances import BankBalanceTracker, CashPosition, select_latest_period
from finstate.domain.entities import BankAccount, BankStatementPeriod, PeriodAnchor
from finstate.domain.errors import QueryFailure


def _period(start, end, opening, closing, bank_account_id=1):
    return BankStatementPeriod(
        bank_account_id=bank_account_id,
        period_start=start,
        period_end=end,
        opening_balance=Decimal(opening),
        closing_balance=Decimal(closing),
    )


JANUARY = _period(date(2024, 1, 1), date(2024, 1, 31), "1000", "1500")
FEBRUARY = _period(date(2024, 2, 1), date(2024, 2, 29), "1500", "1800")
MARCH = _period(date(2024, 3, 1), date(2024, 3, 31), "1800", "2100")


class TestSelectLatestPeriod:
    def test_picks_latest_end_on_or_before_date_not_globally_latest(self):
        periods = [JANUARY, MARCH]

        assert select_latest_period(periods, date(2024, 2, 15)) == JANUARY

    def test_end_anchor_is_inclusive(self):
        assert select_latest_period([JANUARY, FEBRUARY], date(2024, 2, 29)) == FEBRUARY

    def test_returns_none_when_nothing_qualifies(self):
        assert select_latest_period([FEBRUARY], date(2024, 1, 31)) is None
        assert select_latest_period([], date(2024, 1, 31)) is None

    def test_start_anchor_compares_period_start(self):
        periods = [JANUARY, FEBRUARY, MARCH]

        assert select_latest_period(periods, date(2024, 2, 1), PeriodAnchor.START) == FEBRUARY
        assert select_latest_period(periods, date(2024, 2, 20), PeriodAnchor.START) == FEBRUARY

    def test_start_anchor_tie_prefers_latest_end(self):
        short = _period(date(2024, 1, 1), date(2024, 1, 15), "1000", "1200")

        assert select_latest_period([JANUARY, short], date(2024, 1, 10), PeriodAnchor.START) == JANUARY

    def test_end_anchor_tie_prefers_latest_start(self):
        late_start = _period(date(2024, 1, 16), date(2024, 1, 31), "1200", "1600")

        assert select_latest_period([late_start, JANUARY], date(2024, 2, 1)) == late_start

    def test_full_tie_prefers_last_recorded(self):
        first = _period(date(2024, 1, 1), date(2024, 1, 31), "1000", "1500")
        second = _period(date(2024, 1, 1), date(2024, 1, 31), "1000", "1550")

        for anchor in PeriodAnchor:
            assert select_latest_period([first, second], date(2024, 2, 1), anchor) is second


def _add_account_with_periods(temp_db, bank_service, entity_id, name, periods):
    bank_account_id = bank_service.create_bank_account(entity_id, name)
    for start, end, opening, closing in periods:
        bank_service.add_statement_period(
            bank_account_id, start, end, Decimal(opening), Decimal(closing)
        )
    return temp_db.get_bank_account(bank_account_id)


class TestBankBalanceTracker:
    def test_cash_as_of_sums_closing_balances(self, temp_db, bank_service, sample_entity):
        current = _add_account_with_periods(
            temp_db,
            bank_service,
            sample_entity.id,
            "Current",
            [
                (date(2024, 1, 1), date(2024, 1, 31), "1000", "1500"),
                (date(2024, 3, 1), date(2024, 3, 31), "1800", "2100"),
            ],
        )
        savings = _add_account_with_periods(
            temp_db,
            bank_service,
            sample_entity.id,
            "Savings",
            [(date(2024, 1, 1), date(2024, 1, 31), "5000", "5010")],
        )
        empty = _add_account_with_periods(temp_db, bank_service, sample_entity.id, "New", [])
        tracker = BankBalanceTracker(temp_db, max_workers=2)

        balances = tracker.closing_balances([current, savings, empty], date(2024, 2, 15))

        assert balances == {
            current.id: Decimal("1500"),
            savings.id: Decimal("5010"),
            empty.id: Decimal("0"),
        }
        assert tracker.cash_as_of([current, savings, empty], date(2024, 2, 15)) == Decimal("6510")

    def test_cash_for_period(self, temp_db, bank_service, sample_entity):
        account = _add_account_with_periods(
            temp_db,
            bank_service,
            sample_entity.id,
            "Current",
            [
                (date(2024, 1, 1), date(2024, 1, 31), "1000", "1500"),
                (date(2024, 2, 1), date(2024, 2, 29), "1500", "1800"),
                (date(2024, 3, 1), date(2024, 3, 31), "1800", "2100"),
            ],
        )
        tracker = BankBalanceTracker(temp_db)

        cash = tracker.cash_for_period([account], date(2024, 2, 1), date(2024, 3, 31))

        assert cash == CashPosition(beginning=Decimal("1500"), ending=Decimal("2100"))

    def test_no_bank_accounts(self, temp_db):
        tracker = BankBalanceTracker(temp_db)

        assert tracker.cash_as_of([], date(2024, 1, 31)) == Decimal("0")
        assert tracker.cash_for_period([], date(2024, 1, 1), date(2024, 1, 31)) == CashPosition(
            Decimal("0"), Decimal("0")
        )


class FailingPeriodDatabase:
    """Test double whose statement period lookup always fails."""

    def get_latest_statement_period(self, bank_account_id, on_or_before, anchor):
        raise RuntimeError("connection reset")


def test_failed_lookup_counts_as_zero(caplog):
    tracker = BankBalanceTracker(FailingPeriodDatabase())

    total = tracker.cash_as_of([BankAccount(id=7, entity_id=1, name="Current")], date(2024, 1, 31))

    assert total == Decimal("0")
    assert "latest_statement_period" in caplog.text


def test_failed_lookup_raises_in_strict_mode():
    tracker = BankBalanceTracker(FailingPeriodDatabase(), strict=True)

    with pytest.raises(QueryFailure) as excinfo:
        tracker.cash_as_of([BankAccount(id=7, entity_id=1, name="Current")], date(2024, 1, 31))

    assert excinfo.value.entity_id == 7
    assert isinstance(excinfo.value.cause, RuntimeError)
