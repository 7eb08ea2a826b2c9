"""Tests for FinancialStatementService."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

import pytest

from finstate.config import GeneratorSettings
from finstate.domain.chart import DEFAULT_UK_CHART
from finstate.domain.errors import QueryFailure, ValidationError
from finstate.domain.generator import (
    FinancialStatementService,
    StatementKind,
    parse_statement_kind,
)
from finstate.domain.reports import (
    BalanceSheet,
    CashFlowStatement,
    ProfitAndLossStatement,
    TrialBalance,
)

START = date(2024, 1, 1)
END = date(2024, 3, 31)


def _add(transaction_service, entity_id, day, amount, is_debit, category=None, transaction_type=None):
    return transaction_service.create_transaction(
        entity_id=entity_id,
        date=day,
        amount=Decimal(amount),
        is_debit=is_debit,
        category=category,
        transaction_type=transaction_type,
    )


@pytest.fixture
def service(temp_db):
    return FinancialStatementService(temp_db)


@pytest.fixture
def bank_account_id(bank_service, sample_entity):
    bank_account_id = bank_service.create_bank_account(sample_entity.id, "Current")
    bank_service.add_statement_period(
        bank_account_id, date(2024, 1, 1), date(2024, 1, 31), Decimal("1000"), Decimal("2500")
    )
    bank_service.add_statement_period(
        bank_account_id, date(2024, 2, 1), date(2024, 2, 29), Decimal("2500"), Decimal("2700")
    )
    bank_service.add_statement_period(
        bank_account_id, date(2024, 4, 1), date(2024, 4, 30), Decimal("3100"), Decimal("3000")
    )
    return bank_account_id


class TestProfitAndLoss:
    def test_income_and_expense(self, service, transaction_service, sample_entity):
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "1000", False, "Sales")
        _add(transaction_service, sample_entity.id, date(2024, 2, 5), "400", True, "Office Supplies")

        pnl = service.profit_and_loss(sample_entity.id, START, END)

        assert pnl.revenue.total == Decimal("1000")
        assert pnl.expenses.total == Decimal("400")
        assert pnl.net_income == Decimal("600")
        assert pnl.currency == "GBP"

    def test_transactions_outside_period_are_ignored(self, service, transaction_service, sample_entity):
        _add(transaction_service, sample_entity.id, date(2023, 12, 31), "999", False, "Sales")
        _add(transaction_service, sample_entity.id, date(2024, 3, 31), "10", False, "Sales")
        _add(transaction_service, sample_entity.id, date(2024, 4, 1), "999", False, "Sales")

        pnl = service.profit_and_loss(sample_entity.id, START, END)

        assert pnl.revenue.total == Decimal("10")

    def test_mappings_are_applied(self, service, transaction_service, chart_service, sample_entity):
        chart_service.add_mapping(sample_entity.id, "Client Payments", "4200")
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "750", False, "Client Payments")

        pnl = service.profit_and_loss(sample_entity.id, START, END)

        assert [(i.account_code, i.amount) for i in pnl.revenue.items] == [("4200", Decimal("750"))]

    def test_start_after_end_is_rejected(self, service, sample_entity):
        with pytest.raises(ValidationError, match="after end date"):
            service.profit_and_loss(sample_entity.id, END, START)


class TestBalanceSheet:
    def test_bank_cash_from_latest_period_on_or_before(
        self, service, transaction_service, sample_entity, bank_account_id
    ):
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "300", True, "Inventory")

        sheet = service.balance_sheet(sample_entity.id, date(2024, 3, 15))

        amounts = {item.account_code: item.amount for item in sheet.assets.current.items}
        assert amounts["1100"] == Decimal("2700")
        assert amounts["1300"] == Decimal("300")
        assert sheet.assets.total == Decimal("3000")

    def test_includes_all_transactions_up_to_date(self, service, transaction_service, sample_entity):
        _add(transaction_service, sample_entity.id, date(2020, 6, 1), "5000", False, "Share Capital")
        _add(transaction_service, sample_entity.id, date(2024, 6, 1), "100", False, "Share Capital")

        sheet = service.balance_sheet(sample_entity.id, END)

        assert sheet.equity.total == Decimal("5000")
        assert sheet.as_of_date == END

    def test_entity_without_chart_has_cash_only(self, service, entity_service, bank_service):
        entity_id = entity_service.create_entity("Empty Ltd", currency="EUR")
        bank_account_id = bank_service.create_bank_account(entity_id, "Current")
        bank_service.add_statement_period(
            bank_account_id, START, date(2024, 1, 31), Decimal("0"), Decimal("42")
        )

        sheet = service.balance_sheet(entity_id, END)

        assert [(i.account_code, i.amount) for i in sheet.assets.current.items] == [
            ("1100", Decimal("42"))
        ]
        assert sheet.currency == "EUR"


class TestCashFlow:
    def test_beginning_and_ending_cash(
        self, service, transaction_service, sample_entity, bank_account_id
    ):
        _add(transaction_service, sample_entity.id, date(2024, 2, 10), "500", False, "Sales", "receipt")
        _add(transaction_service, sample_entity.id, date(2024, 2, 11), "100", True, None, "transfer")
        _add(transaction_service, sample_entity.id, date(2024, 2, 12), "50", True, "Loan", "withdrawal")

        statement = service.cash_flow(sample_entity.id, date(2024, 2, 1), END)

        assert statement.beginning_cash == Decimal("2500")
        assert statement.ending_cash == Decimal("2700")
        # Uncategorized transfer and "Loan" fall back to the expense code
        assert statement.operating_activities.net_income == Decimal("350")
        assert statement.operating_activities.changes_in_working_capital == Decimal("150")
        assert statement.operating_activities.total == Decimal("500")
        assert statement.investing_activities.total == Decimal("-100")
        assert statement.financing_activities.total == Decimal("-50")
        assert statement.net_change_in_cash == Decimal("350")

    def test_without_bank_accounts(self, service, sample_entity):
        statement = service.cash_flow(sample_entity.id, START, END)

        assert statement.beginning_cash == Decimal("0")
        assert statement.ending_cash == Decimal("0")
        assert statement.net_change_in_cash == Decimal("0")


class TestTrialBalance:
    def test_empty_period_is_balanced(self, service, sample_entity):
        trial = service.trial_balance(sample_entity.id, END)

        assert len(trial.accounts) == len(DEFAULT_UK_CHART)
        assert trial.total_debits == Decimal("0")
        assert trial.total_credits == Decimal("0")
        assert trial.is_balanced is True

    def test_unbalanced_columns(self, service, transaction_service, sample_entity):
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "1000", False, "Sales")
        _add(transaction_service, sample_entity.id, date(2024, 1, 11), "400", True, "Travel")

        trial = service.trial_balance(sample_entity.id, END)

        assert trial.total_debits == Decimal("400")
        assert trial.total_credits == Decimal("1000")
        assert trial.is_balanced is False

    def test_epsilon_comes_from_settings(self, temp_db, transaction_service, sample_entity):
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "100.00", False, "Sales")
        _add(transaction_service, sample_entity.id, date(2024, 1, 11), "99.50", True, "Travel")
        service = FinancialStatementService(
            temp_db, GeneratorSettings(balance_epsilon=Decimal("1.00"))
        )

        assert service.trial_balance(sample_entity.id, END).is_balanced


class TestCurrency:
    def test_default_currency_when_entity_has_none(self, temp_db, entity_service, chart_service):
        entity_id = entity_service.create_entity("No Currency Ltd")
        chart_service.init_default_chart(entity_id)

        assert FinancialStatementService(temp_db).profit_and_loss(entity_id, START, END).currency == "GBP"
        settings = GeneratorSettings(default_currency="USD")
        assert (
            FinancialStatementService(temp_db, settings).balance_sheet(entity_id, END).currency
            == "USD"
        )


class FailingDatabase:
    """Test double delegating to a real database except for failing reads."""

    def __init__(self, db, failing):
        self._db = db
        self._failing = set(failing)

    def __getattr__(self, name):
        if name in self._failing:
            def fail(*args, **kwargs):
                raise RuntimeError(f"{name} unavailable")

            return fail
        return getattr(self._db, name)


class TestReadFailures:
    def test_failed_read_is_treated_as_empty(self, temp_db, transaction_service, sample_entity, caplog):
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "1000", False, "Sales")
        db = FailingDatabase(temp_db, ["list_transactions"])

        pnl = FinancialStatementService(db).profit_and_loss(sample_entity.id, START, END)

        assert pnl.revenue.total == Decimal("0")
        assert pnl.net_income == Decimal("0")
        assert "transactions" in caplog.text

    def test_failed_chart_read_produces_empty_sections(self, temp_db, sample_entity):
        db = FailingDatabase(temp_db, ["list_chart_of_accounts"])

        trial = FinancialStatementService(db).trial_balance(sample_entity.id, END)

        assert trial.accounts == ()
        assert trial.is_balanced

    def test_failed_currency_read_uses_default(self, temp_db, sample_entity):
        db = FailingDatabase(temp_db, ["get_entity_currency"])
        settings = GeneratorSettings(default_currency="EUR")

        pnl = FinancialStatementService(db, settings).profit_and_loss(sample_entity.id, START, END)

        assert pnl.currency == "EUR"

    def test_failed_bank_lookup_counts_as_zero(self, temp_db, sample_entity, bank_account_id):
        db = FailingDatabase(temp_db, ["get_latest_statement_period"])

        sheet = FinancialStatementService(db).balance_sheet(sample_entity.id, END)

        amounts = {item.account_code: item.amount for item in sheet.assets.current.items}
        assert amounts["1100"] == Decimal("0")

    def test_strict_reads_raise(self, temp_db, sample_entity):
        db = FailingDatabase(temp_db, ["list_account_mappings"])
        service = FinancialStatementService(db, GeneratorSettings(strict_reads=True))

        with pytest.raises(QueryFailure) as excinfo:
            service.trial_balance(sample_entity.id, END)

        assert excinfo.value.query == "account_mappings"
        assert excinfo.value.entity_id == sample_entity.id


class TestGenerate:
    @pytest.mark.parametrize(
        "kind,expected",
        [
            ("pl", ProfitAndLossStatement),
            ("income-statement", ProfitAndLossStatement),
            ("profit-and-loss", ProfitAndLossStatement),
            ("bs", BalanceSheet),
            ("balance-sheet", BalanceSheet),
            ("cf", CashFlowStatement),
            ("CASH-FLOW", CashFlowStatement),
            ("tb", TrialBalance),
            (StatementKind.TRIAL_BALANCE, TrialBalance),
        ],
    )
    def test_aliases(self, service, sample_entity, kind, expected):
        report = service.generate(kind, sample_entity.id, START, END, as_of_date=END)

        assert isinstance(report, expected)

    def test_unknown_kind(self, service, sample_entity):
        with pytest.raises(ValidationError, match="Invalid statement type"):
            service.generate("ledger", sample_entity.id, START, END, END)

    def test_period_statements_require_dates(self, service, sample_entity):
        with pytest.raises(ValidationError, match="Start date and end date are required"):
            service.generate("pl", sample_entity.id, start_date=START)
        with pytest.raises(ValidationError):
            service.generate("cash-flow", sample_entity.id, end_date=END)

    def test_as_of_statements_require_date(self, service, sample_entity):
        with pytest.raises(ValidationError, match="As of date is required"):
            service.generate("bs", sample_entity.id, START, END)

    def test_concurrent_requests_are_independent(
        self, service, entity_service, chart_service, transaction_service, sample_entity
    ):
        other_id = entity_service.create_entity("Other Ltd", currency="EUR")
        chart_service.init_default_chart(other_id)
        _add(transaction_service, sample_entity.id, date(2024, 1, 10), "100", False, "Sales")
        _add(transaction_service, other_id, date(2024, 1, 10), "250", False, "Sales")

        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [
                pool.submit(service.profit_and_loss, entity_id, START, END)
                for entity_id in (sample_entity.id, other_id) * 3
            ]
            results = [future.result() for future in futures]

        assert [r.net_income for r in results] == [Decimal("100"), Decimal("250")] * 3
        assert [r.currency for r in results[:2]] == ["GBP", "EUR"]


def test_parse_statement_kind():
    assert parse_statement_kind(" PL ") == StatementKind.PROFIT_AND_LOSS
    assert StatementKind.CASH_FLOW.is_period_statement
    assert not StatementKind.BALANCE_SHEET.is_period_statement
