"""Shared pytest fixtures for finstate tests."""

import tempfile
import os
import pytest
from click.testing import CliRunner

from finstate.database.factories import create_sqlite_database
from finstate.domain.bank import BankAccountService
from finstate.domain.chart import ChartOfAccountsService
from finstate.domain.entity import EntityService
from finstate.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def entity_service(temp_db):
    """Create an EntityService with a temporary database."""
    return EntityService(temp_db)


@pytest.fixture
def chart_service(temp_db):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db)


@pytest.fixture
def bank_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def sample_entity(entity_service, chart_service):
    """Create an entity with the default UK chart of accounts."""
    entity_id = entity_service.create_entity(name="Acme Ltd", currency="GBP")
    chart_service.init_default_chart(entity_id)
    return entity_service.get_entity(entity_id)


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing."""
    return CliRunner()
