"""Shared pytest fixtures for budgetbook tests."""

import tempfile
import os
from pathlib import Path
import pytest

from budgetbook.database.factories import create_sqlite_database
from budgetbook.domain.account import AccountService
from budgetbook.domain.category import CategoryService
from budgetbook.domain.csv_import import CSVImportService
from budgetbook.domain.entities import TransactionType
from budgetbook.domain.plan import PlanService
from budgetbook.domain.summary import SummaryService
from budgetbook.domain.transaction import TransactionService

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


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
def owner_id():
    """Owner the service fixtures are scoped to."""
    return OWNER


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, OWNER)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db, OWNER)


@pytest.fixture
def plan_service(temp_db):
    """Create a PlanService with a temporary database."""
    return PlanService(temp_db, OWNER)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, OWNER)


@pytest.fixture
def import_service(temp_db):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db, OWNER)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db, OWNER)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    return account_service.create_account(
        name="Checking", institution_name="Test Bank", last4="1234"
    )


@pytest.fixture
def sample_categories(category_service):
    """Create a few expense and income categories, keyed by name."""
    categories = {}
    for sort_order, name in enumerate(["Rent", "Groceries", "Dining"], start=1):
        categories[name] = category_service.create_category(
            name, TransactionType.EXPENSE, sort_order=sort_order
        )
    for sort_order, name in enumerate(["Salary", "Interest"], start=1):
        categories[name] = category_service.create_category(
            name, TransactionType.INCOME, sort_order=sort_order
        )
    return categories


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
