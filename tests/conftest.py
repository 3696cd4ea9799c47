"""Shared pytest fixtures for pettycash tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
from decimal import Decimal
import pytest

from pettycash.database.factories import create_sqlite_database
from pettycash.domain.account import AccountService
from pettycash.domain.ledger import LedgerService
from pettycash.domain.mutator import BalanceMutator
from pettycash.domain.reports import ReportService
from pettycash.domain.session import SessionContext


class StepClock:
    """Clock returning a new time, one step later, on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now

    def set(self, moment: datetime) -> None:
        self.current = moment


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
def clock():
    """Deterministic clock starting 2024-03-15 09:00 UTC."""
    return StepClock(datetime(2024, 3, 15, 9, 0, tzinfo=UTC))


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def mutator(temp_db, clock):
    """Create a BalanceMutator with a temporary database and fixed clock."""
    return BalanceMutator(temp_db, clock=clock)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_user(account_service):
    """Create a regular user with zero balances."""
    account_id = account_service.create_account(
        name="Asha", pin="1234", role="user", salary=Decimal("25000")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def admin_user(account_service):
    """Create an admin account."""
    account_id = account_service.create_account(name="Admin", pin="0000", role="admin")
    return account_service.get_account(account_id)


@pytest.fixture
def session_path(tmp_path):
    """Path of a session file private to the test."""
    return tmp_path / "session.json"


@pytest.fixture
def session(session_path):
    """Create an empty SessionContext backed by a temporary file."""
    return SessionContext(session_path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db, session_path):
    """Global CLI options pointing at the temporary database and session."""
    return ["--db-path", temp_db.database_path, "--session-path", str(session_path)]


@pytest.fixture
def as_admin(cli_runner, cli_args, admin_user):
    """Log the admin in through the CLI and return the global options."""
    from pettycash.cli.main import cli

    result = cli_runner.invoke(cli, cli_args + ["login", "Admin", "--pin", "0000"])
    assert result.exit_code == 0, result.output
    return cli_args


@pytest.fixture
def as_user(cli_runner, cli_args, sample_user):
    """Log the sample user in through the CLI and return the global options."""
    from pettycash.cli.main import cli

    result = cli_runner.invoke(cli, cli_args + ["login", "Asha", "--pin", "1234"])
    assert result.exit_code == 0, result.output
    return cli_args
