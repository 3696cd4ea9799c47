"""SQLAlchemy models for pettycash database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

# Ledger and expense rows keep their user_id after the account is deleted,
# so user_id is a plain indexed column rather than a foreign key.


class User(Base):
    """Account model holding the three running balances."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    pin = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")
    salary = Column(Numeric(12, 2), nullable=True)
    company_balance = Column(Numeric(12, 2), nullable=False, default=0)
    personal_balance = Column(Numeric(12, 2), nullable=False, default=0)
    salary_balance = Column(Numeric(12, 2), nullable=False, default=0)
    balance_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BalanceTransaction(Base):
    """Ledger entry model. Rows are written once and never updated."""

    __tablename__ = "balance_transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    salary_month = Column(Date, nullable=True)
    description = Column(String, nullable=True)
    actor_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False, index=True)


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    image = Column(String, nullable=True)
    ledger_entry_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False, index=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions may be opened from refresher and worker threads
        connect_args = {"check_same_thread": False, "timeout": 30}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
