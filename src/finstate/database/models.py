"""SQLAlchemy models for finstate database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class Entity(Base):
    """Business entity model."""

    __tablename__ = "entities"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    currency = Column(String(3), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("LedgerAccount", back_populates="entity", cascade="all, delete-orphan")
    mappings = relationship("AccountMapping", back_populates="entity", cascade="all, delete-orphan")
    bank_accounts = relationship("BankAccount", back_populates="entity", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="entity", cascade="all, delete-orphan")


class LedgerAccount(Base):
    """Chart of accounts entry model."""

    __tablename__ = "chart_of_accounts"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("entity_id", "code", name="uq_entity_account_code"),
        CheckConstraint(
            "account_type IN ('asset', 'liability', 'equity', 'income', 'expense')",
            name="ck_account_type",
        ),
    )

    # Relationships
    entity = relationship("Entity", back_populates="accounts")


class AccountMapping(Base):
    """Category to account mapping model.

    A missing subcategory is stored as an empty string so the unique
    constraint also covers category-only mappings.
    """

    __tablename__ = "category_account_mappings"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    category = Column(String, nullable=False)
    subcategory = Column(String, nullable=False, default="")
    account_code = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("entity_id", "category", "subcategory", name="uq_entity_category_mapping"),
    )

    # Relationships
    entity = relationship("Entity", back_populates="mappings")


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entity = relationship("Entity", back_populates="bank_accounts")
    statement_periods = relationship(
        "BankStatementPeriod", back_populates="bank_account", cascade="all, delete-orphan"
    )


class BankStatementPeriod(Base):
    """Reconciled bank statement period model."""

    __tablename__ = "bank_statement_periods"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    opening_balance = Column(Numeric(12, 2), nullable=False)
    closing_balance = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="statement_periods")


class Transaction(Base):
    """Categorized transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    is_debit = Column(Boolean, nullable=False)
    category = Column(String, nullable=True)
    subcategory = Column(String, nullable=True)
    transaction_type = Column(String, nullable=True)
    description = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entity = relationship("Entity", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    SQLite connections are opened with ``check_same_thread`` disabled since
    statement reads run on worker threads, each with its own session.
    """
    engine_kwargs = {}
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # A single shared connection keeps the in-memory database alive
            engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=False, **engine_kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
