"""SQLAlchemy models for capitrack database."""

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
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False, default="BANK")
    currency_code = Column(String(3), nullable=False)
    initial_balance = Column(Numeric(18, 2), nullable=False, default=0)
    current_balance = Column(Numeric(18, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="account", foreign_keys="Transaction.account_id"
    )
    transfers_to = relationship(
        "Transaction",
        back_populates="transfer_to_account",
        foreign_keys="Transaction.transfer_to_account_id",
    )


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    kind = Column(String, nullable=False, default="EXPENSE")
    is_system_generated = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, default="OTHER")
    status = Column(String, nullable=False, default="ACTIVE")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    total_budget = Column(Numeric(18, 2), nullable=True)
    currency_code = Column(String(3), nullable=True)
    owner = Column(String, nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="project")
    investments = relationship("Investment", back_populates="project")


class Investment(Base):
    """Investment and fixed asset model."""

    __tablename__ = "investments"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="ACTIVE")
    initial_amount = Column(Numeric(18, 2), nullable=False)
    current_amount = Column(Numeric(18, 2), nullable=True)
    currency_code = Column(String(3), nullable=False)
    purchase_price = Column(Numeric(18, 2), nullable=True)
    salvage_value = Column(Numeric(18, 2), nullable=True)
    useful_life = Column(Integer, nullable=True)
    depreciation_type = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    interest_rate = Column(Numeric(8, 4), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="investments")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    amount = Column(Numeric(18, 2), nullable=False)
    currency_code = Column(String(3), nullable=False)
    type = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    transfer_to_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    target_amount = Column(Numeric(18, 2), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    investment_id = Column(Integer, ForeignKey("investments.id"), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    note = Column(String, nullable=True)
    merchant = Column(String, nullable=True)
    source = Column(String, nullable=False, default="MANUAL")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship(
        "Account", back_populates="transactions", foreign_keys=[account_id]
    )
    transfer_to_account = relationship(
        "Account", back_populates="transfers_to", foreign_keys=[transfer_to_account_id]
    )
    category = relationship("Category", back_populates="transactions")
    project = relationship("Project", back_populates="transactions")


class RecurringRule(Base):
    """Recurring charge model."""

    __tablename__ = "recurring_rules"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    currency_code = Column(String(3), nullable=False)
    frequency = Column(String, nullable=False)
    interval = Column(Integer, nullable=False, default=1)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
