"""SQLAlchemy models for budgetbook database."""

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
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    institution_name = Column(String, nullable=True)
    last4 = Column(String(4), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")
    import_batches = relationship("ImportBatch", back_populates="account")


class Category(Base):
    """Budget category model.

    Names are unique per (owner, type) ignoring case; the service layer
    enforces this since SQL collations differ between backends.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String(120), nullable=False)
    type = Column(String(16), nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")
    plans = relationship("Plan", back_populates="category")


class Transaction(Base):
    """Transaction model. ``amount`` is a positive magnitude."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    month_key = Column(String(7), nullable=False)
    type = Column(String(16), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(300), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    external_id = Column(String(200), nullable=True)
    dedupe_fingerprint = Column(String(8), nullable=True)
    import_batch_id = Column(Integer, ForeignKey("import_batches.id"), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_owner_month", "owner_id", "month_key"),
        Index("ix_transactions_account_external_id", "owner_id", "account_id", "external_id"),
        Index(
            "ix_transactions_account_fingerprint",
            "owner_id",
            "account_id",
            "dedupe_fingerprint",
        ),
    )

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
    import_batch = relationship("ImportBatch", back_populates="transactions")


class Plan(Base):
    """Planned amount per (owner, month, category)."""

    __tablename__ = "plans"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    month_key = Column(String(7), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    planned_amount = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "month_key", "category_id", name="uq_plan_owner_month_category"),
    )

    # Relationships
    category = relationship("Category", back_populates="plans")


class MonthSetting(Base):
    """Starting balance per (owner, month)."""

    __tablename__ = "month_settings"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    month_key = Column(String(7), nullable=False)
    starting_balance = Column(Numeric(12, 2), nullable=False, default=0)

    __table_args__ = (UniqueConstraint("owner_id", "month_key", name="uq_month_setting_owner_month"),)


class CSVMapping(Base):
    """Saved header mapping, one per (owner, account)."""

    __tablename__ = "csv_mappings"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    date_column_index = Column(Integer, nullable=False)
    amount_column_index = Column(Integer, nullable=False)
    description_column_index = Column(Integer, nullable=False)
    category_column_index = Column(Integer, nullable=True)
    external_id_column_index = Column(Integer, nullable=True)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "account_id", name="uq_csv_mapping_owner_account"),)


class ImportBatch(Base):
    """Audit record of one statement upload."""

    __tablename__ = "import_batches"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    source_name = Column(String, nullable=False)
    status = Column(String(32), nullable=False)
    inserted_count = Column(Integer, default=0, nullable=False)
    skipped_duplicates = Column(Integer, default=0, nullable=False)
    parse_error_count = Column(Integer, default=0, nullable=False)
    warning_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    account = relationship("Account", back_populates="import_batches")
    transactions = relationship("Transaction", back_populates="import_batch")
    issues = relationship("ImportIssue", back_populates="import_batch", cascade="all, delete-orphan")


class ImportIssue(Base):
    """Row-level issue recorded during an import."""

    __tablename__ = "import_issues"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    import_batch_id = Column(Integer, ForeignKey("import_batches.id"), nullable=False)
    severity = Column(String(16), nullable=False)
    row_number = Column(Integer, nullable=True)
    message = Column(String(500), nullable=False)

    # Relationships
    import_batch = relationship("ImportBatch", back_populates="issues")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
