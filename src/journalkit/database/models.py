"""SQLAlchemy models for journalkit database."""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Enum,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

from journalkit.domain.entities import AccountType, TransactionStatus

Base = declarative_base()


class DecimalText(TypeDecorator):
    """Exact decimal stored as plain text so its scale survives a round trip."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return format(value, "f")

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class Journal(Base):
    """Journal metadata model."""

    __tablename__ = "journals"

    id = Column(Integer, primary_key=True)
    logo = Column(String(500), nullable=True)
    title = Column(String(500), nullable=True)
    subtitle = Column(String(500), nullable=True)
    currency = Column(String(10), nullable=False)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    commodities = relationship(
        "JournalCommodity",
        back_populates="journal",
        cascade="all, delete-orphan",
        order_by="JournalCommodity.order_index",
    )
    accounts = relationship("Account", back_populates="journal", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="journal", cascade="all, delete-orphan")


class JournalCommodity(Base):
    """Commodity declaration of a journal."""

    __tablename__ = "journal_commodities"

    id = Column(Integer, primary_key=True)
    journal_id = Column(Integer, ForeignKey("journals.id"), nullable=False)
    code = Column(String, nullable=False)
    display_precision = Column(String(20), nullable=False)
    order_index = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("journal_id", "code", name="uq_journal_commodity"),)

    # Relationships
    journal = relationship("Journal", back_populates="commodities")


class Account(Base):
    """Account model with hierarchical structure."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    journal_id = Column(Integer, ForeignKey("journals.id"), nullable=False)
    account_number = Column(String, nullable=False)
    name = Column(String, nullable=False)
    full_path = Column(String, nullable=False)
    type = Column(Enum(AccountType), nullable=False)
    note = Column(String(1000), nullable=True)
    parent_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    # Full path identifies an account within its journal
    __table_args__ = (UniqueConstraint("journal_id", "full_path", name="uq_journal_account_path"),)

    # Relationships
    journal = relationship("Journal", back_populates="accounts")
    parent = relationship("Account", remote_side=[id], backref="children")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    journal_id = Column(Integer, ForeignKey("journals.id"), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(Enum(TransactionStatus), nullable=False)
    description = Column(String(1000), nullable=False)
    partner_id = Column(String(100), nullable=True)
    external_id = Column(String, nullable=True)

    # Relationships
    journal = relationship("Journal", back_populates="transactions")
    postings = relationship(
        "Posting",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Posting.order_index",
    )
    tags = relationship(
        "Tag",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Tag.order_index",
    )


class Posting(Base):
    """Posting model."""

    __tablename__ = "postings"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    commodity = Column(String, nullable=False)
    amount = Column(DecimalText, nullable=False)
    note = Column(String(1000), nullable=True)
    order_index = Column(Integer, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="postings")
    account = relationship("Account")


class Tag(Base):
    """Transaction tag model."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    tag_key = Column(String, nullable=False)
    tag_value = Column(String, nullable=True)
    order_index = Column(Integer, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="tags")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
