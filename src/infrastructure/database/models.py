"""SQLAlchemy ORM models for the credit ledger store."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class CustomerLedgerModel(Base):
    """One row per customer; carries the optimistic-lock version."""

    __tablename__ = "store_credit_ledgers"

    customer_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    entries: Mapped[list["LedgerEntryModel"]] = relationship(
        "LedgerEntryModel",
        back_populates="ledger",
        cascade="all, delete-orphan",
    )
    applied_orders: Mapped[list["AppliedOrderModel"]] = relationship(
        "AppliedOrderModel",
        back_populates="ledger",
        cascade="all, delete-orphan",
    )
    transactions: Mapped[list["CreditTransactionModel"]] = relationship(
        "CreditTransactionModel",
        back_populates="ledger",
        cascade="all, delete-orphan",
        order_by="CreditTransactionModel.created_at",
    )


class LedgerEntryModel(Base):
    """Persisted (customer, month) ledger entry."""

    __tablename__ = "store_credit_ledger_entries"
    __table_args__ = (
        UniqueConstraint("customer_id", "year", "month", name="uq_ledger_entry_month"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    customer_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("store_credit_ledgers.customer_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    revenue_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    earned_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    redeemed_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    ledger: Mapped["CustomerLedgerModel"] = relationship(
        "CustomerLedgerModel",
        back_populates="entries",
    )


class AppliedOrderModel(Base):
    """Order ids already applied; the primary key enforces global idempotency."""

    __tablename__ = "store_credit_applied_orders"

    order_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    customer_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("store_credit_ledgers.customer_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    order_total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    credit_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    rate_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    processed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    ledger: Mapped["CustomerLedgerModel"] = relationship(
        "CustomerLedgerModel",
        back_populates="applied_orders",
    )


class CreditTransactionModel(Base):
    """Append-only credit history line."""

    __tablename__ = "store_credit_transactions"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    customer_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("store_credit_ledgers.customer_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    ledger: Mapped["CustomerLedgerModel"] = relationship(
        "CustomerLedgerModel",
        back_populates="transactions",
    )
