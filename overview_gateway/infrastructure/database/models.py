"""SQLAlchemy ORM models for the bookkeeping read side"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Entity(Base):
    """Business or personal accounting unit owned by a tenant"""

    __tablename__ = "entity"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    functional_currency = Column(String(3), nullable=False, default="CAD")

    accounts = relationship("Account", back_populates="entity")


class Account(Base):
    """Bank, card, loan or investment account with its running balance"""

    __tablename__ = "account"

    id = Column(String(36), primary_key=True, default=_uuid)
    entity_id = Column(String(36), ForeignKey("entity.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    currency = Column(String(3), nullable=False)
    current_balance = Column(BigInteger, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    entity = relationship("Entity", back_populates="accounts")
    transactions = relationship("Transaction", back_populates="account")


class Category(Base):
    __tablename__ = "category"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)  # INCOME | EXPENSE | TRANSFER


class Transaction(Base):
    """Ledger line imported from a bank feed or entered manually"""

    __tablename__ = "transaction"

    id = Column(String(36), primary_key=True, default=_uuid)
    account_id = Column(String(36), ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("category.id"), nullable=True)
    journal_entry_id = Column(String(36), ForeignKey("journal_entry.id"), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    amount = Column(BigInteger, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("Account", back_populates="transactions")
    category = relationship("Category")


class Invoice(Base):
    """Customer invoice (accounts receivable)"""

    __tablename__ = "invoice"

    id = Column(String(36), primary_key=True, default=_uuid)
    entity_id = Column(String(36), ForeignKey("entity.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Text, nullable=False, default="DRAFT")  # DRAFT | SENT | OVERDUE | PAID | ...
    total = Column(BigInteger, nullable=False)
    paid_amount = Column(BigInteger, nullable=False, default=0)
    due_date = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class Bill(Base):
    """Vendor bill (accounts payable)"""

    __tablename__ = "bill"

    id = Column(String(36), primary_key=True, default=_uuid)
    entity_id = Column(String(36), ForeignKey("entity.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Text, nullable=False, default="PENDING")  # PENDING | PARTIALLY_PAID | OVERDUE | PAID
    total = Column(BigInteger, nullable=False)
    paid_amount = Column(BigInteger, nullable=False, default=0)
    due_date = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class FiscalPeriod(Base):
    __tablename__ = "fiscal_period"

    id = Column(String(36), primary_key=True, default=_uuid)
    entity_id = Column(String(36), ForeignKey("entity.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(Text, nullable=False, default="OPEN")  # OPEN | LOCKED | CLOSED


class JournalEntry(Base):
    __tablename__ = "journal_entry"

    id = Column(String(36), primary_key=True, default=_uuid)
    entity_id = Column(String(36), ForeignKey("entity.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    status = Column(Text, nullable=False, default="DRAFT")  # DRAFT | POSTED
    deleted_at = Column(DateTime(timezone=True), nullable=True)
