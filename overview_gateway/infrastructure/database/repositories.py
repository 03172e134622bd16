"""Data access layer for the overview read model - every query is tenant-scoped"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from overview_gateway.domain import models as domain
from overview_gateway.infrastructure.database.models import (
    Account,
    Bill,
    Category,
    Entity,
    FiscalPeriod,
    Invoice,
    JournalEntry,
    Transaction,
)
from overview_gateway.utils.date_utils import ensure_utc

OPEN_INVOICE_STATUSES = ("SENT", "OVERDUE")
OPEN_BILL_STATUSES = ("PENDING", "PARTIALLY_PAID", "OVERDUE")
OVERDUE_STATUS = "OVERDUE"


def _entity_scope(tenant_id: str, entity_id: Optional[str]) -> list:
    """Filter clauses restricting a query (already joined to Entity) to one tenant"""
    clauses = [Entity.tenant_id == tenant_id]
    if entity_id:
        clauses.append(Entity.id == entity_id)
    return clauses


class AccountRepository:
    """Repository for account balances"""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self, tenant_id: str, entity_id: Optional[str] = None) -> List[domain.Account]:
        """Active, non-deleted accounts with the fields the net worth fold needs"""
        rows = self.db.execute(
            select(Account.id, Account.currency, Account.type, Account.current_balance, Account.entity_id)
            .join(Entity, Account.entity_id == Entity.id)
            .where(
                *_entity_scope(tenant_id, entity_id),
                Account.is_active.is_(True),
                Account.deleted_at.is_(None),
            )
        ).all()

        return [
            domain.Account(
                id=row.id,
                currency=row.currency,
                type=domain.AccountType(row.type.upper()),
                current_balance=row.current_balance,
                is_active=True,
                entity_id=row.entity_id,
            )
            for row in rows
        ]

    def count_by_active(self, tenant_id: str, entity_id: Optional[str] = None) -> domain.AccountCounts:
        """Active and total account counts from a single grouped query"""
        rows = self.db.execute(
            select(Account.is_active, func.count(Account.id))
            .join(Entity, Account.entity_id == Entity.id)
            .where(*_entity_scope(tenant_id, entity_id), Account.deleted_at.is_(None))
            .group_by(Account.is_active)
        ).all()

        active = sum(count for is_active, count in rows if is_active)
        inactive = sum(count for is_active, count in rows if not is_active)
        return domain.AccountCounts(active=active, total=active + inactive)


class TransactionRepository:
    """Repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def list_in_window(
        self,
        tenant_id: str,
        window: domain.Window,
        entity_id: Optional[str] = None,
    ) -> List[domain.Transaction]:
        """Non-deleted transactions inside the window, oldest first"""
        upper = Transaction.date <= window.end if window.end_inclusive else Transaction.date < window.end
        rows = self.db.execute(
            select(
                Transaction.id,
                Transaction.amount,
                Transaction.date,
                Transaction.account_id,
                Account.currency,
                Category.type.label("category_type"),
            )
            .join(Account, Transaction.account_id == Account.id)
            .join(Entity, Account.entity_id == Entity.id)
            .outerjoin(Category, Transaction.category_id == Category.id)
            .where(
                *_entity_scope(tenant_id, entity_id),
                Transaction.deleted_at.is_(None),
                Transaction.date >= window.start,
                upper,
            )
            .order_by(Transaction.date.asc())
        ).all()

        return [
            domain.Transaction(
                id=row.id,
                amount=row.amount,
                date=ensure_utc(row.date),
                currency=row.currency,
                category_type=domain.CategoryType(row.category_type) if row.category_type else None,
                account_id=row.account_id,
            )
            for row in rows
        ]


def _outstanding_stats(
    db: Session,
    model,
    open_statuses: Tuple[str, ...],
    tenant_id: str,
    entity_id: Optional[str],
) -> domain.OutstandingStats:
    """Outstanding (total - paid over open statuses) and overdue (same, OVERDUE only) in one query"""
    unpaid = model.total - model.paid_amount
    outstanding, overdue = db.execute(
        select(
            func.coalesce(func.sum(unpaid), 0),
            func.coalesce(func.sum(case((model.status == OVERDUE_STATUS, unpaid), else_=0)), 0),
        )
        .join(Entity, model.entity_id == Entity.id)
        .where(
            *_entity_scope(tenant_id, entity_id),
            model.deleted_at.is_(None),
            model.status.in_(open_statuses),
        )
    ).one()
    return domain.OutstandingStats(outstanding=int(outstanding), overdue=int(overdue))


class InvoiceRepository:
    """Repository for receivables totals"""

    def __init__(self, db: Session):
        self.db = db

    def stats(self, tenant_id: str, entity_id: Optional[str] = None) -> domain.OutstandingStats:
        return _outstanding_stats(self.db, Invoice, OPEN_INVOICE_STATUSES, tenant_id, entity_id)


class BillRepository:
    """Repository for payables totals"""

    def __init__(self, db: Session):
        self.db = db

    def stats(self, tenant_id: str, entity_id: Optional[str] = None) -> domain.OutstandingStats:
        return _outstanding_stats(self.db, Bill, OPEN_BILL_STATUSES, tenant_id, entity_id)


class CloseChecklistRepository:
    """Lookups and issue counts behind the month-end close checklist"""

    def __init__(self, db: Session):
        self.db = db

    def entity_exists(self, tenant_id: str, entity_id: str) -> bool:
        return (
            self.db.execute(
                select(Entity.id).where(Entity.id == entity_id, Entity.tenant_id == tenant_id)
            ).first()
            is not None
        )

    def get_period(self, tenant_id: str, period_id: str) -> Optional[domain.FiscalPeriod]:
        row = self.db.execute(
            select(FiscalPeriod)
            .join(Entity, FiscalPeriod.entity_id == Entity.id)
            .where(FiscalPeriod.id == period_id, Entity.tenant_id == tenant_id)
        ).scalar_one_or_none()
        if row is None:
            return None
        return domain.FiscalPeriod(
            id=row.id,
            name=row.name,
            entity_id=row.entity_id,
            start_date=ensure_utc(row.start_date),
            end_date=ensure_utc(row.end_date),
            status=row.status,
        )

    def _transactions_in_period(self, entity_id: str, start: datetime, end: datetime):
        return (
            select(func.count(Transaction.id))
            .join(Account, Transaction.account_id == Account.id)
            .where(
                Account.entity_id == entity_id,
                Transaction.deleted_at.is_(None),
                Transaction.date >= start,
                Transaction.date <= end,
            )
        )

    def count_unreconciled(self, entity_id: str, start: datetime, end: datetime) -> int:
        query = self._transactions_in_period(entity_id, start, end).where(Transaction.journal_entry_id.is_(None))
        return self.db.execute(query).scalar_one()

    def count_uncategorized(self, entity_id: str, start: datetime, end: datetime) -> int:
        query = self._transactions_in_period(entity_id, start, end).where(Transaction.category_id.is_(None))
        return self.db.execute(query).scalar_one()

    def count_overdue_invoices(self, entity_id: str, start: datetime, end: datetime) -> int:
        return self.db.execute(
            select(func.count(Invoice.id)).where(
                Invoice.entity_id == entity_id,
                Invoice.status == "SENT",
                Invoice.due_date >= start,
                Invoice.due_date <= end,
                Invoice.deleted_at.is_(None),
            )
        ).scalar_one()

    def count_overdue_bills(self, entity_id: str, start: datetime, end: datetime) -> int:
        return self.db.execute(
            select(func.count(Bill.id)).where(
                Bill.entity_id == entity_id,
                Bill.status == "PENDING",
                Bill.due_date >= start,
                Bill.due_date <= end,
                Bill.deleted_at.is_(None),
            )
        ).scalar_one()

    def count_draft_entries(self, entity_id: str, start: datetime, end: datetime) -> int:
        return self.db.execute(
            select(func.count(JournalEntry.id)).where(
                JournalEntry.entity_id == entity_id,
                JournalEntry.status == "DRAFT",
                JournalEntry.date >= start,
                JournalEntry.date <= end,
                JournalEntry.deleted_at.is_(None),
            )
        ).scalar_one()

    def count_open_earlier_periods(self, entity_id: str, before: datetime) -> int:
        return self.db.execute(
            select(func.count(FiscalPeriod.id)).where(
                FiscalPeriod.entity_id == entity_id,
                FiscalPeriod.status == "OPEN",
                FiscalPeriod.end_date < before,
            )
        ).scalar_one()
