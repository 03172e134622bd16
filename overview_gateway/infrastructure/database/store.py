"""Async read facade: runs each repository call on its own session in a worker thread"""

import asyncio
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from overview_gateway.domain import models as domain
from overview_gateway.domain.exceptions import UpstreamReadError
from overview_gateway.infrastructure.database.repositories import (
    AccountRepository,
    BillRepository,
    CloseChecklistRepository,
    InvoiceRepository,
    TransactionRepository,
)
from overview_gateway.infrastructure.observability.metrics import upstream_read_failures_counter

T = TypeVar("T")


class ReadStore:
    """
    Tenant-scoped reads used by the overview services.

    Sessions are never shared: every call opens its own, so calls can be
    awaited concurrently with asyncio.gather.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _call(self, source: str, fn: Callable[[Session], T]) -> T:
        try:
            with self.session_factory() as db:
                return fn(db)
        except SQLAlchemyError as e:
            upstream_read_failures_counter.labels(source=source).inc()
            raise UpstreamReadError(source, str(e)) from e

    async def _read(self, source: str, fn: Callable[[Session], T]) -> T:
        return await asyncio.to_thread(self._call, source, fn)

    async def list_accounts(self, tenant_id: str, entity_id: Optional[str] = None) -> List[domain.Account]:
        return await self._read("accounts", lambda db: AccountRepository(db).list_active(tenant_id, entity_id))

    async def count_accounts(self, tenant_id: str, entity_id: Optional[str] = None) -> domain.AccountCounts:
        return await self._read("account_counts", lambda db: AccountRepository(db).count_by_active(tenant_id, entity_id))

    async def list_transactions(
        self,
        tenant_id: str,
        window: domain.Window,
        entity_id: Optional[str] = None,
    ) -> List[domain.Transaction]:
        return await self._read(
            "transactions",
            lambda db: TransactionRepository(db).list_in_window(tenant_id, window, entity_id),
        )

    async def receivable_stats(self, tenant_id: str, entity_id: Optional[str] = None) -> domain.OutstandingStats:
        return await self._read("invoices", lambda db: InvoiceRepository(db).stats(tenant_id, entity_id))

    async def payable_stats(self, tenant_id: str, entity_id: Optional[str] = None) -> domain.OutstandingStats:
        return await self._read("bills", lambda db: BillRepository(db).stats(tenant_id, entity_id))

    async def entity_exists(self, tenant_id: str, entity_id: str) -> bool:
        return await self._read("entities", lambda db: CloseChecklistRepository(db).entity_exists(tenant_id, entity_id))

    async def get_period(self, tenant_id: str, period_id: str) -> Optional[domain.FiscalPeriod]:
        return await self._read("fiscal_periods", lambda db: CloseChecklistRepository(db).get_period(tenant_id, period_id))

    async def checklist_count(self, source: str, fn: Callable[[CloseChecklistRepository], int]) -> int:
        """Run one close-checklist count query"""
        return await self._read(source, lambda db: fn(CloseChecklistRepository(db)))
