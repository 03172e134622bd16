"""Month-end close readiness report for a fiscal period"""

import asyncio
import time
from datetime import datetime
from typing import Callable, Dict

from overview_gateway.config import settings
from overview_gateway.domain import close_readiness as checklist
from overview_gateway.domain.close_readiness import build_checklist, score_checklist
from overview_gateway.domain.exceptions import EntityNotFoundError, PeriodNotFoundError, PeriodStatusError
from overview_gateway.domain.models import CloseReadinessResult
from overview_gateway.infrastructure.database.store import ReadStore
from overview_gateway.infrastructure.observability.logging import log_metrics_computed
from overview_gateway.infrastructure.observability.metrics import record_close_readiness
from overview_gateway.utils.date_utils import utc_now

CHECKABLE_PERIOD_STATUSES = ("OPEN", "LOCKED")


class CloseReadinessService:
    """Evaluates the close checklist for an entity's fiscal period and scores it"""

    def __init__(
        self,
        store: ReadStore,
        tenant_id: str,
        request_id: str = "unknown",
        weights: Dict[str, int] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.tenant_id = tenant_id
        self.request_id = request_id
        self.weights = weights if weights is not None else settings.close_checklist_weights
        self.clock = clock

    async def get_close_readiness(self, entity_id: str, period_id: str) -> CloseReadinessResult:
        """
        Raises:
            EntityNotFoundError: entity is not the tenant's
            PeriodNotFoundError: period is not the tenant's
            PeriodStatusError: period is neither OPEN nor LOCKED
        """
        start_time = time.time()

        entity_exists, period = await asyncio.gather(
            self.store.entity_exists(self.tenant_id, entity_id),
            self.store.get_period(self.tenant_id, period_id),
        )
        if not entity_exists:
            raise EntityNotFoundError(f"Entity {entity_id} not found")
        if period is None or period.entity_id != entity_id:
            raise PeriodNotFoundError(f"Fiscal period {period_id} not found")
        if period.status not in CHECKABLE_PERIOD_STATUSES:
            raise PeriodStatusError(
                f"Period is {period.status}; readiness checks are only available for OPEN or LOCKED periods"
            )

        start, end = period.start_date, period.end_date
        # same order as CHECKLIST_ORDER
        results = await asyncio.gather(
            self.store.checklist_count("transactions", lambda r: r.count_unreconciled(entity_id, start, end)),
            self.store.checklist_count("transactions", lambda r: r.count_uncategorized(entity_id, start, end)),
            self.store.checklist_count("invoices", lambda r: r.count_overdue_invoices(entity_id, start, end)),
            self.store.checklist_count("bills", lambda r: r.count_overdue_bills(entity_id, start, end)),
            self.store.checklist_count("journal_entries", lambda r: r.count_draft_entries(entity_id, start, end)),
            self.store.checklist_count("fiscal_periods", lambda r: r.count_open_earlier_periods(entity_id, start)),
        )

        items = build_checklist(
            dict(zip(checklist.CHECKLIST_ORDER, results)),
            self.weights,
            unreconciled_warn_below=settings.unreconciled_warn_below,
            draft_entries_warn_below=settings.draft_entries_warn_below,
        )
        score, can_close = score_checklist(items)

        record_close_readiness(score)
        log_metrics_computed(
            self.request_id,
            self.tenant_id,
            step="close_readiness",
            duration_ms=(time.time() - start_time) * 1000,
            entity_id=entity_id,
            period_id=period_id,
            score=score,
            can_close=can_close,
        )

        return CloseReadinessResult(
            period_id=period.id,
            period_name=period.name,
            score=score,
            can_close=can_close,
            items=items,
            generated_at=self.clock(),
        )
