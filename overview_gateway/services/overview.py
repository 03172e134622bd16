"""Request-scoped entry points for the dashboard and performance overviews"""

import asyncio
import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from overview_gateway.config import settings
from overview_gateway.domain.exceptions import FxRateError, UpstreamReadError
from overview_gateway.domain.models import MetricsResult, PerformanceResult
from overview_gateway.domain.money import FxRateProvider, missing_pairs, rate_pairs
from overview_gateway.domain.net_worth import compute_metrics
from overview_gateway.domain.performance import compute_performance, normalize_transactions
from overview_gateway.domain.windows import build_windows, parse_period
from overview_gateway.infrastructure.database.store import ReadStore
from overview_gateway.infrastructure.observability.logging import log_metrics_computed, log_rate_fallback
from overview_gateway.infrastructure.observability.metrics import (
    overview_request_counter,
    record_rate_fallback,
    upstream_read_failures_counter,
)
from overview_gateway.utils.date_utils import utc_now


class OverviewService:
    """
    Net worth, cash position and performance for one tenant.

    Flow per request:
    1. Independent store reads run concurrently; any failure fails the request
    2. One batched FX lookup for the currencies those reads returned
    3. Pure fold in the domain layer
    """

    def __init__(
        self,
        store: ReadStore,
        fx: FxRateProvider,
        tenant_id: str,
        request_id: str = "unknown",
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.fx = fx
        self.tenant_id = tenant_id
        self.request_id = request_id
        self.clock = clock

    async def _fetch_rates(self, currencies: Iterable[str], target_currency: str) -> Dict[str, float]:
        pairs = rate_pairs(currencies, target_currency)
        try:
            rates = await self.fx.get_rate_batch(pairs)
        except FxRateError as e:
            upstream_read_failures_counter.labels(source="fx").inc()
            raise UpstreamReadError("fx", str(e)) from e

        for pair in missing_pairs(rates, pairs):
            log_rate_fallback(pair, self.tenant_id, self.request_id)
            record_rate_fallback(pair)
        return rates

    async def get_metrics(
        self,
        entity_id: Optional[str] = None,
        target_currency: Optional[str] = None,
    ) -> MetricsResult:
        start_time = time.time()
        target_currency = target_currency or settings.default_currency

        accounts, receivables, payables = await asyncio.gather(
            self.store.list_accounts(self.tenant_id, entity_id),
            self.store.receivable_stats(self.tenant_id, entity_id),
            self.store.payable_stats(self.tenant_id, entity_id),
        )

        rates = await self._fetch_rates((a.currency for a in accounts), target_currency)
        metrics = compute_metrics(accounts, rates, target_currency, receivables, payables)

        overview_request_counter.labels(endpoint="dashboard").inc()
        log_metrics_computed(
            self.request_id,
            self.tenant_id,
            step="dashboard_metrics",
            duration_ms=(time.time() - start_time) * 1000,
            entity_id=entity_id,
            currency=target_currency,
            account_count=len(accounts),
        )
        return metrics

    async def get_performance(
        self,
        entity_id: Optional[str] = None,
        target_currency: Optional[str] = None,
        period: str = "30d",
    ) -> PerformanceResult:
        start_time = time.time()
        target_currency = target_currency or settings.default_currency
        days = parse_period(period)
        now = self.clock()
        current_window, previous_window = build_windows(days, now)

        current_txns, previous_txns, receivables, account_counts = await asyncio.gather(
            self.store.list_transactions(self.tenant_id, current_window, entity_id),
            self.store.list_transactions(self.tenant_id, previous_window, entity_id),
            self.store.receivable_stats(self.tenant_id, entity_id),
            self.store.count_accounts(self.tenant_id, entity_id),
        )

        currencies: List[str] = [t.currency for t in current_txns] + [t.currency for t in previous_txns]
        rates = await self._fetch_rates(currencies, target_currency)

        performance = compute_performance(
            normalize_transactions(current_txns, rates, target_currency),
            normalize_transactions(previous_txns, rates, target_currency),
            days=days,
            now=now,
            currency=target_currency,
            account_counts=account_counts,
            receivables=receivables,
        )

        overview_request_counter.labels(endpoint="performance").inc()
        log_metrics_computed(
            self.request_id,
            self.tenant_id,
            step="performance_metrics",
            duration_ms=(time.time() - start_time) * 1000,
            entity_id=entity_id,
            currency=target_currency,
            period=period,
            transaction_count=len(current_txns) + len(previous_txns),
        )
        return performance
