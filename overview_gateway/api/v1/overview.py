"""GET /v1/overview/* - tenant dashboard, net worth, cash flow and performance"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from overview_gateway.api.dependencies import (
    get_currency,
    get_fx_client,
    get_read_store,
    get_request_id,
    get_tenant_id,
)
from overview_gateway.api.v1.schemas import (
    CashFlowResponse,
    MetricsResponse,
    NetWorthResponse,
    PerformanceResponse,
)
from overview_gateway.domain.exceptions import InvalidPeriodError, UpstreamReadError
from overview_gateway.domain.models import MetricsResult
from overview_gateway.infrastructure.clients.fx import FxRateClient
from overview_gateway.infrastructure.database.store import ReadStore
from overview_gateway.services.overview import OverviewService

router = APIRouter()


async def _load_metrics(
    request: Request,
    tenant_id: str,
    entity_id: Optional[str],
    currency: Optional[str],
    store: ReadStore,
    fx_client: FxRateClient,
) -> MetricsResult:
    request_id = get_request_id(request)
    service = OverviewService(store, fx_client, tenant_id, request_id=request_id)
    try:
        return await service.get_metrics(entity_id, currency)

    except UpstreamReadError as e:
        logging.error(f"Upstream read failed: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=503, detail="Upstream data source unavailable")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard metrics")


@router.get("/overview/dashboard", response_model=MetricsResponse)
async def get_dashboard(
    request: Request,
    entity_id: Optional[str] = Query(None, description="Restrict to one entity"),
    currency: Optional[str] = Depends(get_currency),
    tenant_id: str = Depends(get_tenant_id),
    store: ReadStore = Depends(get_read_store),
    fx_client: FxRateClient = Depends(get_fx_client),
):
    """Net worth, cash position, account summary, receivables and payables"""
    metrics = await _load_metrics(request, tenant_id, entity_id, currency, store, fx_client)
    return MetricsResponse.model_validate(asdict(metrics))


@router.get("/overview/net-worth", response_model=NetWorthResponse)
async def get_net_worth(
    request: Request,
    entity_id: Optional[str] = Query(None, description="Restrict to one entity"),
    currency: Optional[str] = Depends(get_currency),
    tenant_id: str = Depends(get_tenant_id),
    store: ReadStore = Depends(get_read_store),
    fx_client: FxRateClient = Depends(get_fx_client),
):
    """Net worth with its cash/debt breakdown"""
    metrics = await _load_metrics(request, tenant_id, entity_id, currency, store, fx_client)
    return NetWorthResponse.model_validate(
        {
            "net_worth": asdict(metrics.net_worth),
            "breakdown": {
                "assets": metrics.cash_position.cash,
                "liabilities": metrics.cash_position.debt,
            },
        }
    )


@router.get("/overview/cash-flow", response_model=CashFlowResponse)
async def get_cash_flow(
    request: Request,
    entity_id: Optional[str] = Query(None, description="Restrict to one entity"),
    currency: Optional[str] = Depends(get_currency),
    tenant_id: str = Depends(get_tenant_id),
    store: ReadStore = Depends(get_read_store),
    fx_client: FxRateClient = Depends(get_fx_client),
):
    """Cash position and account summary"""
    metrics = await _load_metrics(request, tenant_id, entity_id, currency, store, fx_client)
    return CashFlowResponse.model_validate(
        {
            "cash_position": asdict(metrics.cash_position),
            "accounts_summary": asdict(metrics.accounts_summary),
        }
    )


@router.get("/overview/performance", response_model=PerformanceResponse)
async def get_performance(
    request: Request,
    entity_id: Optional[str] = Query(None, description="Restrict to one entity"),
    period: str = Query("30d", description="Comparison window: 30d, 60d or 90d"),
    currency: Optional[str] = Depends(get_currency),
    tenant_id: str = Depends(get_tenant_id),
    store: ReadStore = Depends(get_read_store),
    fx_client: FxRateClient = Depends(get_fx_client),
):
    """
    Revenue, expenses and profit for the current window vs the one before it.

    Returns:
        Totals, percent change and a 15-point sparkline per metric
    """
    request_id = get_request_id(request)
    service = OverviewService(store, fx_client, tenant_id, request_id=request_id)

    try:
        performance = await service.get_performance(entity_id, currency, period)

    except InvalidPeriodError as e:
        logging.warning(f"Invalid period: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=422, detail=str(e))

    except UpstreamReadError as e:
        logging.error(f"Upstream read failed: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=503, detail="Upstream data source unavailable")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=500, detail="Failed to fetch performance metrics")

    return PerformanceResponse.model_validate(asdict(performance))
