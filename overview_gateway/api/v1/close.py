"""GET /v1/close/readiness - month-end close checklist and score"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from overview_gateway.api.dependencies import get_read_store, get_request_id, get_tenant_id
from overview_gateway.api.v1.schemas import CloseReadinessResponse
from overview_gateway.domain.exceptions import (
    EntityNotFoundError,
    PeriodNotFoundError,
    PeriodStatusError,
    UpstreamReadError,
)
from overview_gateway.infrastructure.database.store import ReadStore
from overview_gateway.services.close_readiness import CloseReadinessService

router = APIRouter()


@router.get("/close/readiness", response_model=CloseReadinessResponse)
async def get_close_readiness(
    request: Request,
    entity_id: str = Query(..., min_length=1, description="Entity being closed"),
    period_id: str = Query(..., min_length=1, description="Fiscal period to check"),
    tenant_id: str = Depends(get_tenant_id),
    store: ReadStore = Depends(get_read_store),
):
    """
    Score how ready a fiscal period is to be locked.

    Returns:
        0-100 score, canClose (no failing item), and the ordered checklist
    """
    request_id = get_request_id(request)
    service = CloseReadinessService(store, tenant_id, request_id=request_id)

    try:
        report = await service.get_close_readiness(entity_id, period_id)

    except (EntityNotFoundError, PeriodNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))

    except PeriodStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except UpstreamReadError as e:
        logging.error(f"Upstream read failed: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=503, detail="Upstream data source unavailable")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "tenant_id": tenant_id})
        raise HTTPException(status_code=500, detail="Failed to compute close readiness")

    return CloseReadinessResponse.model_validate(asdict(report))
