"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, Request
from sqlalchemy.orm import sessionmaker

from overview_gateway.infrastructure.clients.fx import FxRateClient
from overview_gateway.infrastructure.database.session import get_session_factory
from overview_gateway.infrastructure.database.store import ReadStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_tenant_id(x_tenant_id: Optional[str] = Header(None)) -> str:
    """Tenant resolved upstream by the auth gateway and forwarded as X-Tenant-ID"""
    if not x_tenant_id:
        raise HTTPException(status_code=400, detail="Missing X-Tenant-ID header")
    return x_tenant_id


def get_currency(
    currency: Optional[str] = Query(None, min_length=3, max_length=3, description="ISO 4217 target currency"),
) -> Optional[str]:
    return currency.upper() if currency else None


def get_read_store(session_factory: sessionmaker = Depends(get_session_factory)) -> ReadStore:
    """Provide the tenant-scoped read store"""
    return ReadStore(session_factory)


def get_fx_client() -> FxRateClient:
    """Provide FX rate service client instance"""
    return FxRateClient()
