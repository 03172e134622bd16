"""Pydantic schemas for API response serialization (camelCase on the wire)"""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from overview_gateway.domain.models import ChecklistStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MoneySchema(CamelModel):
    amount: int
    currency: str


class CashPositionSchema(CamelModel):
    cash: int
    debt: int
    net: int
    currency: str


class AccountsSummarySchema(CamelModel):
    total: int
    active: int
    by_type: Dict[str, int]


class OutstandingSchema(CamelModel):
    outstanding: int
    overdue: int


class MetricsResponse(CamelModel):
    """Response for GET /v1/overview/dashboard"""

    net_worth: MoneySchema
    cash_position: CashPositionSchema
    accounts_summary: AccountsSummarySchema
    receivables: OutstandingSchema
    payables: OutstandingSchema


class NetWorthBreakdown(CamelModel):
    assets: int
    liabilities: int


class NetWorthResponse(CamelModel):
    """Response for GET /v1/overview/net-worth"""

    net_worth: MoneySchema
    breakdown: NetWorthBreakdown


class CashFlowResponse(CamelModel):
    """Response for GET /v1/overview/cash-flow"""

    cash_position: CashPositionSchema
    accounts_summary: AccountsSummarySchema


class MetricTrendSchema(CamelModel):
    current: int
    previous: int
    percent_change: float
    sparkline: List[int]


class ReceivablesTrendSchema(CamelModel):
    outstanding: int
    overdue: int
    sparkline: List[int]


class AccountCountsSchema(CamelModel):
    active: int
    total: int


class PerformanceResponse(CamelModel):
    """Response for GET /v1/overview/performance"""

    revenue: MetricTrendSchema
    expenses: MetricTrendSchema
    profit: MetricTrendSchema
    receivables: ReceivablesTrendSchema
    accounts: AccountCountsSchema
    currency: str


class ChecklistItemSchema(CamelModel):
    label: str
    status: ChecklistStatus
    count: int
    details: str
    weight: int


class CloseReadinessResponse(CamelModel):
    """Response for GET /v1/close/readiness"""

    period_id: str
    period_name: str
    score: int
    can_close: bool
    items: List[ChecklistItemSchema]
    generated_at: datetime
