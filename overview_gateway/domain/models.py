"""Domain models - pure Python dataclasses representing business entities"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


class AccountType(str, enum.Enum):
    BANK = "BANK"
    CREDIT_CARD = "CREDIT_CARD"
    INVESTMENT = "INVESTMENT"
    LOAN = "LOAN"
    MORTGAGE = "MORTGAGE"
    OTHER = "OTHER"


class CategoryType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class ChecklistStatus(str, enum.Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class Account:
    """Account balance snapshot as read from the store"""

    id: str
    currency: str
    type: AccountType
    current_balance: int  # minor units, any sign
    is_active: bool = True
    entity_id: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction; amount > 0 is an inflow"""

    id: str
    amount: int
    date: datetime
    currency: str
    category_type: Optional[CategoryType] = None
    account_id: Optional[str] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime
    end_inclusive: bool = True


@dataclass
class OutstandingStats:
    """Receivable or payable totals from the invoicing collaborator"""

    outstanding: int = 0
    overdue: int = 0


@dataclass
class AccountCounts:
    active: int = 0
    total: int = 0


@dataclass
class Money:
    amount: int
    currency: str


@dataclass
class CashPosition:
    cash: int
    debt: int
    net: int
    currency: str


@dataclass
class AccountsSummary:
    total: int
    active: int
    by_type: Dict[str, int]


@dataclass
class MetricsResult:
    """Net worth and cash position for a tenant (never persisted)"""

    net_worth: Money
    cash_position: CashPosition
    accounts_summary: AccountsSummary
    receivables: OutstandingStats
    payables: OutstandingStats


@dataclass
class MetricTrend:
    current: int
    previous: int
    percent_change: float
    sparkline: List[int]


@dataclass
class ReceivablesTrend:
    outstanding: int
    overdue: int
    sparkline: List[int] = field(default_factory=list)


@dataclass
class PerformanceResult:
    """Revenue, expense and profit trends over a window"""

    revenue: MetricTrend
    expenses: MetricTrend
    profit: MetricTrend
    receivables: ReceivablesTrend
    accounts: AccountCounts
    currency: str


@dataclass
class ChecklistItem:
    label: str
    status: ChecklistStatus
    count: int
    details: str
    weight: int = 0


@dataclass
class FiscalPeriod:
    id: str
    name: str
    entity_id: str
    start_date: datetime
    end_date: datetime
    status: str


@dataclass
class CloseReadinessResult:
    period_id: str
    period_name: str
    score: int
    can_close: bool
    items: List[ChecklistItem]
    generated_at: datetime
