"""Revenue / expense / profit trends - core business logic for the performance overview"""

from datetime import datetime
from typing import Dict, List, Optional

from overview_gateway.domain.classification import is_expense, is_revenue
from overview_gateway.domain.models import (
    AccountCounts,
    MetricTrend,
    OutstandingStats,
    PerformanceResult,
    ReceivablesTrend,
    Transaction,
)
from overview_gateway.domain.money import convert_signed, resolve_rate
from overview_gateway.utils.date_utils import days_before

SPARKLINE_POINTS = 15


def pct_change(previous: int, current: int) -> float:
    """
    Percentage change from previous to current.

    A zero baseline never divides: 0 -> 0 is 0.0 and 0 -> anything else is 100.0,
    including a move to a negative value.
    """
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return ((current - previous) / abs(previous)) * 100


def generate_sparkline(
    transactions: List[Transaction],
    days: int,
    now: datetime,
    num_points: int = SPARKLINE_POINTS,
) -> List[int]:
    """
    Bucket signed amounts into num_points slots ending at now.

    Each bucket spans days // num_points days; bucket i covers
    [end_i - width, end_i] inclusive, where end_i = now - (days - (i + 1) * width) days.
    The buckets must tile the window exactly.

    Raises:
        ValueError: days is not a positive multiple of num_points
    """
    if num_points <= 0 or days < num_points or days % num_points:
        raise ValueError(f"{days} days cannot be split into {num_points} equal sparkline buckets")

    if not transactions:
        return [0] * num_points

    width = days // num_points
    sparkline = []
    for i in range(num_points):
        point_end = days_before(now, days - (i + 1) * width)
        point_start = days_before(point_end, width)
        sparkline.append(
            sum(t.amount for t in transactions if point_start <= t.date <= point_end)
        )
    return sparkline


def normalize_transactions(
    transactions: List[Transaction],
    fx_rates: Dict[str, float],
    target_currency: str,
) -> List[Transaction]:
    """Drop soft-deleted rows and convert signed amounts into the target currency"""
    normalized = []
    for txn in transactions:
        if txn.deleted_at is not None:
            continue
        rate = resolve_rate(fx_rates, txn.currency, target_currency)
        normalized.append(
            Transaction(
                id=txn.id,
                amount=convert_signed(txn.amount, rate),
                date=txn.date,
                currency=target_currency,
                category_type=txn.category_type,
                account_id=txn.account_id,
            )
        )
    return normalized


def _total(transactions: List[Transaction]) -> int:
    return sum(abs(t.amount) for t in transactions)


def compute_performance(
    current_txns: List[Transaction],
    previous_txns: List[Transaction],
    days: int,
    now: datetime,
    currency: str,
    account_counts: Optional[AccountCounts] = None,
    receivables: Optional[OutstandingStats] = None,
) -> PerformanceResult:
    """
    Main entry point: fold two transaction windows into performance trends.

    Transactions must already be in the target currency (see normalize_transactions).
    """
    current_revenue_txns = [t for t in current_txns if is_revenue(t)]
    current_expense_txns = [t for t in current_txns if is_expense(t)]

    current_revenue = _total(current_revenue_txns)
    current_expenses = _total(current_expense_txns)
    previous_revenue = _total([t for t in previous_txns if is_revenue(t)])
    previous_expenses = _total([t for t in previous_txns if is_expense(t)])

    current_profit = current_revenue - current_expenses
    previous_profit = previous_revenue - previous_expenses

    # abs per bucket, not of the window total
    revenue_sparkline = [
        abs(v) for v in generate_sparkline(current_revenue_txns, days, now)
    ]
    expenses_sparkline = [
        abs(v) for v in generate_sparkline(current_expense_txns, days, now)
    ]
    profit_sparkline = [rev - exp for rev, exp in zip(revenue_sparkline, expenses_sparkline)]

    receivables = receivables or OutstandingStats()

    return PerformanceResult(
        revenue=MetricTrend(
            current=current_revenue,
            previous=previous_revenue,
            percent_change=pct_change(previous_revenue, current_revenue),
            sparkline=revenue_sparkline,
        ),
        expenses=MetricTrend(
            current=current_expenses,
            previous=previous_expenses,
            percent_change=pct_change(previous_expenses, current_expenses),
            sparkline=expenses_sparkline,
        ),
        profit=MetricTrend(
            current=current_profit,
            previous=previous_profit,
            percent_change=pct_change(previous_profit, current_profit),
            sparkline=profit_sparkline,
        ),
        receivables=ReceivablesTrend(
            outstanding=receivables.outstanding,
            overdue=receivables.overdue,
        ),
        accounts=account_counts or AccountCounts(),
        currency=currency,
    )
