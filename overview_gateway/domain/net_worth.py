"""Net worth and cash position aggregation"""

from collections import Counter
from typing import Dict, List

from overview_gateway.domain.classification import classify_account
from overview_gateway.domain.models import (
    Account,
    AccountsSummary,
    CashPosition,
    MetricsResult,
    Money,
    OutstandingStats,
)
from overview_gateway.domain.money import convert, resolve_rate


def compute_metrics(
    accounts: List[Account],
    fx_rates: Dict[str, float],
    target_currency: str,
    receivables: OutstandingStats,
    payables: OutstandingStats,
) -> MetricsResult:
    """
    Fold account balances into net worth and cash position.

    Rules:
    - Every asset/liability contributes its absolute converted balance, so an
      overdrawn BANK account still adds |balance| to assets
    - Cash only counts BANK accounts whose raw (unconverted) balance is > 0
    - Receivables and payables are passed through untouched
    """
    total_assets = 0
    total_liabilities = 0
    total_cash = 0
    total_debt = 0

    for account in accounts:
        rate = resolve_rate(fx_rates, account.currency, target_currency)
        converted = convert(account.current_balance, rate)
        classification = classify_account(account.type)

        if classification.is_asset:
            total_assets += converted
            if classification.counts_as_cash and account.current_balance > 0:
                total_cash += converted
        if classification.is_liability:
            total_liabilities += converted
            if classification.counts_as_debt:
                total_debt += converted

    by_type = Counter(account.type.value for account in accounts)

    return MetricsResult(
        net_worth=Money(amount=total_assets - total_liabilities, currency=target_currency),
        cash_position=CashPosition(
            cash=total_cash,
            debt=total_debt,
            net=total_cash - total_debt,
            currency=target_currency,
        ),
        accounts_summary=AccountsSummary(
            total=len(accounts),
            active=sum(1 for account in accounts if account.is_active),
            by_type=dict(by_type),
        ),
        receivables=receivables,
        payables=payables,
    )
