"""Month-end close readiness scoring"""

from typing import Dict, List, Optional, Tuple

from overview_gateway.domain.models import ChecklistItem, ChecklistStatus
from overview_gateway.domain.money import round_half_up

STATUS_FACTORS: Dict[ChecklistStatus, float] = {
    ChecklistStatus.PASS: 1.0,
    ChecklistStatus.WARN: 0.5,
    ChecklistStatus.FAIL: 0.0,
}

# Checklist labels, in report order
UNRECONCILED_TRANSACTIONS = "Unreconciled transactions"
UNCATEGORIZED_TRANSACTIONS = "Uncategorized transactions"
OVERDUE_INVOICES = "Overdue invoices"
OVERDUE_BILLS = "Overdue bills"
DRAFT_JOURNAL_ENTRIES = "Draft journal entries"
OPEN_EARLIER_PERIODS = "Open earlier periods"

CHECKLIST_ORDER = [
    UNRECONCILED_TRANSACTIONS,
    UNCATEGORIZED_TRANSACTIONS,
    OVERDUE_INVOICES,
    OVERDUE_BILLS,
    DRAFT_JOURNAL_ENTRIES,
    OPEN_EARLIER_PERIODS,
]


def status_from_count(count: int, warn_below: Optional[int] = None, fail: bool = True) -> ChecklistStatus:
    """
    Derive a status from an issue count.

    0 always passes. With warn_below, counts under it warn and the rest fail.
    Without it, any issue fails (or only warns when fail=False).
    """
    if count == 0:
        return ChecklistStatus.PASS
    if warn_below is not None:
        return ChecklistStatus.WARN if count < warn_below else ChecklistStatus.FAIL
    return ChecklistStatus.FAIL if fail else ChecklistStatus.WARN


def pluralize(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def build_checklist(
    counts: Dict[str, int],
    weights: Dict[str, int],
    unreconciled_warn_below: int = 5,
    draft_entries_warn_below: int = 3,
) -> List[ChecklistItem]:
    """Turn raw issue counts (keyed by checklist label) into ordered checklist items"""
    unreconciled = counts.get(UNRECONCILED_TRANSACTIONS, 0)
    uncategorized = counts.get(UNCATEGORIZED_TRANSACTIONS, 0)
    invoices = counts.get(OVERDUE_INVOICES, 0)
    bills = counts.get(OVERDUE_BILLS, 0)
    drafts = counts.get(DRAFT_JOURNAL_ENTRIES, 0)
    open_periods = counts.get(OPEN_EARLIER_PERIODS, 0)

    rows: List[Tuple[str, ChecklistStatus, int, str]] = [
        (
            UNRECONCILED_TRANSACTIONS,
            status_from_count(unreconciled, warn_below=unreconciled_warn_below),
            unreconciled,
            "All transactions reconciled"
            if unreconciled == 0
            else f"{pluralize(unreconciled, 'transaction', 'transactions')} not linked to a journal entry",
        ),
        (
            UNCATEGORIZED_TRANSACTIONS,
            status_from_count(uncategorized, fail=False),
            uncategorized,
            "All transactions categorized"
            if uncategorized == 0
            else f"{pluralize(uncategorized, 'transaction', 'transactions')} without a category",
        ),
        (
            OVERDUE_INVOICES,
            status_from_count(invoices),
            invoices,
            "No overdue invoices in period"
            if invoices == 0
            else f"{pluralize(invoices, 'invoice', 'invoices')} still outstanding (status: SENT)",
        ),
        (
            OVERDUE_BILLS,
            status_from_count(bills),
            bills,
            "No overdue bills in period"
            if bills == 0
            else f"{pluralize(bills, 'bill', 'bills')} still pending",
        ),
        (
            DRAFT_JOURNAL_ENTRIES,
            status_from_count(drafts, warn_below=draft_entries_warn_below),
            drafts,
            "No draft journal entries"
            if drafts == 0
            else f"{pluralize(drafts, 'journal entry', 'journal entries')} still in draft",
        ),
        (
            OPEN_EARLIER_PERIODS,
            status_from_count(open_periods, fail=False),
            open_periods,
            "All earlier periods closed"
            if open_periods == 0
            else f"{pluralize(open_periods, 'earlier period', 'earlier periods')} still open",
        ),
    ]

    return [
        ChecklistItem(label=label, status=status, count=count, details=details, weight=weights.get(label, 0))
        for label, status, count, details in rows
    ]


def score_checklist(items: List[ChecklistItem]) -> Tuple[int, bool]:
    """
    Weighted readiness score from 0 to 100.

    score     = round(sum(weight * factor) / sum(weight) * 100), 0 when no weight
    can_close = no item failed (warnings do not block)
    """
    total_weight = sum(item.weight for item in items)
    weighted_sum = sum(item.weight * STATUS_FACTORS[item.status] for item in items)

    score = round_half_up(weighted_sum * 100 / total_weight) if total_weight > 0 else 0
    can_close = all(item.status != ChecklistStatus.FAIL for item in items)
    return score, can_close
