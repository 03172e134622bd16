"""Integration tests for the overview services against a SQLite read model"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from overview_gateway.domain.exceptions import (
    EntityNotFoundError,
    InvalidPeriodError,
    PeriodNotFoundError,
    PeriodStatusError,
    UpstreamReadError,
)
from overview_gateway.domain.models import ChecklistStatus
from overview_gateway.domain.windows import build_windows
from overview_gateway.infrastructure.database import models as orm
from overview_gateway.infrastructure.database.store import ReadStore
from overview_gateway.services.close_readiness import CloseReadinessService
from overview_gateway.services.overview import OverviewService

from conftest import FIXED_NOW, OTHER_TENANT_ID, TENANT_ID, FakeFxProvider


def _service(store, fx, tenant_id=TENANT_ID) -> OverviewService:
    return OverviewService(store, fx, tenant_id, request_id="test-request", clock=lambda: FIXED_NOW)


def _ago(days: float) -> datetime:
    return FIXED_NOW - timedelta(days=days)


@pytest.fixture
def seeded_ledger(db: Session, seeded):
    """Transactions, invoices and bills on top of the seeded accounts"""
    checking, savings = seeded["checking"], seeded["savings"]
    db.add_all(
        [
            # current window
            orm.Transaction(account_id=checking, category_id=seeded["income"], amount=50000, date=_ago(3)),
            orm.Transaction(account_id=checking, category_id=seeded["income"], amount=30000, date=_ago(10)),
            orm.Transaction(account_id=checking, category_id=seeded["expense"], amount=-20000, date=_ago(5)),
            orm.Transaction(account_id=savings, amount=10000, date=_ago(7)),  # uncategorized CAD
            orm.Transaction(account_id=checking, category_id=seeded["transfer"], amount=99999, date=_ago(2)),
            orm.Transaction(
                account_id=checking, category_id=seeded["income"], amount=88888, date=_ago(4), deleted_at=_ago(1)
            ),
            orm.Transaction(account_id=checking, category_id=seeded["income"], amount=1000, date=_ago(30)),
            # previous window
            orm.Transaction(account_id=checking, category_id=seeded["income"], amount=40000, date=_ago(45)),
            orm.Transaction(account_id=checking, category_id=seeded["expense"], amount=-10000, date=_ago(40)),
            # outside both windows
            orm.Transaction(account_id=checking, category_id=seeded["income"], amount=70000, date=_ago(61)),
            # another tenant
            orm.Transaction(account_id=seeded["foreign_account"], amount=55555, date=_ago(2)),
        ]
    )

    main, foreign = seeded["main"], seeded["foreign"]
    due = FIXED_NOW + timedelta(days=10)
    db.add_all(
        [
            orm.Invoice(entity_id=main, status="SENT", total=100000, paid_amount=20000, due_date=due),
            orm.Invoice(entity_id=main, status="OVERDUE", total=50000, paid_amount=0, due_date=_ago(5)),
            orm.Invoice(entity_id=main, status="PAID", total=70000, paid_amount=70000, due_date=_ago(20)),
            orm.Invoice(entity_id=main, status="SENT", total=12345, paid_amount=0, due_date=due, deleted_at=_ago(1)),
            orm.Invoice(entity_id=foreign, status="SENT", total=99999, paid_amount=0, due_date=due),
            orm.Bill(entity_id=main, status="PENDING", total=40000, paid_amount=0, due_date=due),
            orm.Bill(entity_id=main, status="PARTIALLY_PAID", total=30000, paid_amount=10000, due_date=due),
            orm.Bill(entity_id=main, status="OVERDUE", total=15000, paid_amount=5000, due_date=_ago(3)),
            orm.Bill(entity_id=main, status="PAID", total=25000, paid_amount=25000, due_date=_ago(3)),
        ]
    )
    db.commit()
    return seeded


# Dashboard metrics


@pytest.mark.asyncio
async def test_metrics_across_entities(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    """
    USD 500000 + CAD 100000 @0.74 + EUR 200000 @1.08 in assets, USD 150000 card:
    net worth 790000 - 150000, cash excludes the investment
    """
    metrics = await _service(store, fx).get_metrics(target_currency="USD")

    assert metrics.net_worth.amount == 640000
    assert metrics.net_worth.currency == "USD"
    assert metrics.cash_position.cash == 574000
    assert metrics.cash_position.debt == 150000
    assert metrics.cash_position.net == 424000
    assert metrics.accounts_summary.total == 4
    assert metrics.accounts_summary.by_type == {"BANK": 2, "CREDIT_CARD": 1, "INVESTMENT": 1}


@pytest.mark.asyncio
async def test_metrics_filtered_by_entity(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    metrics = await _service(store, fx).get_metrics(entity_id=seeded_ledger["main"], target_currency="USD")

    assert metrics.net_worth.amount == 424000
    assert metrics.accounts_summary.total == 3


@pytest.mark.asyncio
async def test_metrics_fetch_rates_once(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    await _service(store, fx).get_metrics(target_currency="USD")

    assert len(fx.calls) == 1
    assert fx.calls[0] == [("CAD", "USD"), ("EUR", "USD"), ("USD", "USD")]


@pytest.mark.asyncio
async def test_metrics_receivables_and_payables(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    metrics = await _service(store, fx).get_metrics(target_currency="USD")

    assert metrics.receivables.outstanding == 130000
    assert metrics.receivables.overdue == 50000
    assert metrics.payables.outstanding == 70000
    assert metrics.payables.overdue == 10000


@pytest.mark.asyncio
async def test_metrics_tenant_isolation(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    metrics = await _service(store, fx, tenant_id=OTHER_TENANT_ID).get_metrics(target_currency="USD")

    assert metrics.net_worth.amount == 777777
    assert metrics.accounts_summary.total == 1
    assert metrics.receivables.outstanding == 99999
    assert metrics.payables.outstanding == 0


@pytest.mark.asyncio
async def test_metrics_empty_tenant(store: ReadStore, fx: FakeFxProvider):
    metrics = await _service(store, fx, tenant_id="tenant-new").get_metrics(target_currency="USD")

    assert metrics.net_worth.amount == 0
    assert metrics.cash_position.net == 0
    assert metrics.accounts_summary.total == 0
    assert len(fx.calls) == 1
    assert fx.calls[0] == []


@pytest.mark.asyncio
async def test_metrics_default_currency(store: ReadStore, seeded):
    fx = FakeFxProvider({"USD_CAD": 1.35, "EUR_CAD": 1.46})

    metrics = await _service(store, fx).get_metrics(entity_id=seeded["main"])

    assert metrics.net_worth.currency == "CAD"
    # 500000 * 1.35 + 100000 - 150000 * 1.35
    assert metrics.net_worth.amount == 572500


@pytest.mark.asyncio
async def test_missing_rate_degrades_to_one(store: ReadStore, seeded):
    fx = FakeFxProvider({})

    metrics = await _service(store, fx).get_metrics(entity_id=seeded["main"], target_currency="USD")

    # CAD 100000 counted 1:1
    assert metrics.net_worth.amount == 450000


# Performance


@pytest.mark.asyncio
async def test_transaction_windows_split_at_boundary(store: ReadStore, db: Session, seeded):
    """A row at exactly now - 30d belongs to the current window only"""
    boundary = _ago(30)
    db.add_all(
        [
            orm.Transaction(id="at-now", account_id=seeded["checking"], amount=1, date=FIXED_NOW),
            orm.Transaction(id="at-boundary", account_id=seeded["checking"], amount=2, date=boundary),
            orm.Transaction(id="at-start", account_id=seeded["checking"], amount=3, date=_ago(60)),
            orm.Transaction(id="too-old", account_id=seeded["checking"], amount=4, date=_ago(60.5)),
        ]
    )
    db.commit()
    current_window, previous_window = build_windows(30, FIXED_NOW)

    current = await store.list_transactions(TENANT_ID, current_window)
    previous = await store.list_transactions(TENANT_ID, previous_window)

    assert [t.id for t in current] == ["at-boundary", "at-now"]
    assert [t.id for t in previous] == ["at-start"]
    assert current[0].date == boundary


@pytest.mark.asyncio
async def test_performance_from_ledger(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    result = await _service(store, fx).get_performance(target_currency="USD", period="30d")

    # 50000 + 30000 + CAD 10000 @0.74 + 1000 on the inclusive lower boundary
    assert result.revenue.current == 88400
    assert result.revenue.previous == 40000
    assert result.revenue.percent_change == pytest.approx(121.0)
    assert result.expenses.current == 20000
    assert result.expenses.previous == 10000
    assert result.profit.current == 68400
    assert result.profit.previous == 30000
    assert len(result.revenue.sparkline) == 15
    assert result.revenue.sparkline[0] == 1000
    assert result.currency == "USD"


@pytest.mark.asyncio
async def test_performance_account_counts_and_receivables(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    result = await _service(store, fx).get_performance(target_currency="USD")

    assert result.accounts.active == 4
    assert result.accounts.total == 5
    assert result.receivables.outstanding == 130000
    assert result.receivables.overdue == 50000
    assert result.receivables.sparkline == []


@pytest.mark.asyncio
async def test_performance_fetches_rates_once(store: ReadStore, fx: FakeFxProvider, seeded_ledger):
    await _service(store, fx).get_performance(target_currency="USD", period="90d")

    assert len(fx.calls) == 1
    assert fx.calls[0] == [("CAD", "USD"), ("USD", "USD")]


@pytest.mark.asyncio
async def test_performance_invalid_period(store: ReadStore, fx: FakeFxProvider):
    with pytest.raises(InvalidPeriodError):
        await _service(store, fx).get_performance(period="14d")
    assert fx.calls == []


@pytest.mark.asyncio
async def test_performance_empty_tenant(store: ReadStore, fx: FakeFxProvider):
    result = await _service(store, fx, tenant_id="tenant-new").get_performance(target_currency="USD")

    assert result.revenue.current == 0
    assert result.revenue.sparkline == [0] * 15
    assert result.profit.sparkline == [0] * 15
    assert result.accounts.total == 0


# Failures


@pytest.mark.asyncio
async def test_store_failure_fails_whole_request(tmp_path, fx: FakeFxProvider):
    """A database without the schema makes every read fail; nothing partial comes back"""
    engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}", connect_args={"check_same_thread": False})
    broken = ReadStore(sessionmaker(bind=engine))

    with pytest.raises(UpstreamReadError):
        await _service(broken, fx).get_metrics(target_currency="USD")
    assert fx.calls == []


@pytest.mark.asyncio
async def test_fx_failure_is_upstream_error(store: ReadStore, failing_fx: FakeFxProvider, seeded):
    with pytest.raises(UpstreamReadError) as exc_info:
        await _service(store, failing_fx).get_metrics(target_currency="USD")
    assert exc_info.value.source == "fx"


# Close readiness


@pytest.fixture
def march_close(db: Session, seeded):
    main = seeded["main"]
    march = orm.FiscalPeriod(
        entity_id=main,
        name="March 2026",
        start_date=datetime(2026, 3, 1, tzinfo=timezone.utc),
        end_date=datetime(2026, 3, 31, 23, 59, 59, tzinfo=timezone.utc),
        status="OPEN",
    )
    february = orm.FiscalPeriod(
        entity_id=main,
        name="February 2026",
        start_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
        end_date=datetime(2026, 2, 28, 23, 59, 59, tzinfo=timezone.utc),
        status="OPEN",
    )
    january = orm.FiscalPeriod(
        entity_id=main,
        name="January 2026",
        start_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        end_date=datetime(2026, 1, 31, 23, 59, 59, tzinfo=timezone.utc),
        status="CLOSED",
    )
    posted = orm.JournalEntry(entity_id=main, date=datetime(2026, 3, 5, tzinfo=timezone.utc), status="POSTED")
    db.add_all([march, february, january, posted])
    db.flush()
    seeded.update({"march": march.id, "february": february.id, "january": january.id, "posted": posted.id})
    db.commit()
    return seeded


def _readiness(store) -> CloseReadinessService:
    return CloseReadinessService(store, TENANT_ID, request_id="test-request", clock=lambda: FIXED_NOW)


@pytest.mark.asyncio
async def test_close_readiness_with_open_items(store: ReadStore, db: Session, march_close):
    main, checking = march_close["main"], march_close["checking"]
    march_day = datetime(2026, 3, 10, tzinfo=timezone.utc)
    db.add_all(
        [
            orm.Transaction(account_id=checking, category_id=march_close["income"], amount=1000, date=march_day),
            orm.Transaction(account_id=checking, amount=-500, date=march_day),
            orm.Transaction(
                account_id=checking,
                category_id=march_close["expense"],
                amount=-700,
                date=march_day,
                journal_entry_id=march_close["posted"],
            ),
            orm.Invoice(entity_id=main, status="SENT", total=5000, due_date=march_day),
            orm.JournalEntry(entity_id=main, date=march_day, status="DRAFT"),
        ]
    )
    db.commit()

    report = await _readiness(store).get_close_readiness(main, march_close["march"])
    statuses = {item.label: (item.status, item.count) for item in report.items}

    assert statuses["Unreconciled transactions"] == (ChecklistStatus.WARN, 2)
    assert statuses["Uncategorized transactions"] == (ChecklistStatus.WARN, 1)
    assert statuses["Overdue invoices"] == (ChecklistStatus.FAIL, 1)
    assert statuses["Overdue bills"] == (ChecklistStatus.PASS, 0)
    assert statuses["Draft journal entries"] == (ChecklistStatus.WARN, 1)
    assert statuses["Open earlier periods"] == (ChecklistStatus.WARN, 1)
    # 10 + 7.5 + 0 + 15 + 7.5 + 10
    assert report.score == 50
    assert report.can_close is False
    assert report.period_name == "March 2026"
    assert report.generated_at == FIXED_NOW


@pytest.mark.asyncio
async def test_close_readiness_clean_period(store: ReadStore, db: Session, march_close):
    db.get(orm.FiscalPeriod, march_close["february"]).status = "CLOSED"
    db.commit()

    report = await _readiness(store).get_close_readiness(march_close["main"], march_close["march"])

    assert report.score == 100
    assert report.can_close is True
    assert all(item.status == ChecklistStatus.PASS for item in report.items)


@pytest.mark.asyncio
async def test_close_readiness_unknown_entity(store: ReadStore, march_close):
    with pytest.raises(EntityNotFoundError):
        await _readiness(store).get_close_readiness(march_close["foreign"], march_close["march"])


@pytest.mark.asyncio
async def test_close_readiness_period_of_other_entity(store: ReadStore, march_close):
    with pytest.raises(PeriodNotFoundError):
        await _readiness(store).get_close_readiness(march_close["second"], march_close["march"])


@pytest.mark.asyncio
async def test_close_readiness_closed_period(store: ReadStore, march_close):
    with pytest.raises(PeriodStatusError):
        await _readiness(store).get_close_readiness(march_close["main"], march_close["january"])
