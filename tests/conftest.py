"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from overview_gateway.api.main import create_app
from overview_gateway.api.dependencies import get_fx_client
from overview_gateway.domain.exceptions import FxRateError
from overview_gateway.domain.models import Account, AccountType, CategoryType, Transaction
from overview_gateway.domain.money import RatePair, rate_key
from overview_gateway.infrastructure.database import models as orm
from overview_gateway.infrastructure.database.models import Base
from overview_gateway.infrastructure.database.session import get_session_factory
from overview_gateway.infrastructure.database.store import ReadStore

TENANT_ID = "tenant-abc-123"
OTHER_TENANT_ID = "tenant-other-999"
FIXED_NOW = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)


class FakeFxProvider:
    """Fixed rate map that records every batch request"""

    def __init__(self, rates: Optional[Dict[str, float]] = None, error: Optional[Exception] = None):
        self.rates = rates or {}
        self.error = error
        self.calls: List[List[RatePair]] = []

    async def get_rate_batch(self, pairs: List[RatePair]) -> Dict[str, float]:
        self.calls.append(list(pairs))
        if self.error is not None:
            raise self.error
        result = {}
        for from_currency, to_currency in pairs:
            key = rate_key(from_currency, to_currency)
            if from_currency == to_currency:
                result[key] = 1.0
            elif key in self.rates:
                result[key] = self.rates[key]
        return result


def make_account(**overrides) -> Account:
    fields = {
        "id": "acc-1",
        "currency": "USD",
        "type": AccountType.BANK,
        "current_balance": 100000,  # $1000.00
        "is_active": True,
        "entity_id": "entity-1",
    }
    fields.update(overrides)
    return Account(**fields)


def make_txn(amount: int, days_ago: float, category: Optional[CategoryType] = None, **overrides) -> Transaction:
    fields = {
        "id": f"txn-{amount}-{days_ago}",
        "amount": amount,
        "date": FIXED_NOW - timedelta(days=days_ago),
        "currency": "USD",
        "category_type": category,
    }
    fields.update(overrides)
    return Transaction(**fields)


@pytest.fixture
def session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """SQLite database with the read model schema, one file per test"""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Session for seeding test data"""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(session_factory: sessionmaker) -> ReadStore:
    return ReadStore(session_factory)


@pytest.fixture
def fx() -> FakeFxProvider:
    return FakeFxProvider({"CAD_USD": 0.74, "EUR_USD": 1.08})


@pytest.fixture
def client(session_factory: sessionmaker, fx: FakeFxProvider) -> TestClient:
    """Create FastAPI test client with test database and fixed FX rates"""
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_fx_client] = lambda: fx
    return TestClient(app)


@pytest.fixture
def seeded(db: Session) -> Dict[str, str]:
    """
    Two entities for TENANT_ID plus one for another tenant.

    main entity: BANK USD +500000, BANK CAD +100000, CREDIT_CARD USD 150000,
                 inactive BANK USD 999999, one INCOME and one EXPENSE category
    second entity: INVESTMENT EUR 200000
    other tenant: BANK USD 777777
    """
    main = orm.Entity(tenant_id=TENANT_ID, name="Main Street Bakery")
    second = orm.Entity(tenant_id=TENANT_ID, name="Personal")
    foreign = orm.Entity(tenant_id=OTHER_TENANT_ID, name="Someone Else Inc")
    db.add_all([main, second, foreign])
    db.flush()

    checking = orm.Account(entity_id=main.id, name="Checking", type="BANK", currency="USD", current_balance=500000)
    savings = orm.Account(entity_id=main.id, name="CAD Savings", type="BANK", currency="CAD", current_balance=100000)
    card = orm.Account(entity_id=main.id, name="Visa", type="CREDIT_CARD", currency="USD", current_balance=150000)
    closed = orm.Account(
        entity_id=main.id, name="Old Checking", type="BANK", currency="USD", current_balance=999999, is_active=False
    )
    brokerage = orm.Account(
        entity_id=second.id, name="Brokerage", type="INVESTMENT", currency="EUR", current_balance=200000
    )
    foreign_account = orm.Account(
        entity_id=foreign.id, name="Their Checking", type="BANK", currency="USD", current_balance=777777
    )
    db.add_all([checking, savings, card, closed, brokerage, foreign_account])

    income = orm.Category(tenant_id=TENANT_ID, name="Sales", type="INCOME")
    expense = orm.Category(tenant_id=TENANT_ID, name="Supplies", type="EXPENSE")
    transfer = orm.Category(tenant_id=TENANT_ID, name="Transfers", type="TRANSFER")
    db.add_all([income, expense, transfer])
    db.commit()

    return {
        "main": main.id,
        "second": second.id,
        "foreign": foreign.id,
        "checking": checking.id,
        "savings": savings.id,
        "card": card.id,
        "foreign_account": foreign_account.id,
        "income": income.id,
        "expense": expense.id,
        "transfer": transfer.id,
    }


@pytest.fixture
def failing_fx() -> FakeFxProvider:
    return FakeFxProvider(error=FxRateError("FX rate service error: 502"))
