"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from household_ledger.api.main import create_app
from household_ledger.api.dependencies import get_allowed_emails, get_identity_client
from household_ledger.infrastructure.database.models import Base
from household_ledger.infrastructure.database.session import get_db
from household_ledger.domain.exceptions import IdentityProviderError
from household_ledger.domain.models import CreditPurchase, EntryKind, Identity, LedgerEntry


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ALLOWED_EMAIL = "dani@example.com"


class FakeIdentityClient:
    """Identity provider stand-in keyed by token"""

    def __init__(self, identities: dict[str, Identity]):
        self.identities = identities

    async def authenticate(self, id_token: str) -> Identity:
        if id_token not in self.identities:
            raise IdentityProviderError("Identity provider rejected token: 400")
        return self.identities[id_token]


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def identity_client() -> FakeIdentityClient:
    return FakeIdentityClient(
        {
            "good-token": Identity(uid="u1", email=ALLOWED_EMAIL, display_name="Dani"),
            "stranger-token": Identity(uid="u2", email="stranger@example.com", display_name="Stranger"),
        }
    )


@pytest.fixture
def client(db: Session, identity_client: FakeIdentityClient) -> TestClient:
    """Create FastAPI test client with test database and fake identity provider"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    app.dependency_overrides[get_allowed_emails] = lambda: [ALLOWED_EMAIL]
    return TestClient(app)


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    """Sign in as the allowed user and return the bearer header"""
    response = client.post("/v1/session", json={"id_token": "good-token"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def make_purchase():
    """Factory for credit purchases with sensible defaults"""

    def _make(
        purchase_date: date = date(2024, 1, 15),
        total: str = "1200",
        installments: int = 3,
        secondary: str = "0",
        purchase_id: str = "p1",
    ) -> CreditPurchase:
        return CreditPurchase(
            id=purchase_id,
            purchase_date=purchase_date,
            description="Heladera",
            total_amount_primary=Decimal(total),
            total_amount_secondary=Decimal(secondary),
            installment_count=installments,
        )

    return _make


@pytest.fixture
def make_entry():
    """Factory for ledger entries"""

    def _make(
        amount: str,
        kind: EntryKind,
        occurred_at: date = date(2024, 1, 10),
        category: str = "",
        entry_id: str = "e1",
    ) -> LedgerEntry:
        return LedgerEntry(
            id=entry_id,
            amount=Decimal(amount),
            kind=kind,
            category=category,
            occurred_at=occurred_at,
            recorded_by="Dani",
        )

    return _make
