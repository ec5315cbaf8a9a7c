"""
Shared fixtures.

MongoDB is replaced by mongomock-motor's in-memory client and handed to the
app through create_app(store=...), so no server is needed. The store's clock
is a FakeClock that ticks one second per call, which keeps createdAt and
paymentDate strictly increasing within a test.
"""
import asyncio
import os
from datetime import datetime, timedelta, timezone

# Required settings must exist before any karibu module is imported
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("DATABASE_NAME", "karibu_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from karibu.core.security import create_access_token, get_password_hash  # noqa: E402
from karibu.core.store import RecordStore  # noqa: E402
from karibu.main import create_app  # noqa: E402
from karibu.models.user import User, UserRole  # noqa: E402

PASSWORD = "secret123"


class FakeClock:
    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


# ============================================================================
# Store & App
# ============================================================================

@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    db = AsyncMongoMockClient()["karibu_test"]
    return RecordStore(db, clock=clock)


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


# ============================================================================
# Users & Tokens
# ============================================================================

def _make_user(store: RecordStore, name: str, email: str, role: UserRole) -> User:
    user = User(name=name, email=email, hashed_password=get_password_hash(PASSWORD), role=role)
    return asyncio.run(store.create_user(user))


@pytest.fixture
def manager(store):
    return _make_user(store, "Grace Nakato", "manager@karibu.co.ug", UserRole.MANAGER)


@pytest.fixture
def sales_agent(store):
    return _make_user(store, "Peter Okello", "agent@karibu.co.ug", UserRole.SALES_AGENT)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user.email})}"}


@pytest.fixture
def make_headers():
    return auth_headers


@pytest.fixture
def manager_headers(manager):
    return auth_headers(manager)


@pytest.fixture
def agent_headers(sales_agent):
    return auth_headers(sales_agent)


# ============================================================================
# Request bodies
# ============================================================================

@pytest.fixture
def procurement_body():
    return {
        "produceName": "Maize",
        "produceType": "Cereal",
        "time": "14:30",
        "tonnage": 150,
        "cost": 500000,
        "dealerName": "John Doe",
        "branch": "Maganjo",
        "contact": "0771234567",
        "sellingPrice": 2000,
    }


@pytest.fixture
def cash_sale_body():
    return {
        "produceName": "Beans",
        "tonnage": 5,
        "amountPaid": 25000,
        "buyerName": "Sarah Achieng",
        "salesAgentName": "Peter Okello",
        "time": "09:15",
    }


@pytest.fixture
def credit_sale_body():
    return {
        "buyerName": "Mukwano Traders",
        "nationalId": "CM90012345ABCD",
        "location": "Kawempe",
        "contacts": "0701234567",
        "amountDue": 150000,
        "salesAgentName": "Peter Okello",
        "dueDate": "2025-04-30",
        "produceName": "Maize",
        "produceType": "Cereal",
        "tonnage": 20,
    }


@pytest.fixture
def password():
    """Plain-text password of every fixture user."""
    return PASSWORD
