import os

# Must be set before sportrent settings are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import time
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sportrent.api.routes.rentals import get_rental_ledger
from sportrent.core.security import JWTIdentityVerifier, get_identity_verifier
from sportrent.database import init_db
from sportrent.main import app
from sportrent.services.document_store import DocumentStore, get_document_store
from sportrent.services.rental_ledger import RentalLedger

TEST_JWT_SECRET = "test-jwt-secret"

# Every ledger test runs "on" this day so fixed booking dates stay in the future
FIXED_NOW = datetime(2025, 5, 20, 9, 30, tzinfo=timezone.utc)


def make_token(user_id, secret=TEST_JWT_SECRET, audience="authenticated", expires_in=3600):
    claims = {"sub": user_id, "exp": int(time.time()) + expires_in}
    if audience is not None:
        claims["aud"] = audience
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_header(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    assert init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return DocumentStore(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))


@pytest.fixture
def ledger(store):
    return RentalLedger(store, clock=lambda: FIXED_NOW)


@pytest.fixture
def add_equipment(store):
    def _add(equipment_id="bike1", stock=3, price=100.0, name="Bike", category="bikes"):
        store.create_document("equipment", {
            "id": equipment_id,
            "name": name,
            "price": price,
            "stock": stock,
            "category": category,
        })
        return equipment_id
    return _add


@pytest.fixture
def stock_of(store):
    def _stock(equipment_id="bike1"):
        return store.get_document("equipment", equipment_id)["stock"]
    return _stock


@pytest.fixture
def client(store, ledger):
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_rental_ledger] = lambda: ledger
    app.dependency_overrides[get_identity_verifier] = lambda: JWTIdentityVerifier(TEST_JWT_SECRET)
    yield TestClient(app)
    app.dependency_overrides.clear()
