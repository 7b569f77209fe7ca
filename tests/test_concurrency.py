"""Concurrent bookings against one equipment row on a file-backed database."""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm import sessionmaker

from sportrent.core.exceptions import InsufficientStockError, NotFoundError
from sportrent.database import build_engine, init_db
from sportrent.services.document_store import DocumentStore
from sportrent.services.rental_ledger import RentalLedger

from conftest import FIXED_NOW


@pytest.fixture
def file_ledger(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    init_db(bind=engine)
    store = DocumentStore(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))
    yield RentalLedger(store, clock=lambda: FIXED_NOW)
    engine.dispose()


def _race(ledger, requests):
    barrier = threading.Barrier(len(requests))

    def attempt(args):
        user, quantity = args
        barrier.wait()
        try:
            return ledger.create_rental(user, "bike1", "2025-06-01", "2025-06-03", quantity, "Bike", 100)
        except InsufficientStockError as e:
            return e

    with ThreadPoolExecutor(max_workers=len(requests)) as pool:
        return list(pool.map(attempt, requests))


def test_two_bookings_cannot_oversell(file_ledger):
    file_ledger.store.create_document("equipment", {"id": "bike1", "name": "Bike", "price": 100, "stock": 3})

    results = _race(file_ledger, [("user-a", 2), ("user-b", 2)])

    successes = [r for r in results if isinstance(r, dict)]
    failures = [r for r in results if isinstance(r, InsufficientStockError)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert failures[0].available == 1
    assert failures[0].requested == 2
    assert file_ledger.store.get_document("equipment", "bike1")["stock"] == 1


def test_many_single_unit_bookings_stop_at_zero(file_ledger):
    file_ledger.store.create_document("equipment", {"id": "bike1", "name": "Bike", "price": 100, "stock": 5})

    results = _race(file_ledger, [(f"user-{i}", 1) for i in range(10)])

    assert sum(isinstance(r, dict) for r in results) == 5
    assert file_ledger.store.get_document("equipment", "bike1")["stock"] == 0
    assert len(file_ledger.store.query_equal("rentals", "equipment_id", "bike1")) == 5


def test_concurrent_cancels_restore_once(file_ledger):
    file_ledger.store.create_document("equipment", {"id": "bike1", "name": "Bike", "price": 100, "stock": 3})
    rental = file_ledger.create_rental("user-a", "bike1", "2025-06-01", "2025-06-03", 2, "Bike", 100)

    barrier = threading.Barrier(4)

    def cancel(_):
        barrier.wait()
        try:
            return file_ledger.cancel_rental("user-a", rental["id"])
        except NotFoundError as e:
            return e

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(cancel, range(4)))

    assert sum(isinstance(r, dict) for r in results) == 1
    assert file_ledger.store.get_document("equipment", "bike1")["stock"] == 3
