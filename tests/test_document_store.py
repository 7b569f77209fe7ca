from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from sportrent.core.exceptions import StoreUnavailableError
from sportrent.services.document_store import StoreTransaction


def test_get_missing_document(store):
    assert store.get_document("equipment", "nothing") is None


def test_create_and_read_back(store, add_equipment):
    add_equipment("bike1", stock=3, price=100, name="Bike")
    doc = store.get_document("equipment", "bike1")
    assert doc["name"] == "Bike"
    assert doc["stock"] == 3
    assert doc["created_at"] is not None


def test_generated_rental_id(store):
    rental_id = store.create_document("rentals", {
        "user_id": "u1",
        "equipment_id": "bike1",
        "name": "Bike",
        "price": 200.0,
        "quantity": 1,
        "start_date": date(2025, 6, 1),
        "end_date": date(2025, 6, 3),
    })
    assert isinstance(rental_id, str) and rental_id
    assert store.get_document("rentals", rental_id)["status"] == "active"


def test_query_equal(store, add_equipment):
    add_equipment("bike1", category="bikes")
    add_equipment("bike2", category="bikes")
    add_equipment("ski1", category="winter")
    assert {d["id"] for d in store.query_equal("equipment", "category", "bikes")} == {"bike1", "bike2"}
    assert len(store.list_documents("equipment")) == 3


def test_atomic_increment(store, add_equipment, stock_of):
    add_equipment(stock=3)
    assert store.atomic_increment("equipment", "bike1", "stock", 2) is True
    assert stock_of() == 5
    assert store.atomic_increment("equipment", "ghost", "stock", 2) is False


def test_conditional_decrement(store, add_equipment, stock_of):
    add_equipment(stock=3)

    result = store.conditional_decrement("equipment", "bike1", "stock", 2)
    assert result.applied
    assert result.document["stock"] == 1

    result = store.conditional_decrement("equipment", "bike1", "stock", 2)
    assert not result.applied
    assert result.document["stock"] == 1
    assert stock_of() == 1

    missing = store.conditional_decrement("equipment", "ghost", "stock", 1)
    assert missing.document is None
    assert not missing.applied


def test_guarded_delete(store, add_equipment):
    add_equipment()
    assert store.delete_document("equipment", "bike1", category="winter") is False
    assert store.delete_document("equipment", "bike1", category="bikes") is True
    assert store.delete_document("equipment", "bike1") is False


def test_transaction_rolls_back_on_error(store, add_equipment, stock_of):
    add_equipment(stock=3)
    with pytest.raises(RuntimeError):
        with store.transaction() as txn:
            txn.atomic_increment("equipment", "bike1", "stock", 10)
            raise RuntimeError("abort")
    assert stock_of() == 3


def test_stock_cannot_go_negative(store, add_equipment, stock_of):
    add_equipment(stock=1)
    with pytest.raises(StoreUnavailableError):
        store.atomic_increment("equipment", "bike1", "stock", -5)
    assert stock_of() == 1


def test_database_errors_are_wrapped(store, monkeypatch):
    def broken(self, collection, doc_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(StoreTransaction, "get_document", broken)
    with pytest.raises(StoreUnavailableError) as exc_info:
        store.get_document("equipment", "bike1")
    assert "connection refused" not in exc_info.value.message


@pytest.mark.parametrize("collection, field", [("users", "id"), ("equipment", "colour")])
def test_unknown_collection_or_field(store, collection, field):
    with pytest.raises(ValueError):
        store.query_equal(collection, field, "x")
