"""
Equipment Catalog
Read-only access to the equipment collection.
"""
from typing import Any, Dict, List

from sportrent.core.exceptions import NotFoundError
from sportrent.services.document_store import Document, DocumentStore
from sportrent.services.rental_ledger import iso_timestamp


def serialize_equipment(doc: Document) -> Dict[str, Any]:
    return {
        "id": doc["id"],
        "name": doc["name"],
        "price": doc["price"],
        "stock": doc["stock"],
        "category": doc.get("category"),
        "detail": doc.get("detail"),
        "image": doc.get("image"),
        "createdAt": iso_timestamp(doc.get("created_at")),
        "updatedAt": iso_timestamp(doc.get("updated_at")),
    }


def list_equipment(store: DocumentStore) -> List[Dict[str, Any]]:
    return [serialize_equipment(doc) for doc in store.list_documents("equipment")]


def get_equipment(store: DocumentStore, equipment_id: str) -> Dict[str, Any]:
    doc = store.get_document("equipment", equipment_id)
    if doc is None:
        raise NotFoundError("Equipment not found")
    return serialize_equipment(doc)
