"""
Document Store
Collection/document access over the SQL database.

Documents are plain dicts keyed by model attribute names. Single writes are
atomic per document; ``transaction()`` groups several writes into one commit.
Stock counters are only ever changed with relative UPDATE statements, so two
requests never race on a read-then-write of the same row.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Type

from sqlalchemy import delete, inspect, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sportrent.core.exceptions import StoreUnavailableError
from sportrent.db.base import Base
from sportrent.models import Equipment, Rental

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type[Base]] = {
    "equipment": Equipment,
    "rentals": Rental,
}

Document = Dict[str, Any]


@dataclass
class DecrementResult:
    """Outcome of a guarded decrement.

    ``document`` is None when the target does not exist; otherwise it is the
    document as seen after the attempt (post-decrement when ``applied``).
    """
    document: Optional[Document]
    applied: bool


def to_document(obj: Base) -> Document:
    """Materialise an ORM row as a plain dict of its column attributes."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def _model_for(collection: str) -> Type[Base]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}") from None


def _column(model: Type[Base], field: str):
    if field not in inspect(model).columns:
        raise ValueError(f"Unknown field {field!r} on {model.__tablename__}")
    return getattr(model, field)


class StoreTransaction:
    """Document operations bound to one session; committed by the store."""

    def __init__(self, session: Session):
        self.session = session

    def _load(self, model: Type[Base], doc_id: str) -> Optional[Base]:
        stmt = (
            select(model)
            .where(model.id == doc_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        obj = self._load(_model_for(collection), doc_id)
        return to_document(obj) if obj is not None else None

    def query_equal(self, collection: str, field: str, value: Any) -> List[Document]:
        model = _model_for(collection)
        rows = self.session.execute(
            select(model).where(_column(model, field) == value)
        ).scalars().all()
        return [to_document(row) for row in rows]

    def list_documents(self, collection: str) -> List[Document]:
        model = _model_for(collection)
        rows = self.session.execute(select(model)).scalars().all()
        return [to_document(row) for row in rows]

    def create_document(self, collection: str, data: Document) -> str:
        obj = _model_for(collection)(**data)
        self.session.add(obj)
        self.session.flush()
        return obj.id

    def delete_document(self, collection: str, doc_id: str, **guards: Any) -> bool:
        """Delete a document, optionally only if ``field == value`` guards hold.

        Returns True when a row was removed.
        """
        model = _model_for(collection)
        stmt = delete(model).where(model.id == doc_id)
        for field, value in guards.items():
            stmt = stmt.where(_column(model, field) == value)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount == 1

    def atomic_increment(self, collection: str, doc_id: str, field: str, delta: int) -> bool:
        """Add ``delta`` to a numeric field in one statement.

        Returns False when the document does not exist.
        """
        model = _model_for(collection)
        column = _column(model, field)
        stmt = (
            update(model)
            .where(model.id == doc_id)
            .values({field: column + delta})
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def conditional_decrement(
        self, collection: str, doc_id: str, field: str, amount: int
    ) -> DecrementResult:
        """Subtract ``amount`` only if the field currently holds at least that much.

        Check and write are one UPDATE; the row is only read afterwards, to
        report the resulting state or to tell a missing document from a short one.
        """
        model = _model_for(collection)
        column = _column(model, field)
        stmt = (
            update(model)
            .where(model.id == doc_id, column >= amount)
            .values({field: column - amount})
            .execution_options(synchronize_session=False)
        )
        applied = self.session.execute(stmt).rowcount == 1
        return DecrementResult(document=self.get_document(collection, doc_id), applied=applied)


class DocumentStore:
    """Entry point for document access; every call runs in its own transaction."""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from sportrent.database import SessionLocal
            session_factory = SessionLocal
        self._session_factory = session_factory

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        session = self._session_factory()
        try:
            yield StoreTransaction(session)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Document store failure: {e}")
            raise StoreUnavailableError() from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        with self.transaction() as txn:
            return txn.get_document(collection, doc_id)

    def query_equal(self, collection: str, field: str, value: Any) -> List[Document]:
        with self.transaction() as txn:
            return txn.query_equal(collection, field, value)

    def list_documents(self, collection: str) -> List[Document]:
        with self.transaction() as txn:
            return txn.list_documents(collection)

    def create_document(self, collection: str, data: Document) -> str:
        with self.transaction() as txn:
            return txn.create_document(collection, data)

    def delete_document(self, collection: str, doc_id: str, **guards: Any) -> bool:
        with self.transaction() as txn:
            return txn.delete_document(collection, doc_id, **guards)

    def atomic_increment(self, collection: str, doc_id: str, field: str, delta: int) -> bool:
        with self.transaction() as txn:
            return txn.atomic_increment(collection, doc_id, field, delta)

    def conditional_decrement(
        self, collection: str, doc_id: str, field: str, amount: int
    ) -> DecrementResult:
        with self.transaction() as txn:
            return txn.conditional_decrement(collection, doc_id, field, amount)


def get_document_store() -> DocumentStore:
    """FastAPI dependency; tests override it with a store on a throwaway database."""
    return DocumentStore()
