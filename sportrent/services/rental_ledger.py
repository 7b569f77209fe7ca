"""
Rental Ledger
Keeps equipment stock and the set of rental records consistent.

Creating a rental reserves stock with one guarded decrement and then writes
the rental; if that write fails the reservation is released again.
Cancelling deletes the rental and restores its stock in a single
transaction keyed on the rental row, so a retried cancel cannot restore
stock twice.

Calendar checks use the UTC date.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from sportrent.core.exceptions import (
    ForbiddenError,
    InsufficientStockError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from sportrent.db.base import utcnow
from sportrent.models.rental import RentalStatus
from sportrent.services.document_store import Document, DocumentStore

logger = logging.getLogger(__name__)

REQUIRED_RENTAL_FIELDS = ["equipmentId", "startDate", "endDate", "quantity", "name", "price"]

# Largest count the stock column holds on every supported backend
MAX_STOCK_QUANTITY = 2**31 - 1


# ═══════════════════════ SERIALISATION ═══════════════════════

def iso_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string for a stored timestamp; naive values are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def iso_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_rental(doc: Document) -> Dict[str, Any]:
    return {
        "id": doc["id"],
        "userId": doc["user_id"],
        "equipmentId": doc["equipment_id"],
        "name": doc["name"],
        "price": doc["price"],
        "quantity": doc["quantity"],
        "startDate": iso_date(doc["start_date"]),
        "endDate": iso_date(doc["end_date"]),
        "status": doc["status"],
        "createdAt": iso_timestamp(doc.get("created_at")),
        "updatedAt": iso_timestamp(doc.get("updated_at")),
    }


# ═══════════════════════ INPUT HELPERS ═══════════════════════

def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_calendar_date(value: Any, field: str) -> date:
    """Accept ``YYYY-MM-DD`` or an ISO datetime; datetimes are reduced to their UTC date."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        return value
    else:
        text = str(value).strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidArgumentError(f"Invalid {field}: expected an ISO-8601 date") from None

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ═══════════════════════ LEDGER ═══════════════════════

class RentalLedger:
    """The three rental operations, on top of a :class:`DocumentStore`."""

    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self._clock = clock

    def today(self) -> date:
        return self._clock().astimezone(timezone.utc).date()

    @staticmethod
    def _require_identity(user_id: Optional[str]) -> str:
        if not user_id:
            raise UnauthenticatedError()
        return user_id

    def create_rental(
        self,
        user_id: Optional[str],
        equipment_id: Any,
        start_date: Any,
        end_date: Any,
        quantity: Any,
        name: Any,
        price: Any,
    ) -> Dict[str, Any]:
        user_id = self._require_identity(user_id)

        supplied = {
            "equipmentId": equipment_id,
            "startDate": start_date,
            "endDate": end_date,
            "quantity": quantity,
            "name": name,
            "price": price,
        }
        missing = [field for field in REQUIRED_RENTAL_FIELDS if _is_missing(supplied[field])]
        if missing:
            raise InvalidArgumentError(
                f"Missing required fields: {', '.join(missing)}",
                missing=missing,
                required=REQUIRED_RENTAL_FIELDS,
            )

        start = parse_calendar_date(start_date, "startDate")
        end = parse_calendar_date(end_date, "endDate")
        if start < self.today():
            raise InvalidArgumentError("Start date cannot be in the past")
        if end <= start:
            raise InvalidArgumentError("End date must be after start date")

        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise InvalidArgumentError("Quantity must be a whole number")
        if quantity <= 0:
            raise InvalidArgumentError("Quantity must be greater than 0")
        if not _is_number(price) or price <= 0:
            raise InvalidArgumentError("Price must be a positive number")

        equipment_id = str(equipment_id)
        if quantity > MAX_STOCK_QUANTITY:
            # No stock can cover it and the database cannot bind it
            equipment = self.store.get_document("equipment", equipment_id)
            if equipment is None:
                raise NotFoundError("Equipment not found")
            raise InsufficientStockError(available=equipment["stock"], requested=quantity)

        reservation = self.store.conditional_decrement("equipment", equipment_id, "stock", quantity)
        if reservation.document is None:
            raise NotFoundError("Equipment not found")
        if not reservation.applied:
            available = reservation.document["stock"]
            logger.info(
                f"Rejected rental of {quantity} x {equipment_id} for {user_id}: only {available} available"
            )
            raise InsufficientStockError(available=available, requested=quantity)

        # Stored catalog values win over what the client sent
        equipment = reservation.document
        days = (end - start).days

        data = {
            "user_id": user_id,
            "equipment_id": equipment_id,
            "name": equipment["name"],
            "price": float(equipment["price"]) * days * quantity,
            "quantity": quantity,
            "start_date": start,
            "end_date": end,
            "status": RentalStatus.ACTIVE.value,
        }

        try:
            with self.store.transaction() as txn:
                rental_id = txn.create_document("rentals", data)
                rental = txn.get_document("rentals", rental_id)
        except StoreUnavailableError:
            self._release_stock(equipment_id, quantity)
            raise

        logger.info(
            f"Rental {rental_id} created: {quantity} x {equipment_id} for {user_id} "
            f"({start} -> {end}), stock left {equipment['stock']}"
        )
        return serialize_rental(rental)

    def _release_stock(self, equipment_id: str, quantity: int) -> None:
        """Compensate a reservation whose rental could not be written."""
        try:
            self.store.atomic_increment("equipment", equipment_id, "stock", quantity)
            logger.warning(f"Rental write failed; released {quantity} x {equipment_id} back to stock")
        except StoreUnavailableError:
            logger.critical(
                f"Rental write failed and stock release failed too: "
                f"{equipment_id} is short by {quantity} until corrected"
            )

    def cancel_rental(self, user_id: Optional[str], rental_id: str) -> Dict[str, Any]:
        user_id = self._require_identity(user_id)

        rental = self.store.get_document("rentals", rental_id)
        if rental is None:
            raise NotFoundError("Rental not found")
        if rental["user_id"] != user_id:
            logger.warning(f"User {user_id} tried to cancel rental {rental_id} they do not own")
            raise ForbiddenError("Unauthorized to delete this rental")

        with self.store.transaction() as txn:
            # The guarded delete is what makes a repeated cancel a no-op
            if not txn.delete_document("rentals", rental_id, user_id=user_id):
                raise NotFoundError("Rental not found")
            restored = txn.atomic_increment(
                "equipment", rental["equipment_id"], "stock", rental["quantity"]
            )

        if restored:
            logger.info(f"Rental {rental_id} cancelled; returned {rental['quantity']} x {rental['equipment_id']}")
        else:
            logger.warning(
                f"Rental {rental_id} cancelled; equipment {rental['equipment_id']} no longer exists, stock not restored"
            )
        return {"success": True, "message": "Rental deleted"}

    def list_rentals(self, user_id: Optional[str]) -> List[Dict[str, Any]]:
        user_id = self._require_identity(user_id)
        return [serialize_rental(doc) for doc in self.store.query_equal("rentals", "user_id", user_id)]
