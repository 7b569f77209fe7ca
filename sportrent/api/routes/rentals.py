"""
Rental Routes
All endpoints require a bearer token from the identity provider.

  GET    /api/rentals        – caller's rentals
  POST   /api/rentals        – reserve stock + create rental
  DELETE /api/rentals/{id}   – cancel rental + restore stock

Legacy (pre-/api front end):
  GET    /rentals            – 307 to /api/rentals
  POST   /rentals            – 307 to /api/rentals
"""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from sportrent.core.config import settings
from sportrent.core.security import get_current_user_id
from sportrent.schemas.rental import (
    RentalCreate, RentalDeleteResponse, RentalListResponse, RentalOut,
)
from sportrent.services.document_store import DocumentStore, get_document_store
from sportrent.services.rental_ledger import RentalLedger

router = APIRouter(tags=["Rentals"])
legacy_router = APIRouter(include_in_schema=False)
logger = logging.getLogger(__name__)


def get_rental_ledger(store: DocumentStore = Depends(get_document_store)) -> RentalLedger:
    return RentalLedger(store)


@router.get("", response_model=RentalListResponse)
def list_rentals(
    user_id: str = Depends(get_current_user_id),
    ledger: RentalLedger = Depends(get_rental_ledger),
):
    logger.info(f"Fetching rentals for user: {user_id}")
    return {"data": ledger.list_rentals(user_id)}


@router.post("", response_model=RentalOut, status_code=status.HTTP_201_CREATED)
def create_rental(
    payload: RentalCreate,
    user_id: str = Depends(get_current_user_id),
    ledger: RentalLedger = Depends(get_rental_ledger),
):
    return ledger.create_rental(
        user_id,
        equipment_id=payload.equipmentId,
        start_date=payload.startDate,
        end_date=payload.endDate,
        quantity=payload.quantity,
        name=payload.name,
        price=payload.price,
    )


@router.delete("/{rental_id}", response_model=RentalDeleteResponse)
def cancel_rental(
    rental_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger: RentalLedger = Depends(get_rental_ledger),
):
    return ledger.cancel_rental(user_id, rental_id)


@legacy_router.get("/rentals")
def legacy_list_rentals():
    logger.info("Legacy route /rentals called, redirecting")
    return RedirectResponse(f"{settings.API_PREFIX}/rentals", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@legacy_router.post("/rentals")
def legacy_create_rental():
    logger.info("Legacy POST /rentals called, redirecting")
    return RedirectResponse(f"{settings.API_PREFIX}/rentals", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
