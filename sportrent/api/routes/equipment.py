"""
Equipment Catalog Routes (public)

  GET /api/equipment        – full catalog
  GET /api/equipment/{id}   – one item
"""
import logging

from fastapi import APIRouter, Depends

from sportrent.schemas.equipment import EquipmentListResponse, EquipmentResponse
from sportrent.services.document_store import DocumentStore, get_document_store
from sportrent.services.equipment_service import get_equipment, list_equipment

router = APIRouter(tags=["Equipment"])
logger = logging.getLogger(__name__)


@router.get("", response_model=EquipmentListResponse)
def get_catalog(store: DocumentStore = Depends(get_document_store)):
    equipment = list_equipment(store)
    if not equipment:
        logger.info("No equipment found in the database")
        return {"success": True, "data": [], "count": 0, "message": "No equipment found"}

    logger.info(f"Returning {len(equipment)} equipment items")
    return {"success": True, "data": equipment, "count": len(equipment)}


@router.get("/{equipment_id}", response_model=EquipmentResponse)
def get_catalog_item(equipment_id: str, store: DocumentStore = Depends(get_document_store)):
    return {"success": True, "data": get_equipment(store, equipment_id)}
