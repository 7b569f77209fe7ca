"""
Rental Schemas
Pydantic v2 models for the rental endpoints. Field names follow the
front end's camelCase JSON.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, StrictInt


class RentalCreate(BaseModel):
    """POST /api/rentals body.

    Every field is optional here; which ones are missing is reported by the
    ledger so the caller gets one error naming all of them.
    """
    model_config = ConfigDict(extra="ignore")

    equipmentId: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    quantity: Optional[StrictInt] = None
    name: Optional[str] = None
    price: Optional[float] = None


class RentalOut(BaseModel):
    id: str
    userId: str
    equipmentId: str
    name: str
    price: float
    quantity: int
    startDate: str
    endDate: str
    status: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class RentalListResponse(BaseModel):
    data: List[RentalOut]


class RentalDeleteResponse(BaseModel):
    success: bool = True
    message: str
