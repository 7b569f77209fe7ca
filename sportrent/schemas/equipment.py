from typing import List, Optional

from pydantic import BaseModel


class EquipmentOut(BaseModel):
    id: str
    name: str
    price: float
    stock: int
    category: Optional[str] = None
    detail: Optional[str] = None
    image: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class EquipmentListResponse(BaseModel):
    success: bool = True
    data: List[EquipmentOut]
    count: int
    message: Optional[str] = None


class EquipmentResponse(BaseModel):
    success: bool = True
    data: EquipmentOut
