from sportrent.api.routes.equipment import router as equipment_router
from sportrent.api.routes.rentals import router as rentals_router, legacy_router as legacy_rentals_router

__all__ = [
    "equipment_router",
    "rentals_router",
    "legacy_rentals_router",
]
