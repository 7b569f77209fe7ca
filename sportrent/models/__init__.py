# Import all models so they register with Base
from sportrent.models.equipment import Equipment
from sportrent.models.rental import Rental, RentalStatus

__all__ = ["Equipment", "Rental", "RentalStatus"]
