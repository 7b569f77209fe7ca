"""
Rental Model
Table: rentals
"""
from datetime import date
from enum import Enum
import uuid

from sqlalchemy import CheckConstraint, Date, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sportrent.db.base import Base, TimestampMixin


class RentalStatus(str, Enum):
    ACTIVE = "active"


def new_rental_id() -> str:
    return uuid.uuid4().hex


class Rental(Base, TimestampMixin):
    """One user's booking of ``quantity`` units of one equipment item."""
    __tablename__ = "rentals"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_rentals_quantity_positive"),
        CheckConstraint("end_date > start_date", name="ck_rentals_date_range"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_rental_id)

    # Owner, as resolved by the identity provider
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    # No FK: equipment may be deleted while rentals still reference it
    equipment_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    # Denormalised equipment name at booking time
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Total charge: unit price x days x quantity
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RentalStatus.ACTIVE.value
    )
