from sqlalchemy import CheckConstraint, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sportrent.db.base import Base, TimestampMixin


class Equipment(Base, TimestampMixin):
    """Rentable catalog item. ``stock`` counts units not currently rented out."""
    __tablename__ = "equipment"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_equipment_stock_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category: Mapped[str] = mapped_column(String(100), nullable=True, index=True)
    detail: Mapped[str] = mapped_column(Text, nullable=True)
    image: Mapped[str] = mapped_column(String(500), nullable=True)
