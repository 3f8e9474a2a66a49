from sqlalchemy import String, Integer, DateTime, JSON, Text, Table, Column, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, timezone
from fleet_admin.db.session import Base

car_colors = Table(
    "car_colors",
    Base.metadata,
    Column("car_id", String(36), ForeignKey("cars.id", ondelete="CASCADE"), primary_key=True),
    Column("color_name", String(40), ForeignKey("colors.name", ondelete="CASCADE"), primary_key=True),
)


class Color(Base):
    __tablename__ = "colors"

    name: Mapped[str] = mapped_column(String(40), primary_key=True)


class Car(Base):
    __tablename__ = "cars"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    license_plate: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    manufacturer: Mapped[str] = mapped_column(String(80))
    model: Mapped[str] = mapped_column(String(80))
    year: Mapped[int] = mapped_column(Integer)
    category: Mapped[str] = mapped_column(String(20))
    body_type: Mapped[str] = mapped_column(String(20))
    fuel: Mapped[str] = mapped_column(String(20))
    transmission: Mapped[str] = mapped_column(String(20))
    seats: Mapped[int] = mapped_column(Integer)
    small_luggage: Mapped[int] = mapped_column(Integer, default=0)
    large_luggage: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="available", index=True)  # available|rented|maintenance|inactive|reserved
    tires: Mapped[str] = mapped_column(String(20))

    vin: Mapped[str] = mapped_column(String(40))
    engine_number: Mapped[str] = mapped_column(String(40))
    odometer: Mapped[int] = mapped_column(Integer, default=0)

    # 10 prices keyed by RENTAL_DAY_THRESHOLDS; monthly_prices is the 12-month variant
    daily_prices: Mapped[list] = mapped_column(JSON, default=list)
    monthly_prices: Mapped[list | None] = mapped_column(JSON, nullable=True)
    images: Mapped[list] = mapped_column(JSON, default=list)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    service_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    known_damages: Mapped[str | None] = mapped_column(Text, nullable=True)

    first_registration: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    fleet_joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    inspection_valid_until: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    next_service_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    colors: Mapped[list[Color]] = relationship(secondary=car_colors, lazy="selectin")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def label(self) -> str:
        return f"{self.manufacturer} {self.model}".strip()
