from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from situation_sync.models.base import Base, DomainRecordMixin, JSONType


class TropicalCyclone(DomainRecordMixin, Base):
    __tablename__ = "tropical_cyclones"

    storm_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    basin: Mapped[str] = mapped_column(String(2), nullable=False)
    category: Mapped[str] = mapped_column(String(5), nullable=False)
    max_wind: Mapped[float] = mapped_column(Float, nullable=False)  # knots
    pressure: Mapped[float | None] = mapped_column(Float, nullable=True)  # mb
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lon: Mapped[float] = mapped_column(Float, nullable=False)


class ConvectiveOutlook(DomainRecordMixin, Base):
    __tablename__ = "convective_outlooks"
    __table_args__ = (
        UniqueConstraint("day", "outlook_type", "risk", name="uq_convective_outlooks_day_type_risk"),
    )

    day: Mapped[int] = mapped_column(Integer, nullable=False)
    outlook_type: Mapped[str] = mapped_column(String(20), nullable=False)
    risk: Mapped[str] = mapped_column(String(10), nullable=False)
    geometry: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    valid_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
