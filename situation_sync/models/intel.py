"""Prediction markets, large on-chain transfers and conflict forecasts."""

from datetime import datetime

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from situation_sync.models.base import Base, DomainRecordMixin


class Prediction(DomainRecordMixin, Base):
    __tablename__ = "predictions"

    external_id: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    probability: Mapped[float] = mapped_column(Float, nullable=False)
    volume: Mapped[float] = mapped_column(Float, nullable=False)


class WhaleTransaction(DomainRecordMixin, Base):
    __tablename__ = "whale_transactions"

    tx_hash: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    blockchain: Mapped[str] = mapped_column(String(50), nullable=False)
    token: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    usd_value: Mapped[float] = mapped_column(Float, nullable=False)
    from_owner: Mapped[str] = mapped_column(String(200), nullable=False)
    to_owner: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)


class Conflict(DomainRecordMixin, Base):
    __tablename__ = "conflicts"

    external_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    iso_code: Mapped[str] = mapped_column(String(3), nullable=False)
    intensity: Mapped[str] = mapped_column(String(20), nullable=False)
    fatalities: Mapped[float] = mapped_column(Float, nullable=False)
    probability: Mapped[float] = mapped_column(Float, nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lon: Mapped[float] = mapped_column(Float, nullable=False)
