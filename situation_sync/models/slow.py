"""Slow-moving sources refreshed hourly."""

from datetime import date

from sqlalchemy import Date, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from situation_sync.models.base import Base, DomainRecordMixin


class GovContract(DomainRecordMixin, Base):
    __tablename__ = "gov_contracts"

    external_id: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    recipient: Mapped[str] = mapped_column(String(300), nullable=False)
    agency: Mapped[str] = mapped_column(String(300), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    award_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)


class Layoff(DomainRecordMixin, Base):
    __tablename__ = "layoffs"

    external_id: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    company: Mapped[str] = mapped_column(String(200), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    announced_at: Mapped[date] = mapped_column(Date, nullable=False, index=True)


class WorldLeader(DomainRecordMixin, Base):
    __tablename__ = "world_leaders"

    country: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    leader_name: Mapped[str] = mapped_column(String(200), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    party: Mapped[str | None] = mapped_column(String(100), nullable=True)
    took_office: Mapped[date | None] = mapped_column(Date, nullable=True)
