import datetime as dt

from sqlalchemy import Date, Float
from sqlalchemy.orm import Mapped, mapped_column

from situation_sync.models.base import Base, DomainRecordMixin


class FedBalance(DomainRecordMixin, Base):
    """Weekly Federal Reserve total assets (FRED series WALCL)."""

    __tablename__ = "fed_balance"

    date: Mapped[dt.date] = mapped_column(Date, unique=True, nullable=False)
    total_assets: Mapped[float] = mapped_column(Float, nullable=False)  # dollars
    change_weekly: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    change_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
