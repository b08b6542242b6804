"""Latest quote per tracked instrument."""

from sqlalchemy import Float, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from situation_sync.models.base import Base, DomainRecordMixin


class MarketData(DomainRecordMixin, Base):
    __tablename__ = "market_data"
    __table_args__ = (UniqueConstraint("type", "symbol", name="uq_market_data_type_symbol"),)

    type: Mapped[str] = mapped_column(String(20), nullable=False)  # crypto | index | sector | commodity
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    price: Mapped[float] = mapped_column(Float, nullable=False)
    change: Mapped[float | None] = mapped_column(Float, nullable=True)
    change_percent: Mapped[float | None] = mapped_column(Float, nullable=True)
