"""initial schema: domain tables and the sync-status ledger

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def _record_columns() -> list:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("data", JSON, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def _create(table: str, *columns, key: str | tuple = "external_id") -> None:
    key_cols = [key] if isinstance(key, str) else list(key)
    op.create_table(
        table,
        *_record_columns(),
        *columns,
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(*key_cols, name=f"uq_{table}_{'_'.join(key_cols)}"),
    )


def upgrade() -> None:
    _create(
        "market_data",
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("symbol", sa.String(20), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("change", sa.Float(), nullable=True),
        sa.Column("change_percent", sa.Float(), nullable=True),
        key=("type", "symbol"),
    )

    _create(
        "news_items",
        sa.Column("external_id", sa.String(200), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("link", sa.Text(), nullable=False),
        sa.Column("source", sa.String(200), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
    )
    op.create_index("ix_news_items_category", "news_items", ["category"])
    op.create_index("ix_news_items_published_at", "news_items", ["published_at"])

    _create(
        "weather_alerts",
        sa.Column("external_id", sa.String(300), nullable=False),
        sa.Column("event", sa.String(200), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("urgency", sa.String(20), nullable=False),
        sa.Column("certainty", sa.String(20), nullable=False),
        sa.Column("area_desc", sa.Text(), nullable=False),
        sa.Column("headline", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("instruction", sa.Text(), nullable=True),
        sa.Column("onset", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("geometry", JSON, nullable=True),
    )
    op.create_index("ix_weather_alerts_expires", "weather_alerts", ["expires"])

    # Hazards
    _create(
        "earthquakes",
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("magnitude", sa.Float(), nullable=False),
        sa.Column("place", sa.Text(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("depth", sa.Float(), nullable=True),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_earthquakes_timestamp", "earthquakes", ["timestamp"])

    _create(
        "grid_stress",
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("country_code", sa.String(2), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("percentile", sa.Float(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
    )

    _create(
        "outages",
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("country_code", sa.String(10), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("source", sa.String(100), nullable=False),
        sa.Column("detected_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_outages_detected_at", "outages", ["detected_at"])

    # Storms
    _create(
        "tropical_cyclones",
        sa.Column("storm_id", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("basin", sa.String(2), nullable=False),
        sa.Column("category", sa.String(5), nullable=False),
        sa.Column("max_wind", sa.Float(), nullable=False),
        sa.Column("pressure", sa.Float(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        key="storm_id",
    )

    _create(
        "convective_outlooks",
        sa.Column("day", sa.Integer(), nullable=False),
        sa.Column("outlook_type", sa.String(20), nullable=False),
        sa.Column("risk", sa.String(10), nullable=False),
        sa.Column("geometry", JSON, nullable=True),
        sa.Column("valid_time", sa.DateTime(timezone=True), nullable=True),
        key=("day", "outlook_type", "risk"),
    )

    # Intel
    _create(
        "predictions",
        sa.Column("external_id", sa.String(200), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("probability", sa.Float(), nullable=False),
        sa.Column("volume", sa.Float(), nullable=False),
    )

    _create(
        "whale_transactions",
        sa.Column("tx_hash", sa.String(200), nullable=False),
        sa.Column("blockchain", sa.String(50), nullable=False),
        sa.Column("token", sa.String(20), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("usd_value", sa.Float(), nullable=False),
        sa.Column("from_owner", sa.String(200), nullable=False),
        sa.Column("to_owner", sa.String(200), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        key="tx_hash",
    )
    op.create_index("ix_whale_transactions_timestamp", "whale_transactions", ["timestamp"])

    _create(
        "conflicts",
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("iso_code", sa.String(3), nullable=False),
        sa.Column("intensity", sa.String(20), nullable=False),
        sa.Column("fatalities", sa.Float(), nullable=False),
        sa.Column("probability", sa.Float(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
    )

    # Environmental
    _create(
        "radiation_readings",
        sa.Column("station_id", sa.String(100), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(10), nullable=False),
        sa.Column("cpm", sa.Float(), nullable=False),
        sa.Column("level", sa.String(20), nullable=False),
        sa.Column("measured_at", sa.DateTime(timezone=True), nullable=False),
        key="station_id",
    )
    op.create_index("ix_radiation_readings_measured_at", "radiation_readings", ["measured_at"])

    _create(
        "disease_outbreaks",
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("disease", sa.String(200), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("cases", sa.Integer(), nullable=True),
        sa.Column("deaths", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=False),
    )

    # Slow-moving sources
    _create(
        "gov_contracts",
        sa.Column("external_id", sa.String(200), nullable=False),
        sa.Column("recipient", sa.String(300), nullable=False),
        sa.Column("agency", sa.String(300), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("award_date", sa.Date(), nullable=False),
    )
    op.create_index("ix_gov_contracts_award_date", "gov_contracts", ["award_date"])

    _create(
        "layoffs",
        sa.Column("external_id", sa.String(200), nullable=False),
        sa.Column("company", sa.String(200), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("announced_at", sa.Date(), nullable=False),
    )
    op.create_index("ix_layoffs_announced_at", "layoffs", ["announced_at"])

    _create(
        "world_leaders",
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("leader_name", sa.String(200), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("party", sa.String(100), nullable=True),
        sa.Column("took_office", sa.Date(), nullable=True),
        key="country",
    )

    _create(
        "fed_balance",
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("total_assets", sa.Float(), nullable=False),
        sa.Column("change_weekly", sa.Float(), nullable=False),
        sa.Column("change_percent", sa.Float(), nullable=False),
        key="date",
    )

    op.create_table(
        "sync_status",
        sa.Column("function_name", sa.String(50), nullable=False),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column("duration_ms", sa.Integer(), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("last_run", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_success", sa.DateTime(timezone=True), nullable=True),
        sa.Column("run_count", sa.Integer(), nullable=False),
        sa.Column("error_count", sa.Integer(), nullable=False),
        sa.Column("avg_duration_ms", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("function_name"),
    )


def downgrade() -> None:
    for table in (
        "sync_status",
        "fed_balance",
        "world_leaders",
        "layoffs",
        "gov_contracts",
        "disease_outbreaks",
        "radiation_readings",
        "conflicts",
        "whale_transactions",
        "predictions",
        "convective_outlooks",
        "tropical_cyclones",
        "outages",
        "grid_stress",
        "earthquakes",
        "weather_alerts",
        "news_items",
        "market_data",
    ):
        op.drop_table(table)
