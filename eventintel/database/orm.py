"""SQLAlchemy ORM models for notification targeting.

Usage:
    from eventintel.database.orm import NotificationPreference, NotificationHistory
    from eventintel.database.connection import get_session
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Index,
    MetaData,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Naming convention for constraints and indexes (deterministic names for migrations)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all ORM models with naming convention."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class NotificationPreference(Base):
    """One row of notification settings per user."""
    __tablename__ = "notification_preferences"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    notifications_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    email_notifications: Mapped[bool] = mapped_column(Boolean, default=False)
    push_notifications: Mapped[bool] = mapped_column(Boolean, default=False)

    news_breaking: Mapped[bool] = mapped_column(Boolean, default=True)
    news_high_impact: Mapped[bool] = mapped_column(Boolean, default=True)
    news_medium_impact: Mapped[bool] = mapped_column(Boolean, default=True)
    news_low_impact: Mapped[bool] = mapped_column(Boolean, default=False)

    news_crypto: Mapped[bool] = mapped_column(Boolean, default=True)
    news_forex: Mapped[bool] = mapped_column(Boolean, default=True)
    news_stocks: Mapped[bool] = mapped_column(Boolean, default=True)
    news_commodities: Mapped[bool] = mapped_column(Boolean, default=True)
    news_indices: Mapped[bool] = mapped_column(Boolean, default=True)
    news_economic: Mapped[bool] = mapped_column(Boolean, default=True)
    news_central_bank: Mapped[bool] = mapped_column(Boolean, default=True)
    news_geopolitical: Mapped[bool] = mapped_column(Boolean, default=True)

    signal_strong_buy: Mapped[bool] = mapped_column(Boolean, default=True)
    signal_buy: Mapped[bool] = mapped_column(Boolean, default=True)
    signal_sell: Mapped[bool] = mapped_column(Boolean, default=True)
    signal_strong_sell: Mapped[bool] = mapped_column(Boolean, default=True)

    calendar_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    calendar_high_impact: Mapped[bool] = mapped_column(Boolean, default=True)
    calendar_medium_impact: Mapped[bool] = mapped_column(Boolean, default=False)
    calendar_low_impact: Mapped[bool] = mapped_column(Boolean, default=False)

    quiet_hours_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    quiet_hours_start: Mapped[str] = mapped_column(String(5), default="22:00")
    quiet_hours_end: Mapped[str] = mapped_column(String(5), default="08:00")
    timezone: Mapped[str] = mapped_column(String(64), default="UTC")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class NotificationHistory(Base):
    """A notification stored in a user's in-app history."""
    __tablename__ = "notification_history"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str | None] = mapped_column(String(32))
    action_url: Mapped[str | None] = mapped_column(Text)
    related_id: Mapped[str | None] = mapped_column(String(128))
    related_type: Mapped[str | None] = mapped_column(String(32))
    # "metadata" is reserved on declarative classes
    extra_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSONB, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_notification_history_user_created", "user_id", "created_at"),
    )
